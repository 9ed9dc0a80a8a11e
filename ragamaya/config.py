"""Environment checks and database connection settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from ragamaya import logger


@dataclass
class Env:
    """Environment variables the service needs to start."""

    db_user: str = ""
    db_password: str = ""
    db_host: str = ""
    db_port: str = ""
    db_name: str = ""
    port: str = ""
    jwt_secret: str = ""
    environment: str = ""
    admin_username: str = ""
    admin_password: str = ""

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Env:
        """Read each field from the variable of the same name in upper case."""
        source = os.environ if environ is None else environ
        return cls(**{f.name: source.get(f.name.upper(), "") for f in fields(cls)})


def check_empty_fields(env: Env) -> list[str]:
    """Return the names of the variables that are empty, in declaration order."""
    return [f.name.upper() for f in fields(env) if getattr(env, f.name) == ""]


def init_env_check(environ: Mapping[str, str] | None = None) -> Env:
    """Check the environment; log and raise PanicError if anything is missing."""
    logger.info("Checking environment variables...")
    env = Env.from_environ(environ)
    missing = check_empty_fields(env)
    if missing:
        logger.panic_error("Missing environment variables: [%s]", " ".join(missing))
    logger.info("Environment variables are set!")
    return env


def database_dsn(environ: Mapping[str, str] | None = None) -> str:
    """Build the PostgreSQL connection string from the DB_* variables."""
    source = os.environ if environ is None else environ
    return "user={} password={} host={} port={} dbname={}".format(
        source.get("DB_USER", ""),
        source.get("DB_PASSWORD", ""),
        source.get("DB_HOST", ""),
        source.get("DB_PORT", ""),
        source.get("DB_NAME", ""),
    )