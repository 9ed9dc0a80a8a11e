"""Models, caching, authentication, health checks and helpers for a marketplace API."""

__version__ = "0.1.0"