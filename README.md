# ragamaya

Building blocks for a marketplace API: dataclasses for users, sellers,
products, orders, payments and wallets, a caching layer with in-memory and
Redis stores, bearer-token authentication, health checks and small helpers.

## Installation

```
pip install ragamaya
```

To run the test suite:

```
pip install "ragamaya[test]"
pytest
```

## Modules

- `ragamaya.models`: dataclasses for every stored record (`Users`, `Sellers`,
  `Products`, `Orders`, `Payments`, `Wallet`, `Files`, `RefreshToken` and
  more) and the enums `Roles` and `ProductType`. `Sellers.to_jwt_payload()`
  returns the `SellerJWTPayload` embedded in access tokens.
- `ragamaya.exceptions`: `ApiException`, carrying an HTTP status and a
  message (`to_dict()` gives the JSON body); the standard `ERR_*` messages;
  `new_validation_exception()`; and `parse_database_error()`, which maps
  `RecordNotFoundError`, `DuplicatedKeyError`, `ForeignKeyViolatedError`,
  `InvalidDataError` and other errors to an `ApiException`, calling an
  optional rollback for every error but a missing record.
- `ragamaya.logger`: coloured `info`, `warning` and `error` lines, and
  `panic_error`, which logs and then raises `PanicError`.
- `ragamaya.helpers`: `encrypt_to_sha512`, `hash_password` and
  `check_password_hash` (bcrypt, raising `ApiException`), `format_file_size`,
  `format_indonesian_time`, `format_indonesian_locale_string`,
  `generate_random_string`, `is_duplicate_key_error` and the
  `commit_or_rollback` context manager for a session object.
- `ragamaya.config`: `Env.from_environ()`, `check_empty_fields()`,
  `init_env_check()` (raises `PanicError` when a required variable is empty)
  and `database_dsn()`, which builds the PostgreSQL connection string from
  the `DB_*` variables.
- `ragamaya.cache.base`: the `Cache` interface, `CacheMiss`, `CacheOptions`,
  `CacheManager` (a registry of named caches) and `CacheHelper` (JSON values,
  `get_or_set`, `get_or_set_json`).
- `ragamaya.cache.memory`: `MemoryCache`, thread-safe, with per-key expiry
  and a background sweeper stopped by `close()`.
- `ragamaya.cache.redis_store`: `RedisCache` over a `redis.Redis` client,
  with `ttl`, `set_nx`, `increment`, `decrement`, `get_many` and `set_many`.
- `ragamaya.cache.service`: `CacheService`, and example `UserService`,
  `ProductService` and `CacheStatsService` that return sample data through
  the cache.
- `ragamaya.cache.http`: WSGI middleware. `CacheMiddleware` serves
  successful GET responses from a cache and marks them `X-Cache: HIT` or
  `MISS`; `InvalidateCacheMiddleware` drops patterns after a 2xx response;
  `CacheControlMiddleware` adds a `Cache-Control` header.
- `ragamaya.tokens`: `TokenBlacklist`, revoked tokens kept in Redis until
  they expire; `TokenBlacklist.from_env()` reads `REDIS_ADDR` and
  `REDIS_PASS`.
- `ragamaya.auth`: `extract_bearer_token`, `authenticate`,
  `authenticate_seller` and `authenticate_internal`, which check HMAC-signed
  tokens and raise `ApiException` on failure.
- `ragamaya.health`: `perform_health_check()` from a database ping callable
  and a Redis client; `HealthCheck.to_dict()` and `http_status()` (503 when
  unhealthy).
- `ragamaya.httpmeta`: `no_cache_headers()`, `color_method`, `color_status`
  and `truncate_for_log`.
- `ragamaya.whatsapp`: `send()` posts a message to the Fonnte WhatsApp
  gateway and returns its response body.

## Examples

```python
from ragamaya.cache.base import CacheHelper
from ragamaya.cache.memory import MemoryCache

with MemoryCache() as cache:
    helper = CacheHelper(cache)
    helper.set_json("greeting", {"text": "halo"})
    print(helper.get_json("greeting"))   # {'text': 'halo'}
```

Checking a request's token:

```python
from ragamaya.auth import authenticate
from ragamaya.exceptions import ApiException

try:
    user = authenticate("Bearer token", secret="secret", blacklist=None)
except ApiException as exc:
    print(exc.status, exc.message)   # 403 invalid credentials
```

## What this package does not do

It is a library, not a running service. It has no command, no HTTP server
and no routes or controllers for users, sellers, products, orders or
payments. The models are plain dataclasses: nothing here creates tables or
stores them in a database. There is no file-storage upload and no payment
gateway client.