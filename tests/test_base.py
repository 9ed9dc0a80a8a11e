import json
from datetime import datetime

import pytest

from ragamaya.cache.base import (
    Cache,
    CacheHelper,
    CacheManager,
    CacheMiss,
    CacheOptions,
)


class DictCache(Cache):
    def __init__(self, fail_set=False, fail_close=False):
        self.data = {}
        self.expirations = {}
        self.invalidated = []
        self.closed = False
        self.fail_set = fail_set
        self.fail_close = fail_close

    def get(self, key):
        if key not in self.data:
            raise CacheMiss(key)
        return self.data[key]

    def set(self, key, value, expiration=0):
        if self.fail_set:
            raise ConnectionError("down")
        self.data[key] = value
        self.expirations[key] = expiration

    def delete(self, key):
        self.data.pop(key, None)

    def exists(self, key):
        return key in self.data

    def flush(self):
        self.data.clear()

    def invalidate_pattern(self, pattern):
        self.invalidated.append(pattern)

    def close(self):
        if self.fail_close:
            raise OSError("boom")
        self.closed = True


def test_cache_contract_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Cache()


def test_cache_context_manager_closes():
    with DictCache() as cache:
        helper = CacheHelper(cache)
        helper.set_json("k", {"n": 1}, 5)
        assert helper.get_json("k") == {"n": 1}
        assert cache.closed is False
    assert cache.closed is True


def test_manager_cache_key_uses_default_prefix():
    assert CacheManager().cache_key("user:1") == "cache:user:1"


def test_manager_cache_key_uses_custom_prefix():
    manager = CacheManager(CacheOptions(prefix="app:"))
    assert manager.cache_key("k") == "app:k"


def test_manager_register_and_get():
    manager = CacheManager(None)
    primary = DictCache()
    manager.register_cache("primary", primary)
    assert manager.get_cache("primary") is primary


def test_manager_get_missing_raises():
    with pytest.raises(KeyError, match="cache 'fallback' not found"):
        CacheManager().get_cache("fallback")


def test_manager_close_all_closes_every_cache():
    manager = CacheManager()
    first, second = DictCache(), DictCache()
    manager.register_cache("a", first)
    manager.register_cache("b", second)
    manager.close_all()
    assert first.closed and second.closed


def test_manager_close_all_reports_failing_cache():
    manager = CacheManager()
    manager.register_cache("broken", DictCache(fail_close=True))
    with pytest.raises(RuntimeError, match="failed to close cache 'broken'"):
        manager.close_all()


def test_helper_json_round_trip():
    helper = CacheHelper(DictCache(), None)
    value = {"message": "hello", "items": [1, 2, 3], "ok": True}
    helper.set_json("k", value, 60)
    assert helper.get_json("k") == value


def test_helper_set_json_applies_default_ttl():
    cache = DictCache()
    helper = CacheHelper(cache, CacheOptions(default_ttl=42))
    helper.set_json("k", {"a": 1})
    assert cache.expirations["k"] == 42


def test_helper_set_json_keeps_explicit_ttl():
    cache = DictCache()
    helper = CacheHelper(cache, CacheOptions(default_ttl=42))
    helper.set_json("k", [1], 7)
    assert cache.expirations["k"] == 7


def test_helper_set_json_stores_json_bytes():
    cache = DictCache()
    CacheHelper(cache).set_json("k", {"a": 1}, 10)
    assert json.loads(cache.data["k"]) == {"a": 1}


def test_helper_set_json_encodes_datetimes():
    moment = datetime(2024, 1, 1, 12, 30)
    helper = CacheHelper(DictCache())
    helper.set_json("k", {"time": moment}, 10)
    assert datetime.fromisoformat(helper.get_json("k")["time"]) == moment


def test_helper_get_json_missing_raises():
    with pytest.raises(CacheMiss):
        CacheHelper(DictCache()).get_json("absent")


def test_get_or_set_computes_once():
    cache = DictCache()
    helper = CacheHelper(cache)
    calls = []

    def fetch():
        calls.append(1)
        return b"payload", 15

    assert helper.get_or_set("k", fetch) == b"payload"
    assert helper.get_or_set("k", fetch) == b"payload"
    assert len(calls) == 1
    assert cache.expirations["k"] == 15


def test_get_or_set_propagates_fetch_error():
    def fetch():
        raise ValueError("no source")

    with pytest.raises(ValueError, match="no source"):
        CacheHelper(DictCache()).get_or_set("k", fetch)


def test_get_or_set_ignores_store_failure():
    helper = CacheHelper(DictCache(fail_set=True))
    assert helper.get_or_set("k", lambda: (b"data", 5)) == b"data"


def test_get_or_set_json_returns_decoded_value_and_caches():
    cache = DictCache()
    helper = CacheHelper(cache)
    result = helper.get_or_set_json("k", lambda: ({"pair": (1, 2)}, 30))
    assert result == {"pair": [1, 2]}
    assert helper.get_json("k") == result


def test_get_or_set_json_uses_cache_when_present():
    helper = CacheHelper(DictCache())
    helper.set_json("k", {"cached": True}, 10)

    def fetch():
        raise AssertionError("should not be called")

    assert helper.get_or_set_json("k", fetch) == {"cached": True}


def test_get_or_set_json_recovers_from_corrupt_entry():
    cache = DictCache()
    cache.data["k"] = b"not json"
    helper = CacheHelper(cache)
    assert helper.get_or_set_json("k", lambda: ([1, 2], 10)) == [1, 2]
    assert json.loads(cache.data["k"]) == [1, 2]


def test_helper_invalidate_pattern_delegates():
    cache = DictCache()
    CacheHelper(cache).invalidate_pattern("users:*")
    assert cache.invalidated == ["users:*"]