"""Shared fixtures: an in-memory Redis stand-in for cache tests."""

import fnmatch
import sys
sys.path.append(".")

import pytest
import redis


class FakeRedis:
    """The handful of string commands AnalyticsStore uses."""

    def __init__(self):
        self.data = {}
        self.expiry = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        if ex is not None:
            self.expiry[key] = ex
        return True

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed

    def scan_iter(self, match="*"):
        return iter([k for k in list(self.data) if fnmatch.fnmatchcase(k, match)])


class BrokenRedis(FakeRedis):
    """Every command fails as if the server were unreachable."""

    def get(self, key):
        raise redis.exceptions.ConnectionError("connection refused")

    def set(self, key, value, ex=None):
        raise redis.exceptions.ConnectionError("connection refused")


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def broken_redis():
    return BrokenRedis()
