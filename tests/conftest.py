from __future__ import annotations

import pytest

from drawguard.config.settings import get_settings
from drawguard.domain.policies import Policy


START_MS = 1_700_000_000_000  # 2023-11-14T22:13:20Z


class FakeClock:
    def __init__(self, start: int = START_MS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakePipeline:
    """Just enough of a redis transaction pipeline for INCR / PEXPIRE NX / PTTL."""

    def __init__(self, redis: "FakeRedis") -> None:
        self._redis = redis
        self._ops: list[tuple] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc) -> None:
        self._ops.clear()

    def incr(self, key):
        self._ops.append(("incr", key))
        return self

    def pexpire(self, key, ms, nx=False):
        self._ops.append(("pexpire", key, ms, nx))
        return self

    def pttl(self, key):
        self._ops.append(("pttl", key))
        return self

    async def execute(self):
        return [self._redis.apply(op) for op in self._ops]


class FakeRedis:
    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.data: dict[str, list[int | None]] = {}
        self.closed = False

    def _live(self, key):
        item = self.data.get(key)
        if item is not None and item[1] is not None and item[1] <= self.clock():
            del self.data[key]
            return None
        return item

    def apply(self, op):
        name, key = op[0], op[1]
        item = self._live(key)
        if name == "incr":
            if item is None:
                item = self.data[key] = [0, None]
            item[0] += 1
            return item[0]
        if name == "pexpire":
            ms, nx = op[2], op[3]
            if item is None or (nx and item[1] is not None):
                return False
            item[1] = self.clock() + ms
            return True
        if name == "pttl":
            if item is None:
                return -2
            if item[1] is None:
                return -1
            return item[1] - self.clock()
        raise AssertionError(f"unexpected op {name}")

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def policy() -> Policy:
    return Policy(name="general", window_ms=60_000, max_requests=3)


@pytest.fixture
def fake_redis(clock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in ("RATE_LIMIT_BACKEND", "REDIS_DSN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
