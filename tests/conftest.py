"""Shared pytest fixtures and configuration for all tests."""

from datetime import datetime, timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from clickykids import (
    EngineSettings,
    MemoryBackend,
    ProfileRegistry,
    ProgressEngine,
    ProgressTracker,
    RewardsEvaluator,
    StateStore,
)


class FakeClock:
    """Controllable replacement for ``datetime.now``."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)

    def set(self, value: datetime) -> None:
        self.now = value


@pytest.fixture
def clock():
    """Clock pinned to a fixed morning; tests move it explicitly."""
    return FakeClock(datetime(2024, 1, 1, 9, 0, 0))


class BrokenRedis:
    """Stub with the redis.asyncio surface that fails every call."""

    async def get(self, name):
        raise RedisConnectionError("connection refused")

    async def set(self, name, value):
        raise RedisConnectionError("connection refused")

    async def delete(self, *names):
        raise RedisConnectionError("connection refused")

    async def aclose(self):
        pass


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return StateStore(backend, key_prefix="test")


@pytest.fixture
def broken_store():
    """Store whose backend is unreachable."""
    return StateStore(BrokenRedis(), key_prefix="test")


@pytest.fixture
async def tracker(store, clock):
    """Progress tracker bound to profile ``p1``."""
    tracker = ProgressTracker(store, clock=clock)
    await tracker.load("p1")
    return tracker


@pytest.fixture
async def rewards(store, clock):
    """Rewards evaluator bound to profile ``p1``."""
    evaluator = RewardsEvaluator(store, clock=clock)
    await evaluator.load("p1")
    return evaluator


@pytest.fixture
def registry(store, clock):
    return ProfileRegistry(store, clock=clock)


@pytest.fixture
async def engine(store, clock):
    """
    Started engine over the in-memory store.

    Stopped automatically after the test.
    """
    engine = ProgressEngine(EngineSettings(), store=store, clock=clock)
    await engine.start()
    yield engine
    await engine.stop()
