"""Structural typing for the redis.asyncio client surface we rely on."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, Optional, Protocol


class AsyncRedisProtocol(Protocol):
    """Subset of ``redis.asyncio.Redis`` used by the state store."""

    def get(self, name: str) -> Awaitable[Optional[str]]: ...

    def set(self, name: str, value: str) -> Awaitable[Any]: ...

    def delete(self, *names: str) -> Awaitable[int]: ...

    def aclose(self) -> Awaitable[None]: ...
