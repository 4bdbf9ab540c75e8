"""Per-profile JSON state persistence over a Redis-style key-value backend."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, TypeVar

from pydantic import BaseModel, ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .errors import StoreError
from .redis_types import AsyncRedisProtocol

if TYPE_CHECKING:
    from .config import EngineSettings

__all__ = ["MemoryBackend", "StateKey", "StateStore", "create_backend"]

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Failures a backend can raise on get/set. All of them are recovered locally.
# UnicodeDecodeError comes from a decoding client reading a non-UTF-8 value.
_BACKEND_ERRORS = (RedisError, OSError, UnicodeDecodeError, StoreError)


@dataclass(frozen=True, slots=True)
class StateKey:
    """Namespaced address of one persisted blob, e.g. ``("progress", "p1")``."""

    kind: str
    profile_id: str

    def render(self, prefix: str = "") -> str:
        """Return the flat backend key."""
        base = f"{self.kind}:{self.profile_id}"
        return f"{prefix}:{base}" if prefix else base


class MemoryBackend:
    """
    In-process backend with the same async surface as ``redis.asyncio.Redis``.

    ``max_bytes`` caps the total UTF-8 size of stored values, like a browser
    storage quota. A write that would exceed it raises ``StoreError``.
    """

    def __init__(
        self,
        data: Optional[dict[str, str]] = None,
        *,
        max_bytes: Optional[int] = None,
    ):
        self._data: dict[str, str] = dict(data or {})
        self._lock = asyncio.Lock()
        self.max_bytes = max_bytes

    def used_bytes(self) -> int:
        return sum(len(v.encode("utf-8")) for v in self._data.values())

    async def get(self, name: str) -> Optional[str]:
        return self._data.get(name)

    async def set(self, name: str, value: str) -> bool:
        async with self._lock:
            if self.max_bytes is not None:
                current = self._data.get(name)
                used = self.used_bytes() - (
                    len(current.encode("utf-8")) if current is not None else 0
                )
                if used + len(value.encode("utf-8")) > self.max_bytes:
                    raise StoreError(name, f"quota of {self.max_bytes} bytes exceeded")
            self._data[name] = value
        return True

    async def delete(self, *names: str) -> int:
        removed = 0
        async with self._lock:
            for name in names:
                if self._data.pop(name, None) is not None:
                    removed += 1
        return removed

    async def aclose(self) -> None:
        logger.debug("MemoryBackend closed")


class StateStore:
    """
    Load and save pydantic state models as JSON blobs.

    Reads never raise: a missing key, a backend failure or a blob that does
    not validate all yield the model's default instance. Writes never raise
    either; they report success as a bool and log failures.
    """

    def __init__(self, backend: AsyncRedisProtocol, *, key_prefix: str = ""):
        """
        Initialize state store.

        Args:
            backend: redis.asyncio client or ``MemoryBackend``
            key_prefix: Namespace prepended to every key
        """
        self._backend = backend
        self.key_prefix = key_prefix

    @property
    def backend(self) -> AsyncRedisProtocol:
        return self._backend

    def key(self, state_key: StateKey) -> str:
        return state_key.render(self.key_prefix)

    async def load(self, state_key: StateKey, model: type[M]) -> M:
        """Return the persisted state for ``state_key`` or a default instance."""
        key = self.key(state_key)
        try:
            raw = await self._backend.get(key)
        except _BACKEND_ERRORS as e:
            logger.warning("State read failed", exc_info=e, extra={"key": key})
            return model()

        if raw is None:
            return model()

        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Discarding unreadable state",
                extra={"key": key, "errors": e.error_count()},
            )
            return model()

    async def save(self, state_key: StateKey, state: BaseModel) -> bool:
        """Persist ``state``; return False if the backend rejected the write."""
        key = self.key(state_key)
        try:
            await self._backend.set(key, state.model_dump_json())
        except _BACKEND_ERRORS as e:
            logger.warning("State write failed", exc_info=e, extra={"key": key})
            return False
        return True

    async def delete(self, state_key: StateKey) -> None:
        """Remove a persisted blob. Missing keys are ignored."""
        key = self.key(state_key)
        try:
            await self._backend.delete(key)
        except _BACKEND_ERRORS as e:
            logger.warning("State delete failed", exc_info=e, extra={"key": key})

    async def aclose(self) -> None:
        await self._backend.aclose()


def create_backend(settings: "EngineSettings") -> AsyncRedisProtocol:
    """Build the backend selected by ``settings.store.backend``."""
    if settings.store.backend == "redis":
        logger.info("Using Redis state backend", extra={"redis_url": settings.redis.url})
        return Redis.from_url(
            settings.redis.url,
            decode_responses=settings.redis.decode_responses,
            socket_timeout=settings.redis.socket_timeout,
        )
    return MemoryBackend(max_bytes=settings.store.memory_quota_bytes)
