"""
Durable progress snapshot storage.

ProgressStore is the persistence seam of the survey wizard: a key/value store
of encoded snapshots with no knowledge of survey semantics beyond the codec.

Backends:
    - InMemoryProgressStore: process-local dict, for tests and single-process hosts
    - RedisProgressStore: Redis with key TTL and a bounded local copy
    - SqlProgressStore: SQLAlchemy table via async sessions (aiosqlite or any async driver)

Contract shared by all backends:
    - save() overwrites any prior value in a single write
    - load() returns None for absent keys; corrupt payloads are deleted and
      reported as absent so they are not retried
    - delete() is idempotent
    - staleness is decided by is_fresh(), lazily, by the caller at load time
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from survey_engine.config.survey import RETENTION_WINDOW
from survey_engine.lib.exceptions import ExternalServiceError, SnapshotDecodeError
from survey_engine.models.base import Base
from survey_engine.models.progress_record import SurveyProgressRecord
from survey_engine.models.snapshot import ProgressSnapshot, decode_snapshot, encode_snapshot
from survey_engine.services.redis_service import RedisService, get_redis_service

logger = logging.getLogger(__name__)


def is_fresh(
    snapshot: ProgressSnapshot,
    now: datetime,
    retention: timedelta = RETENTION_WINDOW,
) -> bool:
    """True if the snapshot was saved less than retention ago."""
    return now - snapshot.saved_at < retention


@runtime_checkable
class ProgressStore(Protocol):
    """Key/value store for progress snapshots."""

    async def save(self, key: str, snapshot: ProgressSnapshot) -> None:
        """Write snapshot under key, replacing any prior value."""
        ...

    async def load(self, key: str) -> ProgressSnapshot | None:
        """Read the snapshot under key, or None if absent or corrupt."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


def _decode_or_none(key: str, raw: str) -> ProgressSnapshot | None:
    try:
        return decode_snapshot(raw)
    except SnapshotDecodeError as e:
        logger.warning(
            "Discarding corrupt progress snapshot",
            extra={"key": key, "error": str(e)},
        )
        return None


class InMemoryProgressStore:
    """Process-local snapshot store holding encoded payloads."""

    def __init__(self) -> None:
        self._payloads: dict[str, str] = {}

    async def save(self, key: str, snapshot: ProgressSnapshot) -> None:
        self._payloads[key] = encode_snapshot(snapshot)

    async def load(self, key: str) -> ProgressSnapshot | None:
        raw = self._payloads.get(key)
        if raw is None:
            return None
        snapshot = _decode_or_none(key, raw)
        if snapshot is None:
            self._payloads.pop(key, None)
        return snapshot

    async def delete(self, key: str) -> None:
        self._payloads.pop(key, None)

    def raw(self, key: str) -> str | None:
        """Stored payload for key, exactly as written."""
        return self._payloads.get(key)

    def put_raw(self, key: str, payload: str) -> None:
        """Store a payload verbatim (used to seed foreign or corrupt data)."""
        self._payloads[key] = payload

    def __len__(self) -> int:
        return len(self._payloads)


@dataclass
class _LocalEntry:
    """Process-local copy of a key; payload None marks a pending delete."""

    payload: str | None
    written_at: float


class RedisProgressStore:
    """
    Redis-backed snapshot store with a bounded process-local copy.

    Keys expire in Redis after the retention window as a backstop; the wizard
    still checks freshness on load. Every save and delete lands in the local
    copy first and is read from there first, so a Redis outage never makes a
    load return an older payload or a deleted one. Deletes leave a tombstone
    until Redis confirms them.

    The local copy is bounded: entries older than the retention window are
    dropped, and the least recently used entry is evicted once max_entries
    is reached.
    """

    KEY_PREFIX = "survey:"
    MAX_ENTRIES = 10000

    def __init__(
        self,
        redis_service: RedisService | None = None,
        retention: timedelta = RETENTION_WINDOW,
        max_entries: int = MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._redis = redis_service or get_redis_service()
        self._ttl = int(retention.total_seconds())
        self._max_entries = max_entries
        self._clock = clock
        self._local: OrderedDict[str, _LocalEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    def _redis_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    def __len__(self) -> int:
        return len(self._local)

    async def save(self, key: str, snapshot: ProgressSnapshot) -> None:
        payload = encode_snapshot(snapshot)
        async with self._lock:
            self._remember(key, payload)
        try:
            stored = await self._redis.set(self._redis_key(key), payload, ttl=self._ttl)
        except Exception as e:  # Intentional catch-all: Redis failure must not lose the write
            logger.warning(
                "Redis set failed for survey progress, keeping local copy only",
                extra={"key": key, "error": type(e).__name__},
            )
            return
        if not stored:
            logger.debug("Redis unavailable, survey progress held in memory", extra={"key": key})

    async def load(self, key: str) -> ProgressSnapshot | None:
        async with self._lock:
            entry = self._lookup(key)
        if entry is not None and entry.payload is None:
            await self._confirm_delete(key)
            return None

        raw = entry.payload if entry is not None else None
        if raw is None:
            try:
                raw = await self._redis.get(self._redis_key(key))
            except Exception as e:  # Intentional catch-all: Redis failure reads as absent
                logger.warning(
                    "Redis get failed for survey progress",
                    extra={"key": key, "error": type(e).__name__},
                )
                return None
            if raw is None:
                return None
            async with self._lock:
                self._remember(key, raw)

        snapshot = _decode_or_none(key, raw)
        if snapshot is None:
            await self.delete(key)
        return snapshot

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._remember(key, None)
        await self._confirm_delete(key)

    async def _confirm_delete(self, key: str) -> None:
        """Delete key in Redis; drop the tombstone once Redis has answered."""
        try:
            await self._redis.delete(self._redis_key(key))
        except Exception as e:  # Intentional catch-all: tombstone stays until Redis answers
            logger.warning(
                "Redis delete failed for survey progress, tombstone kept",
                extra={"key": key, "error": type(e).__name__},
            )
            return
        if not self._redis.available:
            return
        async with self._lock:
            entry = self._local.get(key)
            if entry is not None and entry.payload is None:
                del self._local[key]

    def _remember(self, key: str, payload: str | None) -> None:
        self._cleanup_expired()
        self._local.pop(key, None)
        while len(self._local) >= self._max_entries:
            self._local.popitem(last=False)
        self._local[key] = _LocalEntry(payload=payload, written_at=self._clock())

    def _lookup(self, key: str) -> _LocalEntry | None:
        entry = self._local.get(key)
        if entry is None:
            return None
        if self._clock() - entry.written_at >= self._ttl:
            del self._local[key]
            return None
        self._local.move_to_end(key)
        return entry

    def _cleanup_expired(self) -> None:
        now = self._clock()
        expired = [k for k, entry in self._local.items() if now - entry.written_at >= self._ttl]
        for k in expired:
            del self._local[k]


class SqlProgressStore:
    """
    SQLAlchemy-backed snapshot store (async sessions).

    Each call opens its own AsyncSession from the factory and commits before
    returning, so a subsequent load always sees the previous save. With
    create_schema=True the table is created on first use.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        create_schema: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._schema_pending = create_schema
        self._schema_lock = asyncio.Lock()

    async def _ensure_schema(self) -> None:
        if not self._schema_pending:
            return
        async with self._schema_lock:
            if not self._schema_pending:
                return
            engine = self._session_factory.kw["bind"]
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self._schema_pending = False

    async def save(self, key: str, snapshot: ProgressSnapshot) -> None:
        payload = encode_snapshot(snapshot)
        try:
            await self._ensure_schema()
            async with self._session_factory() as session, session.begin():
                record = await session.get(SurveyProgressRecord, key)
                if record is None:
                    session.add(SurveyProgressRecord(
                        session_key=key,
                        payload=payload,
                        saved_at=snapshot.saved_at,
                    ))
                else:
                    record.payload = payload
                    record.saved_at = snapshot.saved_at
        except SQLAlchemyError as e:
            raise ExternalServiceError(f"failed to save survey progress for {key}") from e

    async def load(self, key: str) -> ProgressSnapshot | None:
        try:
            await self._ensure_schema()
            async with self._session_factory() as session:
                record = await session.get(SurveyProgressRecord, key)
                raw = record.payload if record is not None else None
        except SQLAlchemyError as e:
            raise ExternalServiceError(f"failed to load survey progress for {key}") from e
        if raw is None:
            return None

        snapshot = _decode_or_none(key, raw)
        if snapshot is None:
            await self.delete(key)
        return snapshot

    async def delete(self, key: str) -> None:
        try:
            await self._ensure_schema()
            async with self._session_factory() as session, session.begin():
                record = await session.get(SurveyProgressRecord, key)
                if record is not None:
                    await session.delete(record)
        except SQLAlchemyError as e:
            raise ExternalServiceError(f"failed to delete survey progress for {key}") from e


__all__ = [
    "InMemoryProgressStore",
    "ProgressStore",
    "RedisProgressStore",
    "SqlProgressStore",
    "is_fresh",
]
