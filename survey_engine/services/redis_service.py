"""
Redis access for survey progress.

RedisService owns one lazily created `redis.asyncio` client. When the server
cannot be reached the service reports "unavailable" instead of raising, and
waits `reconnect_interval` seconds before it tries to connect again, so a
dead Redis costs one failed ping per interval rather than one per request.

Callers that need durability regardless (RedisProgressStore) keep their own
in-process copy and treat a False / None result as "not stored remotely".
"""

import dataclasses
import json
import logging
import os
import time
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

import redis.asyncio as redis

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_RECONNECT_INTERVAL = 30.0


class SurveyJSONEncoder(json.JSONEncoder):
    """
    JSON encoder for survey payloads and log fields.

    - dataclasses → dict
    - datetime/date → ISO-8601 string
    - timedelta → seconds
    - Enum → value
    - set/frozenset → sorted list
    - anything else → str(), never raises
    """

    def default(self, obj: Any) -> Any:
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, timedelta):
            return obj.total_seconds()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (set, frozenset)):
            return sorted(obj, key=str)
        try:
            return str(obj)
        except Exception:  # Intentional catch-all: encoder must always produce output
            return f"<non-serializable: {type(obj).__name__}>"


def _tls_kwargs(redis_url: str) -> dict[str, Any]:
    """Certificate-verifying TLS options for rediss:// URLs (custom CA via REDIS_TLS_CERT_PATH)."""
    if not redis_url.startswith("rediss://"):
        return {}
    tls: dict[str, Any] = {"ssl_cert_reqs": "required", "ssl_check_hostname": True}
    cert_path = os.environ.get("REDIS_TLS_CERT_PATH")
    if cert_path:
        tls["ssl_ca_certs"] = cert_path
    return tls


class RedisService:
    """Async Redis wrapper that degrades to "unavailable" instead of raising on connect."""

    def __init__(
        self,
        redis_url: str | None = None,
        reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL,
    ) -> None:
        self._redis_url = redis_url or os.environ.get("REDIS_URL", DEFAULT_REDIS_URL)
        self._reconnect_interval = reconnect_interval
        self._client: redis.Redis | None = None
        self._retry_at = 0.0

    @property
    def available(self) -> bool:
        """True once a client has connected (and not been closed)."""
        return self._client is not None

    async def _connected_client(self) -> redis.Redis | None:
        if self._client is not None:
            return self._client
        if time.monotonic() < self._retry_at:
            return None

        client = redis.from_url(  # type: ignore[no-untyped-call]
            self._redis_url,
            decode_responses=True,
            **_tls_kwargs(self._redis_url),
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError, OSError) as e:
            self._retry_at = time.monotonic() + self._reconnect_interval
            logger.warning(
                "Redis unavailable, survey progress stays in process memory",
                extra={"error": type(e).__name__, "retry_in_seconds": self._reconnect_interval},
            )
            await client.aclose()
            return None

        logger.info("Connected to Redis for survey progress")
        self._client = client
        return client

    async def get(self, key: str) -> str | None:
        """Stored text for key, or None if absent or Redis is unavailable."""
        client = await self._connected_client()
        if client is None:
            return None
        value = await client.get(key)
        return None if value is None else str(value)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """
        Store value under key, expiring after ttl seconds when given.

        Text is written as-is so canonical snapshot payloads keep their exact
        bytes; other values go through SurveyJSONEncoder.

        Returns:
            True if Redis acknowledged the write
        """
        client = await self._connected_client()
        if client is None:
            return False
        payload = value if isinstance(value, str) else json.dumps(value, cls=SurveyJSONEncoder)
        if ttl:
            return bool(await client.setex(key, ttl, payload))
        return bool(await client.set(key, payload))

    async def delete(self, key: str) -> bool:
        """Remove key. False if it did not exist or Redis is unavailable."""
        client = await self._connected_client()
        if client is None:
            return False
        return bool(await client.delete(key))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_redis_service: RedisService | None = None


def get_redis_service() -> RedisService:
    """Process-wide RedisService built from REDIS_URL."""
    global _redis_service
    if _redis_service is None:
        _redis_service = RedisService()
    return _redis_service
