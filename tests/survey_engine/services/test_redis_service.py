"""
Tests for the Redis service wrapper.

Covers:
- JSON encoding of dataclasses, datetimes, enums and sets
- Graceful degradation and reconnect cooldown when Redis is unreachable
- TTL writes through setex
- TLS options for rediss:// URLs
"""

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock, patch

import pytest
import redis.asyncio as redis

from survey_engine.models.snapshot import WizardSection
from survey_engine.services import redis_service
from survey_engine.services.redis_service import RedisService, SurveyJSONEncoder, _tls_kwargs
from survey_engine.services.submission import SurveySubmission


class TestSurveyJSONEncoder:
    def test_dataclass_and_datetime(self) -> None:
        submission = SurveySubmission(
            survey_id="ees-2026",
            responses={"q1": 7},
            priorities=("Leadership",),
            actions=("Training",),
            completed_at=datetime(2026, 3, 2, 9, 0, tzinfo=UTC),
            elapsed_minutes=5,
        )
        decoded = json.loads(json.dumps(submission, cls=SurveyJSONEncoder))

        assert decoded["survey_id"] == "ees-2026"
        assert decoded["completed_at"] == "2026-03-02T09:00:00+00:00"
        assert decoded["priorities"] == ["Leadership"]

    def test_enum_set_and_timedelta(self) -> None:
        payload = {
            "section": WizardSection.PART_B,
            "labels": {"b", "a"},
            "retention": timedelta(days=1),
        }
        decoded = json.loads(json.dumps(payload, cls=SurveyJSONEncoder))

        assert decoded == {"section": "part-b", "labels": ["a", "b"], "retention": 86400.0}

    def test_unknown_object_falls_back_to_str(self) -> None:
        class Opaque:
            def __str__(self) -> str:
                return "opaque"

        assert json.dumps(Opaque(), cls=SurveyJSONEncoder) == '"opaque"'


class TestRedisService:
    @pytest.mark.asyncio
    async def test_unreachable_redis_degrades(self) -> None:
        service = RedisService("redis://localhost:1/0")
        with patch.object(service, "_connected_client", AsyncMock(return_value=None)):
            assert await service.get("k") is None
            assert await service.set("k", "v") is False
            assert await service.delete("k") is False

    @pytest.mark.asyncio
    async def test_set_with_ttl_uses_setex(self) -> None:
        client = AsyncMock()
        client.setex = AsyncMock(return_value=True)
        service = RedisService("redis://localhost:6379/0")
        with patch.object(service, "_connected_client", AsyncMock(return_value=client)):
            assert await service.set("k", "payload", ttl=60) is True

        client.setex.assert_awaited_once_with("k", 60, "payload")

    @pytest.mark.asyncio
    async def test_set_encodes_non_strings(self) -> None:
        client = AsyncMock()
        client.set = AsyncMock(return_value=True)
        service = RedisService("redis://localhost:6379/0")
        with patch.object(service, "_connected_client", AsyncMock(return_value=client)):
            await service.set("k", {"section": WizardSection.PART_A})

        client.set.assert_awaited_once_with("k", '{"section": "part-a"}')

    @pytest.mark.asyncio
    async def test_failed_connect_waits_before_retrying(self) -> None:
        client = Mock()
        client.ping = AsyncMock(side_effect=redis.ConnectionError("refused"))
        client.aclose = AsyncMock()
        service = RedisService("redis://localhost:1/0", reconnect_interval=60)

        with patch.object(redis_service.redis, "from_url", return_value=client) as from_url:
            assert await service.get("k") is None
            assert await service.set("k", "v") is False

        from_url.assert_called_once()
        client.aclose.assert_awaited_once()
        assert service.available is False

    @pytest.mark.asyncio
    async def test_connects_once_and_reuses_client(self) -> None:
        client = Mock()
        client.ping = AsyncMock(return_value=True)
        client.get = AsyncMock(return_value="payload")
        client.aclose = AsyncMock()
        service = RedisService("redis://localhost:6379/0")

        with patch.object(redis_service.redis, "from_url", return_value=client) as from_url:
            assert await service.get("a") == "payload"
            assert await service.get("b") == "payload"

        from_url.assert_called_once()
        assert service.available is True

        await service.close()
        client.aclose.assert_awaited_once()
        assert service.available is False


class TestTlsKwargs:
    def test_plain_url_has_no_tls(self) -> None:
        assert _tls_kwargs("redis://localhost:6379/0") == {}

    def test_rediss_verifies_certificates(self, monkeypatch) -> None:
        monkeypatch.delenv("REDIS_TLS_CERT_PATH", raising=False)
        assert _tls_kwargs("rediss://cache.internal:6380/0") == {
            "ssl_cert_reqs": "required",
            "ssl_check_hostname": True,
        }

    def test_custom_ca(self, monkeypatch) -> None:
        monkeypatch.setenv("REDIS_TLS_CERT_PATH", "/etc/ssl/redis-ca.pem")
        assert _tls_kwargs("rediss://cache.internal:6380/0")["ssl_ca_certs"] == "/etc/ssl/redis-ca.pem"
