"""
FastAPI dependencies: progress store, submission sink and the wizard registry.

The registry hosts one SurveyWizard per session key in this process. A
session is owned by a single active surface, so re-activating a key simply
replaces the hosted wizard. Hosting is bounded: submitted sessions are
released, sessions idle for longer than the retention window are dropped,
and the least recently used session is evicted once the registry is full.
Every answer is already in the progress store, so a dropped session comes
back through a fresh activation.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from survey_engine.config.survey import SurveySettings, load_settings
from survey_engine.models.snapshot import session_key
from survey_engine.modules.survey_wizard import Activation, SurveyWizard
from survey_engine.services.catalog import CatalogProvider, engagement_catalog
from survey_engine.services.progress_store import (
    InMemoryProgressStore,
    ProgressStore,
    RedisProgressStore,
    SqlProgressStore,
)
from survey_engine.services.redis_service import RedisService
from survey_engine.services.submission import LoggingSubmissionSink, SubmissionSink

logger = logging.getLogger(__name__)


def build_progress_store(settings: SurveySettings) -> ProgressStore:
    """Create the configured ProgressStore backend."""
    if settings.store_backend == "redis":
        return RedisProgressStore(
            RedisService(settings.redis_url),
            retention=settings.retention_window,
        )
    if settings.store_backend == "sql":
        engine = create_async_engine(settings.database_url)
        session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        return SqlProgressStore(session_factory, create_schema=True)
    return InMemoryProgressStore()


@dataclass
class _HostedWizard:
    wizard: SurveyWizard
    last_used: float


class WizardRegistry:
    """In-process host of active survey wizards, keyed by session key."""

    def __init__(
        self,
        store: ProgressStore,
        catalog_provider: CatalogProvider = engagement_catalog,
        submission_sink: SubmissionSink | None = None,
        settings: SurveySettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._catalog_provider = catalog_provider
        self._sink = submission_sink or LoggingSubmissionSink()
        self._settings = settings or SurveySettings()
        self._max_sessions = self._settings.max_hosted_sessions
        self._idle_timeout = self._settings.retention_window.total_seconds()
        self._clock = clock
        self._wizards: OrderedDict[str, _HostedWizard] = OrderedDict()

    async def activate(
        self,
        survey_id: str,
        respondent_id: str | None,
        respondent_name: str | None = None,
    ) -> tuple[SurveyWizard, Activation]:
        """Start (or take over) the session for survey_id / respondent_id."""
        wizard = SurveyWizard(
            self._catalog_provider(survey_id),
            self._store,
            self._sink,
            page_size=self._settings.page_size,
            retention=self._settings.retention_window,
        )
        activation = await wizard.activate(survey_id, respondent_id, respondent_name)

        key = session_key(survey_id, respondent_id)
        self._drop_idle()
        self._wizards.pop(key, None)
        while len(self._wizards) >= self._max_sessions:
            self._wizards.popitem(last=False)
            logger.debug("Evicted least recently used survey session")
        self._wizards[key] = _HostedWizard(wizard, self._clock())
        return wizard, activation

    def get(self, survey_id: str, respondent_id: str | None) -> SurveyWizard | None:
        key = session_key(survey_id, respondent_id)
        hosted = self._wizards.get(key)
        if hosted is None:
            return None
        now = self._clock()
        if now - hosted.last_used >= self._idle_timeout:
            del self._wizards[key]
            return None
        hosted.last_used = now
        self._wizards.move_to_end(key)
        return hosted.wizard

    def release(self, survey_id: str, respondent_id: str | None) -> None:
        """Stop hosting the session; a later activation starts it again."""
        self._wizards.pop(session_key(survey_id, respondent_id), None)

    def _drop_idle(self) -> None:
        now = self._clock()
        idle = [k for k, hosted in self._wizards.items() if now - hosted.last_used >= self._idle_timeout]
        for k in idle:
            del self._wizards[k]

    def __len__(self) -> int:
        return len(self._wizards)


# Global instance
_registry: WizardRegistry | None = None


def get_registry() -> WizardRegistry:
    """Get the global wizard registry, building it from the environment on first use."""
    global _registry
    if _registry is None:
        settings = load_settings()
        _registry = WizardRegistry(build_progress_store(settings), settings=settings)
        logger.info("Survey registry created", extra={"store_backend": settings.store_backend})
    return _registry


def set_registry(registry: WizardRegistry | None) -> None:
    """Replace the global registry (tests, custom hosts)."""
    global _registry
    _registry = registry


__all__ = ["WizardRegistry", "build_progress_store", "get_registry", "set_registry"]
