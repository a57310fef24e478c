"""
Shared test fixtures for the survey engine.

This module provides common fixtures used across all test modules:
- Environment setup (dev mode, memory backend)
- A controllable clock
- Small and full-size survey catalogs
- In-memory progress store and collecting submission sink
- Async SQLAlchemy session factory (in-memory SQLite via aiosqlite)
- A wizard factory wired to all of the above
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# ---------------------------------------------------------------------------
# 1. Environment setup -- must run before any application imports
# ---------------------------------------------------------------------------

os.environ.setdefault("SURVEY_DEV_MODE", "1")
os.environ.setdefault("SURVEY_STORE_BACKEND", "memory")

from survey_engine.models.base import Base  # noqa: E402
from survey_engine.models.survey import ResponseKind, SurveyCatalog, SurveyQuestion  # noqa: E402
from survey_engine.modules.survey_wizard import SurveyWizard  # noqa: E402
from survey_engine.services.catalog import engagement_catalog  # noqa: E402
from survey_engine.services.progress_store import InMemoryProgressStore  # noqa: E402
from survey_engine.services.submission import CollectingSubmissionSink  # noqa: E402

START = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ---------------------------------------------------------------------------
# 2. Catalogs
# ---------------------------------------------------------------------------


def make_catalog(
    survey_id: str = "pulse-2026",
    question_count: int = 7,
    optional_ids: frozenset[str] = frozenset(),
) -> SurveyCatalog:
    """Build a catalog of rating questions q1..qN."""
    questions = tuple(
        SurveyQuestion(
            id=f"q{i}",
            prompt=f"Statement {i}",
            response_kind=ResponseKind.RATING,
            required=f"q{i}" not in optional_ids,
            category="general",
        )
        for i in range(1, question_count + 1)
    )
    return SurveyCatalog(
        survey_id=survey_id,
        title="Pulse",
        questions=questions,
        priority_areas=("Leadership", "Teamwork", "Supervision", "Empowerment", "Career Development"),
        action_areas=("Training", "Recognition", "Wellness", "Communication", "Facilities", "Benefits"),
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def catalog() -> SurveyCatalog:
    """Seven questions: pages of 3, 3 and 1."""
    return make_catalog()


@pytest.fixture()
def catalog_factory():
    return make_catalog


@pytest.fixture()
def engagement() -> SurveyCatalog:
    """The built-in 50-question engagement survey."""
    return engagement_catalog("ees-2026")


# ---------------------------------------------------------------------------
# 3. Store, sink, database
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture()
def sink() -> CollectingSubmissionSink:
    return CollectingSubmissionSink()


@pytest.fixture()
async def session_factory():
    """
    Provide an async SQLAlchemy session factory backed by in-memory SQLite (aiosqlite).

    StaticPool keeps the single in-memory database alive across sessions.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


# ---------------------------------------------------------------------------
# 4. Wizard factory
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_wizard(memory_store, sink, clock):
    """Factory building wizards that share the store, sink and clock."""

    def _make(catalog: SurveyCatalog, store=None) -> SurveyWizard:
        return SurveyWizard(
            catalog,
            store if store is not None else memory_store,
            sink,
            clock=clock,
        )

    return _make
