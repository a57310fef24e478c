"""
Services for the survey engine.

Services:
    - ProgressStore backends: InMemoryProgressStore, RedisProgressStore, SqlProgressStore
    - RedisService: lazy async Redis client with graceful fallback
    - Submission sinks: LoggingSubmissionSink, CallbackSubmissionSink, CollectingSubmissionSink
    - Built-in engagement catalog
"""

from .catalog import (
    ACTION_AREAS,
    ENGAGEMENT_QUESTIONS,
    PRIORITY_AREAS,
    CatalogProvider,
    engagement_catalog,
    rating_label,
)
from .progress_store import (
    InMemoryProgressStore,
    ProgressStore,
    RedisProgressStore,
    SqlProgressStore,
    is_fresh,
)
from .redis_service import RedisService, SurveyJSONEncoder, get_redis_service
from .submission import (
    CallbackSubmissionSink,
    CollectingSubmissionSink,
    LoggingSubmissionSink,
    SubmissionSink,
    SurveySubmission,
)

__all__ = [
    "ACTION_AREAS",
    "CallbackSubmissionSink",
    "CatalogProvider",
    "CollectingSubmissionSink",
    "ENGAGEMENT_QUESTIONS",
    "InMemoryProgressStore",
    "LoggingSubmissionSink",
    "PRIORITY_AREAS",
    "ProgressStore",
    "RedisProgressStore",
    "RedisService",
    "SqlProgressStore",
    "SubmissionSink",
    "SurveyJSONEncoder",
    "SurveySubmission",
    "engagement_catalog",
    "get_redis_service",
    "is_fresh",
    "rating_label",
]
