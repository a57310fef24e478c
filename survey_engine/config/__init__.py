"""Configuration for the survey engine."""

from .survey import (
    ACTION_LIMIT,
    ANONYMOUS_NAME,
    ANONYMOUS_RESPONDENT,
    PAGE_SIZE,
    PART_A_WEIGHT,
    PART_B_WEIGHT,
    PRIORITY_LIMIT,
    RETENTION_DAYS,
    RETENTION_WINDOW,
    SurveySettings,
    load_settings,
)

__all__ = [
    "ACTION_LIMIT",
    "ANONYMOUS_NAME",
    "ANONYMOUS_RESPONDENT",
    "PAGE_SIZE",
    "PART_A_WEIGHT",
    "PART_B_WEIGHT",
    "PRIORITY_LIMIT",
    "RETENTION_DAYS",
    "RETENTION_WINDOW",
    "SurveySettings",
    "load_settings",
]
