"""
Data models for the survey engine.

Exports:
    - SurveyQuestion, SurveyCatalog, ResponseKind: catalog input
    - ProgressSnapshot, WizardSection: durable session state
    - SurveyProgressRecord: SQL table for the snapshot store
"""

from .base import Base
from .progress_record import SurveyProgressRecord
from .snapshot import (
    PERSISTABLE_SECTIONS,
    ProgressSnapshot,
    WizardSection,
    decode_snapshot,
    encode_snapshot,
    session_key,
)
from .survey import ResponseKind, ResponseMap, ResponseValue, SurveyCatalog, SurveyQuestion

__all__ = [
    "Base",
    "PERSISTABLE_SECTIONS",
    "ProgressSnapshot",
    "ResponseKind",
    "ResponseMap",
    "ResponseValue",
    "SurveyCatalog",
    "SurveyProgressRecord",
    "SurveyQuestion",
    "WizardSection",
    "decode_snapshot",
    "encode_snapshot",
    "session_key",
]
