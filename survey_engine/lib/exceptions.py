"""
Exception hierarchy for the survey engine.

All exceptions inherit from SurveyEngineException, enabling a catch-all
for engine errors while keeping the ability to catch specific types.

Recoverable conditions (corrupt or stale snapshots, blocked transitions)
are NOT raised to callers; they are handled locally or returned as values.
What is raised here indicates a configuration problem or a caller defect.
"""

from __future__ import annotations


class SurveyEngineException(Exception):
    """Base exception for all survey engine errors."""


class ConfigurationError(SurveyEngineException):
    """Missing or invalid environment variables and startup failures."""


class ValidationError(SurveyEngineException):
    """Input that does not fit the survey catalog (unknown question id or label, empty catalog)."""


class SerializationError(SurveyEngineException):
    """JSON encode/decode, data serialization/deserialization failures."""


class SnapshotDecodeError(SerializationError):
    """A persisted progress snapshot could not be decoded."""


class StateError(SurveyEngineException):
    """Invalid state transitions, missing required state."""


class InvalidStateError(StateError):
    """An operation was called in a wizard section where it is not allowed."""

    def __init__(self, operation: str, section: str, message: str | None = None) -> None:
        self.operation = operation
        self.section = section
        super().__init__(message or f"{operation}() is not allowed in section '{section}'")


class ServiceError(SurveyEngineException):
    """Backing service failures (API errors, connection refused, unexpected responses)."""


class ExternalServiceError(ServiceError):
    """External call failures (Redis, database)."""


__all__ = [
    "SurveyEngineException",
    "ConfigurationError",
    "ValidationError",
    "SerializationError",
    "SnapshotDecodeError",
    "StateError",
    "InvalidStateError",
    "ServiceError",
    "ExternalServiceError",
]
