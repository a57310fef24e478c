"""
Tests for the custom exception hierarchy.

Verifies:
- All exceptions are subclasses of SurveyEngineException
- Catching a category catches its specific errors
- InvalidStateError carries the operation and section
"""

from __future__ import annotations

import pytest

from survey_engine.lib.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    InvalidStateError,
    SerializationError,
    ServiceError,
    SnapshotDecodeError,
    StateError,
    SurveyEngineException,
    ValidationError,
)

EXCEPTION_CLASSES = [
    ConfigurationError,
    ValidationError,
    SerializationError,
    SnapshotDecodeError,
    StateError,
    ServiceError,
    ExternalServiceError,
]


class TestExceptionHierarchy:
    """Test the exception class hierarchy."""

    def test_base_is_subclass_of_exception(self) -> None:
        assert issubclass(SurveyEngineException, Exception)

    @pytest.mark.parametrize("exc_class", EXCEPTION_CLASSES)
    def test_all_are_subclass_of_base(self, exc_class: type[SurveyEngineException]) -> None:
        assert issubclass(exc_class, SurveyEngineException)

    @pytest.mark.parametrize("exc_class", EXCEPTION_CLASSES)
    def test_message_preserved(self, exc_class: type[SurveyEngineException]) -> None:
        with pytest.raises(exc_class, match="boom"):
            raise exc_class("boom")

    def test_category_catches_specific(self) -> None:
        with pytest.raises(SerializationError):
            raise SnapshotDecodeError("bad payload")
        with pytest.raises(ServiceError):
            raise ExternalServiceError("db down")
        with pytest.raises(StateError):
            raise InvalidStateError("advance", "intro")


class TestInvalidStateError:
    """Operation called in the wrong section."""

    def test_default_message(self) -> None:
        exc = InvalidStateError("advance", "intro")

        assert exc.operation == "advance"
        assert exc.section == "intro"
        assert str(exc) == "advance() is not allowed in section 'intro'"

    def test_custom_message(self) -> None:
        exc = InvalidStateError("resume", "part-a", "no saved progress to resume")
        assert str(exc) == "no saved progress to resume"
