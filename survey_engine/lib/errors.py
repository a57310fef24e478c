"""
Centralized Error Response Builder for the survey engine.

Provides consistent error codes and messages for the HTTP layer and for
gate results returned by the wizard.

The builder returns structured error dicts compatible with the API
response envelope.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Error Code Constants
# =============================================================================

NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"
INVALID_STATE = "INVALID_STATE"
REQUIREMENTS_NOT_MET = "REQUIREMENTS_NOT_MET"

# Gate block reasons
PAGE_INCOMPLETE = "PAGE_INCOMPLETE"
SELECTION_INCOMPLETE = "SELECTION_INCOMPLETE"

_ERROR_MESSAGES: dict[str, str] = {
    NOT_FOUND: "The requested survey session was not found.",
    VALIDATION_ERROR: "Invalid input. Please check your request.",
    INTERNAL_ERROR: "An internal error occurred. Please try again.",
    INVALID_STATE: "This action is not available at the current survey step.",
    REQUIREMENTS_NOT_MET: "Requirements for this step are not met.",
    PAGE_INCOMPLETE: "Please answer all required questions on this page before continuing.",
    SELECTION_INCOMPLETE: "Please select at least one priority area and one action area.",
}


# HTTP status per code. Gate blocks (REQUIREMENTS_NOT_MET) are not errors at
# the transport level and travel with 200.
_HTTP_STATUS: dict[str, int] = {
    NOT_FOUND: 404,
    VALIDATION_ERROR: 422,
    INVALID_STATE: 409,
    REQUIREMENTS_NOT_MET: 200,
    INTERNAL_ERROR: 500,
}


def get_error_message(code: str) -> str:
    """Respondent-facing message for code, or a generic one."""
    return _ERROR_MESSAGES.get(code, "An error occurred.")


def http_status_for(code: str) -> int:
    """HTTP status an error code is reported with (500 for unknown codes)."""
    return _HTTP_STATUS.get(code, 500)


def build_error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build the "error" member of the response envelope.

    Args:
        code: Error code constant
        message: Overrides the registered message for code
        details: Extra context (missing question ids, offending operation)

    Returns:
        {"code", "message"} plus "details" when given
    """
    error: dict[str, Any] = {"code": code, "message": message or get_error_message(code)}
    if details is not None:
        error["details"] = details
    return error


__all__ = [
    "NOT_FOUND",
    "VALIDATION_ERROR",
    "INTERNAL_ERROR",
    "INVALID_STATE",
    "REQUIREMENTS_NOT_MET",
    "PAGE_INCOMPLETE",
    "SELECTION_INCOMPLETE",
    "build_error_response",
    "get_error_message",
    "http_status_for",
]
