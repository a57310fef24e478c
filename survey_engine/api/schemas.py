"""
Pydantic Schemas for the survey engine REST API.

Defines request schemas, the response envelope helpers and the session view
returned by every wizard endpoint.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

from survey_engine.config.survey import ACTION_LIMIT, PRIORITY_LIMIT
from survey_engine.core.progress import ResumeSummary
from survey_engine.core.validation import GateResult
from survey_engine.lib.errors import REQUIREMENTS_NOT_MET, build_error_response
from survey_engine.modules.survey_wizard import Activation, SurveyWizard

# =============================================================================
# Response Envelope
# =============================================================================


def success_response(data: Any) -> dict[str, Any]:
    """Wrap data in the standard envelope."""
    return {"success": True, "data": data, "error": None}


def error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
    data: Any = None,
) -> dict[str, Any]:
    """Wrap an error (and optionally the unchanged state) in the standard envelope."""
    return {
        "success": False,
        "data": data,
        "error": build_error_response(code, message, details),
    }


# =============================================================================
# Request Schemas
# =============================================================================


class ActivateSessionRequest(BaseModel):
    """Validated input for starting a survey session."""

    respondent_name: str | None = Field(default=None, max_length=200)


class RecordResponseRequest(BaseModel):
    """Validated input for answering a Part A question."""

    question_id: str = Field(..., min_length=1, max_length=100)
    value: StrictInt | StrictFloat | StrictStr


class ToggleSelectionRequest(BaseModel):
    """Validated input for toggling a Part B label."""

    label: str = Field(..., min_length=1, max_length=500)


# =============================================================================
# Views
# =============================================================================


def summary_view(summary: ResumeSummary) -> dict[str, Any]:
    return {
        "section": summary.section.value,
        "answeredCount": summary.answered_count,
        "prioritiesCount": summary.priorities_count,
        "actionsCount": summary.actions_count,
        "percent": summary.percent,
        "savedAt": summary.saved_at.isoformat(),
        "text": summary.text,
    }


def session_view(wizard: SurveyWizard, activation: Activation | None = None) -> dict[str, Any]:
    """Serialize the wizard's current position for the host UI."""
    state = wizard.state
    questions = [
        {
            "id": q.id,
            "prompt": q.prompt,
            "responseKind": q.response_kind.value,
            "required": q.required,
            "category": q.category,
            "options": list(q.options),
            "answer": state.responses.get(q.id),
        }
        for q in wizard.current_page_questions
    ]
    view: dict[str, Any] = {
        "surveyId": wizard.catalog.survey_id,
        "section": state.section.value,
        "pageIndex": state.page_index,
        "pageCount": wizard.page_count,
        "progress": wizard.progress_percent,
        "questions": questions,
        "answeredCount": len(state.responses),
        "totalQuestions": wizard.catalog.total_questions,
        "priorities": list(state.priorities),
        "actions": list(state.actions),
        "priorityLimit": PRIORITY_LIMIT,
        "actionLimit": ACTION_LIMIT,
        "submitted": wizard.is_submitted,
    }
    if activation is not None:
        view["resumeAvailable"] = activation.resume_available
        view["resume"] = summary_view(activation.summary) if activation.summary else None
    return view


def gate_response(wizard: SurveyWizard, gate: GateResult) -> dict[str, Any]:
    """Envelope for a gated transition: the new view, or the block reason with the unchanged view."""
    if gate:
        return success_response(session_view(wizard))
    return error_response(
        REQUIREMENTS_NOT_MET,
        gate.reason,
        details={"reason": gate.code, "missing": list(gate.missing)},
        data=session_view(wizard),
    )


__all__ = [
    "ActivateSessionRequest",
    "RecordResponseRequest",
    "ToggleSelectionRequest",
    "error_response",
    "gate_response",
    "session_view",
    "success_response",
    "summary_view",
]
