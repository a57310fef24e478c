"""
REST API Routes for the survey engine.

All responses use the {success, data, error} envelope. Gate blocks come back
as success=false with REQUIREMENTS_NOT_MET and the unchanged session view.

Endpoints (all under /api/v1 prefix):
- GET  /health
- POST /surveys/{survey_id}/respondents/{respondent_id}/session          activate
- GET  /surveys/{survey_id}/respondents/{respondent_id}/session          current view
- POST /surveys/{survey_id}/respondents/{respondent_id}/session/resume
- POST /surveys/{survey_id}/respondents/{respondent_id}/session/restart
- PUT  /surveys/{survey_id}/respondents/{respondent_id}/responses
- POST /surveys/{survey_id}/respondents/{respondent_id}/advance
- POST /surveys/{survey_id}/respondents/{respondent_id}/retreat
- POST /surveys/{survey_id}/respondents/{respondent_id}/priorities
- POST /surveys/{survey_id}/respondents/{respondent_id}/actions
- POST /surveys/{survey_id}/respondents/{respondent_id}/complete

Use "anonymous" as respondent_id for respondents without an identity.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from survey_engine.api.dependencies import WizardRegistry, get_registry
from survey_engine.api.schemas import (
    ActivateSessionRequest,
    RecordResponseRequest,
    ToggleSelectionRequest,
    gate_response,
    session_view,
    success_response,
)
from survey_engine.config.survey import ANONYMOUS_RESPONDENT
from survey_engine.lib.errors import NOT_FOUND, build_error_response, http_status_for
from survey_engine.lib.logging import bind_session_context
from survey_engine.modules.survey_wizard import SurveyWizard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")

_SESSION_PATH = "/surveys/{survey_id}/respondents/{respondent_id}"


def _respondent(respondent_id: str) -> str | None:
    return None if respondent_id == ANONYMOUS_RESPONDENT else respondent_id


async def _hosted_wizard(
    survey_id: str,
    respondent_id: str,
    registry: WizardRegistry = Depends(get_registry),
) -> SurveyWizard:
    """Resolve the active wizard for the path, or 404."""
    bind_session_context(survey_id, respondent_id)
    wizard = registry.get(survey_id, _respondent(respondent_id))
    if wizard is None:
        raise HTTPException(
            status_code=http_status_for(NOT_FOUND),
            detail=build_error_response(NOT_FOUND),
        )
    return wizard


# =============================================================================
# Health
# =============================================================================


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return success_response({"status": "ok"})


# =============================================================================
# Session lifecycle
# =============================================================================


@router.post(f"{_SESSION_PATH}/session")
async def activate_session(
    survey_id: str,
    respondent_id: str,
    data: ActivateSessionRequest | None = None,
    registry: WizardRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """
    Start a survey session.

    If a fresh saved snapshot exists, the session opens in the intro section
    with resumeAvailable=true and a progress summary.
    """
    bind_session_context(survey_id, respondent_id)
    respondent_name = data.respondent_name if data else None
    wizard, activation = await registry.activate(survey_id, _respondent(respondent_id), respondent_name)
    logger.info(
        "Survey session activated",
        extra={"section": activation.section.value, "resume_available": activation.resume_available},
    )
    return success_response(session_view(wizard, activation))


@router.get(f"{_SESSION_PATH}/session")
async def get_session(wizard: SurveyWizard = Depends(_hosted_wizard)) -> dict[str, Any]:
    """Current session view."""
    return success_response(session_view(wizard))


@router.post(f"{_SESSION_PATH}/session/resume")
async def resume_session(wizard: SurveyWizard = Depends(_hosted_wizard)) -> dict[str, Any]:
    """Continue from saved progress."""
    await wizard.resume()
    return success_response(session_view(wizard))


@router.post(f"{_SESSION_PATH}/session/restart")
async def restart_session(wizard: SurveyWizard = Depends(_hosted_wizard)) -> dict[str, Any]:
    """Discard saved progress and start over."""
    await wizard.restart()
    return success_response(session_view(wizard))


# =============================================================================
# Part A
# =============================================================================


@router.put(f"{_SESSION_PATH}/responses")
async def record_response(
    data: RecordResponseRequest,
    wizard: SurveyWizard = Depends(_hosted_wizard),
) -> dict[str, Any]:
    """Answer a question on the current Part A page."""
    await wizard.record_response(data.question_id, data.value)
    return success_response(session_view(wizard))


# =============================================================================
# Navigation
# =============================================================================


@router.post(f"{_SESSION_PATH}/advance")
async def advance(wizard: SurveyWizard = Depends(_hosted_wizard)) -> dict[str, Any]:
    """Go to the next page or section if the current requirements are met."""
    gate = await wizard.advance()
    return gate_response(wizard, gate)


@router.post(f"{_SESSION_PATH}/retreat")
async def retreat(wizard: SurveyWizard = Depends(_hosted_wizard)) -> dict[str, Any]:
    """Go back one page or section."""
    await wizard.retreat()
    return success_response(session_view(wizard))


# =============================================================================
# Part B
# =============================================================================


@router.post(f"{_SESSION_PATH}/priorities")
async def toggle_priority(
    data: ToggleSelectionRequest,
    wizard: SurveyWizard = Depends(_hosted_wizard),
) -> dict[str, Any]:
    """Select or deselect a priority area."""
    outcome = await wizard.toggle_priority(data.label)
    return success_response({**session_view(wizard), "outcome": outcome.value})


@router.post(f"{_SESSION_PATH}/actions")
async def toggle_action(
    data: ToggleSelectionRequest,
    wizard: SurveyWizard = Depends(_hosted_wizard),
) -> dict[str, Any]:
    """Select or deselect an action area."""
    outcome = await wizard.toggle_action(data.label)
    return success_response({**session_view(wizard), "outcome": outcome.value})


@router.post(f"{_SESSION_PATH}/complete")
async def complete(
    survey_id: str,
    respondent_id: str,
    wizard: SurveyWizard = Depends(_hosted_wizard),
    registry: WizardRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Submit the survey. A submitted session is no longer hosted."""
    gate = await wizard.complete()
    if wizard.is_submitted:
        registry.release(survey_id, _respondent(respondent_id))
    return gate_response(wizard, gate)


__all__ = ["router"]
