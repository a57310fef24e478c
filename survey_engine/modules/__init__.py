"""Survey-taking state machine."""

from .survey_wizard import Activation, SurveyWizard, WizardState

__all__ = ["Activation", "SurveyWizard", "WizardState"]
