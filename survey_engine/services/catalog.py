"""
Built-in employee engagement catalog.

Fifty 9-point agreement questions across eleven categories (Part A), eleven
priority areas (Part B1) and sixteen action areas (Part B2). Hosts that
author their own surveys supply a different CatalogProvider.
"""

from __future__ import annotations

from collections.abc import Callable

from survey_engine.models.survey import ResponseKind, SurveyCatalog, SurveyQuestion

CatalogProvider = Callable[[str], SurveyCatalog]

ENGAGEMENT_TITLE = "Employee Engagement Survey"

RATING_SCALE = range(1, 10)

RATING_LABELS: dict[int, str] = {
    1: "Strongly Disagree",
    2: "Disagree",
    3: "Somewhat Disagree",
    4: "Slightly Disagree",
    5: "Neither Disagree or Agree",
    6: "Slightly Agree",
    7: "Somewhat Agree",
    8: "Agree",
    9: "Strongly Agree",
}

# (category, [prompts]) in presentation order
_ENGAGEMENT_PROMPTS: list[tuple[str, list[str]]] = [
    ("organizational-performance", [
        "My organization quickly resolves customers' problems",
        "My organisation is responsive to customers' needs",
        "My organisation provides high quality products and services",
        "My organisation has a good reputation in the community",
        "My organisation is financially stable",
    ]),
    ("leadership", [
        "Senior management provides clear direction for the organisation",
        "Senior management has communicated a clear vision for the organisation",
        "Senior management is approachable",
        "I have confidence in senior management",
    ]),
    ("supervision", [
        "My immediate supervisor treats me with respect",
        "My immediate supervisor is available when I need guidance",
        "My immediate supervisor provides me with constructive feedback",
        "My immediate supervisor recognises when I do good work",
        "My immediate supervisor supports my efforts to develop my skills",
    ]),
    ("work-environment", [
        "I have the resources I need to do my job well",
        "My organisation has efficient work processes",
        "My organisation encourages innovation",
        "My organisation supports a diverse workforce",
        "My organisation treats employees fairly regardless of their background",
        "My organisation has a positive culture",
    ]),
    ("teamwork", [
        "I can rely on my colleagues to help me when I need it",
        "My colleagues and I work well together",
        "My colleagues treat me with respect",
        "I feel like I am part of a team",
    ]),
    ("work-life-balance", [
        "I am able to manage my workload",
        "I am satisfied with my work-life balance",
        "I feel stressed at work",
        "I worry about losing my job",
        "My job allows me to maintain a healthy lifestyle",
    ]),
    ("performance-management", [
        "My performance is evaluated fairly",
    ]),
    ("career-development", [
        "I have opportunities to develop my skills in my current role",
        "I have opportunities for promotion in my organisation",
        "My organisation provides opportunities for me to develop my career",
        "I am encouraged to develop my skills",
    ]),
    ("empowerment", [
        "I am encouraged to come up with new and better ways of doing things",
        "My suggestions are taken seriously",
        "I have a say in decisions that affect my work",
        "I am able to make decisions about how to do my job",
        "I feel that my job makes good use of my skills and abilities",
        "I understand how my role contributes to the organisation's objectives",
    ]),
    ("job-satisfaction", [
        "I find real enjoyment in my work",
        "I like the kind of work I do",
        "Each day of work seems like it will never end",
        "I am often bored with my job",
        "My job inspires me",
        "Most days I am enthusiastic about my work",
    ]),
    ("organizational-commitment", [
        "I am proud to tell others that I am part of this organisation",
        "I would recommend this organisation as a great place to work",
        "It would take very little change in my present circumstances to cause me to leave this organisation",
        "I intend to continue working for this organisation for the next 12 months",
    ]),
]

PRIORITY_AREAS: tuple[str, ...] = (
    "Organisational Performance",
    "Leadership",
    "Supervision",
    "Work Environment",
    "Teamwork",
    "Work-Life Balance",
    "Performance Management",
    "Career Development",
    "Empowerment",
    "Job Satisfaction",
    "Organisational Commitment",
)

ACTION_AREAS: tuple[str, ...] = (
    "Improve communication between management and employees",
    "Provide more opportunities for career development",
    "Enhance work-life balance initiatives",
    "Strengthen team collaboration and support",
    "Improve recognition and reward systems",
    "Enhance workplace facilities and resources",
    "Provide better training and development programs",
    "Improve performance management processes",
    "Strengthen organizational culture and values",
    "Enhance employee wellness programs",
    "Improve diversity and inclusion initiatives",
    "Better change management and communication",
    "Enhance leadership development programs",
    "Improve compensation and benefits",
    "Strengthen customer service focus",
    "Enhance innovation and creativity support",
)


def _engagement_questions() -> tuple[SurveyQuestion, ...]:
    questions: list[SurveyQuestion] = []
    for category, prompts in _ENGAGEMENT_PROMPTS:
        for prompt in prompts:
            questions.append(SurveyQuestion(
                id=f"q{len(questions) + 1}",
                prompt=prompt,
                response_kind=ResponseKind.RATING,
                required=True,
                category=category,
            ))
    return tuple(questions)


ENGAGEMENT_QUESTIONS: tuple[SurveyQuestion, ...] = _engagement_questions()


def engagement_catalog(survey_id: str) -> SurveyCatalog:
    """The built-in engagement catalog under the given survey id."""
    return SurveyCatalog(
        survey_id=survey_id,
        title=ENGAGEMENT_TITLE,
        questions=ENGAGEMENT_QUESTIONS,
        priority_areas=PRIORITY_AREAS,
        action_areas=ACTION_AREAS,
    )


def rating_label(value: int) -> str:
    """
    Describe a rating on the 9-point agreement scale.

    Raises:
        ValueError: If value is outside 1-9
    """
    try:
        return RATING_LABELS[value]
    except KeyError:
        raise ValueError(f"rating must be between 1 and 9, got {value!r}") from None


__all__ = [
    "ACTION_AREAS",
    "CatalogProvider",
    "ENGAGEMENT_QUESTIONS",
    "PRIORITY_AREAS",
    "RATING_LABELS",
    "RATING_SCALE",
    "engagement_catalog",
    "rating_label",
]
