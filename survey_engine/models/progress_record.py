"""
Survey progress table.

One row per in-flight survey session, keyed by the session key
("survey-progress-{survey_id}-{respondent_id|anonymous}"). The payload column
holds the canonical snapshot JSON exactly as encoded, so a load followed by a
save of an unmodified snapshot rewrites identical bytes.

saved_at mirrors the snapshot's savedAt for inspection and manual cleanup;
expiry itself is decided from the decoded payload.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, String, Text

from survey_engine.models.base import Base


class SurveyProgressRecord(Base):
    """
    Persisted progress snapshot for one survey session.

    Attributes:
        session_key: Primary key, composite of survey id and respondent id
        payload: Canonical snapshot JSON
        saved_at: Snapshot savedAt timestamp
        updated_at: Last write timestamp
    """

    __tablename__ = "survey_progress"

    session_key = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)
    saved_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_survey_progress_saved_at", "saved_at"),
    )

    def __repr__(self) -> str:
        return f"<SurveyProgressRecord(session_key={self.session_key}, saved_at={self.saved_at})>"
