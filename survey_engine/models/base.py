"""
SQLAlchemy Base for the survey engine.

Usage:
    from survey_engine.models.base import Base

    class MyModel(Base):
        __tablename__ = "my_table"
        ...
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all survey engine tables."""


__all__ = ["Base"]
