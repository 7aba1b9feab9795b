"""SQLAlchemy ORM base and model registry."""

from datetime import datetime

from sqlalchemy import JSON, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all onboarding ORM models.

    Timestamps are stored timezone-aware and URL lists as JSON arrays on
    every dialect.
    """

    type_annotation_map = {
        datetime: DateTime(timezone=True),
        list[str]: JSON,
    }
