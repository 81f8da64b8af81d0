"""Declarative base shared by all database models."""

from datetime import datetime

import pytz
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Current time in UTC, used as the column default for timestamps."""
    return datetime.now(pytz.utc)
