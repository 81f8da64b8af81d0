"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, DateTime, Integer, String
from .base import Base, utcnow


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)  # stored lower-cased
    role = Column(String, nullable=False)  # 'admin', 'teacher', 'student' or 'parent'
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone_number = Column(String, unique=True, index=True, nullable=False)  # '+' prefixed
    standard = Column(String, nullable=True)
    division = Column(String, nullable=True)
    parent_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
