"""Login log database model.

Append-only: one row per successful OTP verification.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from .base import Base, utcnow


class LoginLogModel(Base):
    """Login log database model."""

    __tablename__ = "login_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    login_time = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)
