"""One-time password database model."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from .base import Base, utcnow


class OtpModel(Base):
    """Issued OTP codes. Only the bcrypt hash of the code is stored."""

    __tablename__ = "otps"

    id = Column(Integer, primary_key=True, index=True)
    phone_number = Column(String, index=True, nullable=False)
    otp_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used = Column(Boolean, default=False, nullable=False)
