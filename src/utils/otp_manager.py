"""OTP login utilities.

This module issues and verifies one-time passwords for phone-number login,
records successful logins, and purges spent OTP records. Codes are never
delivered; in demo mode every code is the configured demo code.
"""

import logging
import secrets
import string
from datetime import timedelta

import bcrypt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from config import (
    OTP_BCRYPT_ROUNDS,
    OTP_DEMO_CODE,
    OTP_DEMO_MODE,
    OTP_EXPIRE_MINUTES,
    OTP_LENGTH,
)
from core.exceptions import InvalidOtpError, NotFoundError
from models.base import utcnow
from models.login_log import LoginLogModel
from models.otp import OtpModel
from models.user import UserModel
from utils.phone import normalize_phone

logger = logging.getLogger(__name__)


class OtpManager:
    """Manages OTP issue, verification and cleanup using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize OtpManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_code(self, code: str) -> str:
        """Hash an OTP code using bcrypt.

        Args:
            code: Plain OTP digits.

        Returns:
            Bcrypt hash string.
        """
        salt = bcrypt.gensalt(rounds=OTP_BCRYPT_ROUNDS)
        return bcrypt.hashpw(code.encode("utf-8"), salt).decode("utf-8")

    def verify_code(self, code: str, code_hash: str) -> bool:
        try:
            return bcrypt.checkpw(code.encode("utf-8"), code_hash.encode("utf-8"))
        except ValueError as e:
            logger.error("OTP hash verification error: %s", e)
            return False

    def generate_code(self) -> str:
        if OTP_DEMO_MODE:
            return OTP_DEMO_CODE
        return "".join(secrets.choice(string.digits) for _ in range(OTP_LENGTH))

    def _get_user(self, phone_number: str) -> UserModel:
        model = (
            self.db.query(UserModel)
            .filter(UserModel.phone_number == phone_number)
            .first()
        )
        if not model:
            raise NotFoundError("User with phone number", phone_number)
        return model

    def send_otp(self, phone_number: str) -> str:
        """Issue a new OTP for a registered phone number.

        Earlier unused codes for the same phone are invalidated.

        Args:
            phone_number: Phone number, normalized before lookup.

        Returns:
            The plain OTP code (only the hash is stored).

        Raises:
            NotFoundError: If no user has this phone number.
        """
        formatted_phone = normalize_phone(phone_number)
        self._get_user(formatted_phone)

        self.db.query(OtpModel).filter(
            OtpModel.phone_number == formatted_phone,
            OtpModel.used.is_(False),
        ).update({OtpModel.used: True}, synchronize_session=False)

        code = self.generate_code()
        now = utcnow()
        self.db.add(
            OtpModel(
                phone_number=formatted_phone,
                otp_hash=self.hash_code(code),
                created_at=now,
                expires_at=now + timedelta(minutes=OTP_EXPIRE_MINUTES),
            )
        )
        self.db.commit()

        if OTP_DEMO_MODE:
            logger.info("Issued demo OTP for %s", formatted_phone)
        else:
            logger.info("Issued OTP for %s (expires in %d min)", formatted_phone, OTP_EXPIRE_MINUTES)
        return code

    def verify_otp(self, phone_number: str, otp_code: str) -> UserModel:
        """Verify an OTP and record the login.

        Args:
            phone_number: Phone number the code was issued for.
            otp_code: Code entered by the user.

        Returns:
            The authenticated UserModel.

        Raises:
            NotFoundError: If no user has this phone number.
            InvalidOtpError: If the code is wrong, expired or already used.
        """
        formatted_phone = normalize_phone(phone_number)
        user = self._get_user(formatted_phone)

        otp = (
            self.db.query(OtpModel)
            .filter(
                OtpModel.phone_number == formatted_phone,
                OtpModel.used.is_(False),
                OtpModel.expires_at > utcnow(),
            )
            .order_by(OtpModel.created_at.desc(), OtpModel.id.desc())
            .first()
        )
        if otp is None or not self.verify_code(otp_code.strip(), otp.otp_hash):
            logger.warning("Rejected OTP for %s", formatted_phone)
            raise InvalidOtpError("Invalid or expired OTP")

        otp.used = True
        self.db.add(LoginLogModel(user_id=user.id))
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s logged in", user.username)
        return user

    def cleanup_expired_otps(self) -> int:
        """Delete OTP records that are expired or already used.

        Returns:
            Number of deleted rows.
        """
        deleted = (
            self.db.query(OtpModel)
            .filter(or_(OtpModel.expires_at < utcnow(), OtpModel.used.is_(True)))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info("Deleted %d spent OTP records", deleted)
        return deleted
