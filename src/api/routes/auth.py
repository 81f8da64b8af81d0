"""Authentication routes.

This module handles OTP login over phone numbers, JWT issuing and the
request-scoped current-user dependency used by every other router.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
    OTP_DEMO_MODE,
    STAFF_ROLES,
)
from core.dependencies import OtpManagerDep, UserManagerDep
from core.exceptions import InvalidOtpError, NotFoundError
from schemas.user import (
    CleanupOtpResponse,
    LoginResponse,
    SendOtpRequest,
    SendOtpResponse,
    User,
    VerifyOtpRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# HTTP Bearer token security
security = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_user_token(user: User) -> str:
    """Create an access token for a user."""
    return create_access_token({"sub": str(user.id), "role": user.role})


def verify_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """Verify JWT token from Authorization header.

    Args:
        credentials: HTTP Bearer token credentials.

    Returns:
        Decoded token payload.

    Raises:
        HTTPException: If token is invalid or expired.
    """
    token = credentials.credentials
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    if payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return payload


def get_current_user(
    token_payload: dict = Depends(verify_token),
    user_manager: UserManagerDep = None,
) -> User:
    """Get current authenticated user.

    Args:
        token_payload: Decoded JWT token payload.
        user_manager: Injected UserManager instance.

    Returns:
        Current User object.

    Raises:
        HTTPException: If the token subject is malformed or the user is gone.
    """
    try:
        user_id = int(token_payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    try:
        model = user_manager.get_user(user_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return User.model_validate(model)


def require_staff(current_user: User = Depends(get_current_user)) -> User:
    """Allow only admins and teachers."""
    if current_user.role not in STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers and admins can perform this action.",
        )
    return current_user


@router.post("/send-otp", response_model=SendOtpResponse, summary="Send OTP")
def send_otp(
    req: SendOtpRequest,
    otp_manager: OtpManagerDep,
) -> SendOtpResponse:
    """Issue an OTP for a registered phone number.

    No SMS is sent. In demo mode the response names the code to use.

    Raises:
        HTTPException: 404 if no user has this phone number.
    """
    try:
        code = otp_manager.send_otp(req.phone_number)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No user found with this phone number",
        )

    if OTP_DEMO_MODE:
        message = f"Use {code} as the OTP code (demo mode)"
    else:
        message = "OTP issued"
    return SendOtpResponse(success=True, message=message)


@router.post("/verify-otp", response_model=LoginResponse, summary="Verify OTP and log in")
def verify_otp(
    req: VerifyOtpRequest,
    otp_manager: OtpManagerDep,
) -> LoginResponse:
    """Verify an OTP, record the login and return a signed access token.

    Raises:
        HTTPException: 401 for a bad code, 404 for an unknown phone number.
    """
    try:
        model = otp_manager.verify_otp(req.phone_number, req.otp_code)
    except InvalidOtpError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    user = User.model_validate(model)
    return LoginResponse(user=user, token=create_user_token(user))


@router.post("/cleanup-otps", response_model=CleanupOtpResponse, summary="Delete spent OTPs")
def cleanup_otps(
    otp_manager: OtpManagerDep,
    current_user: User = Depends(require_staff),
) -> CleanupOtpResponse:
    return CleanupOtpResponse(deleted_count=otp_manager.cleanup_expired_otps())
