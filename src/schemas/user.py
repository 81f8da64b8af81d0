"""User and login schema definitions.

This module defines request and response models for accounts, phone changes,
student+parent provisioning and OTP login.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

UserRole = Literal["admin", "teacher", "student", "parent"]


class User(BaseModel):
    """Public view of a user account."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: UserRole
    name: str
    email: Optional[str] = None
    phone_number: str
    standard: Optional[str] = None
    division: Optional[str] = None
    parent_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=1, description="Login name, matched case-insensitively.")
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone_number: str = Field(
        min_length=1,
        description="Phone number; a leading '+' is added when missing.",
    )
    role: UserRole
    standard: Optional[str] = Field(default=None, description="Class, required for students.")
    division: Optional[str] = Field(default=None, description="Section, required for students.")
    parent_name: Optional[str] = None


class CreateUserResponse(BaseModel):
    user: User
    phone_number: str


class UpdatePhoneRequest(BaseModel):
    user_id: int
    new_phone_number: str = Field(min_length=1)


class UsersResponse(BaseModel):
    users: List[User]


class CreateStudentWithParentRequest(BaseModel):
    student_name: str = Field(min_length=1)
    student_username: str = Field(min_length=1)
    student_phone: str = Field(min_length=1)
    standard: str = Field(min_length=1)
    division: str = Field(min_length=1)
    parent_name: str = Field(min_length=1)
    parent_phone: str = Field(min_length=1)


class CreateStudentWithParentResponse(BaseModel):
    student: User
    parent: Optional[User] = None
    parent_phone: Optional[str] = Field(
        default=None,
        description="Set only when a new parent account was created.",
    )


class SendOtpRequest(BaseModel):
    phone_number: str = Field(min_length=1)


class SendOtpResponse(BaseModel):
    success: bool
    message: str


class VerifyOtpRequest(BaseModel):
    phone_number: str = Field(min_length=1)
    otp_code: str = Field(min_length=1)


class LoginResponse(BaseModel):
    user: User
    token: str
    token_type: str = "bearer"


class CleanupOtpResponse(BaseModel):
    deleted_count: int


class SuccessResponse(BaseModel):
    success: bool = True
