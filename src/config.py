"""Configuration module for the School Portal backend.

This module provides centralized configuration management, including directory
paths, database and API server settings, token and OTP parameters, and the
initial admin account. All configuration values can be overridden via
environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/school_portal.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
# Default includes local development addresses. For production, set via
# CORS_ALLOWED_ORIGINS environment variable.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
)

# --- OTP Configuration ---

# In demo mode every OTP is OTP_DEMO_CODE and the send-otp response names it.
# Nothing is ever delivered over SMS.
OTP_DEMO_MODE: bool = os.getenv("OTP_DEMO_MODE", "true").lower() == "true"
OTP_DEMO_CODE: str = os.getenv("OTP_DEMO_CODE", "123456")
OTP_LENGTH: int = int(os.getenv("OTP_LENGTH", "6"))
OTP_EXPIRE_MINUTES: int = int(os.getenv("OTP_EXPIRE_MINUTES", "5"))
OTP_BCRYPT_ROUNDS: int = int(os.getenv("OTP_BCRYPT_ROUNDS", "10"))

# --- Analytics Configuration ---

# Window used for the "logins this week" counter on the admin dashboard.
LOGIN_WINDOW_DAYS: int = int(os.getenv("LOGIN_WINDOW_DAYS", "7"))

# --- Initial Admin Account ---

# Seeded at startup when no admin exists yet. Every account-creating endpoint
# requires an authenticated staff caller, so this is the bootstrap path.
ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_NAME: str = os.getenv("ADMIN_NAME", "Administrator")
ADMIN_PHONE_NUMBER: Optional[str] = os.getenv("ADMIN_PHONE_NUMBER")

# --- Domain Constants ---

USER_ROLES: List[str] = ["admin", "teacher", "student", "parent"]
STAFF_ROLES: List[str] = ["admin", "teacher"]
ASSIGNMENT_TYPES: List[str] = ["quiz", "written", "upload"]
