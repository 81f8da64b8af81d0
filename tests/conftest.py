import itertools
import os

# Must be set before any application module reads config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OTP_DEMO_MODE"] = "true"
os.environ["OTP_DEMO_CODE"] = "123456"
os.environ["OTP_BCRYPT_ROUNDS"] = "4"
os.environ.pop("ADMIN_PHONE_NUMBER", None)

import pytest
from fastapi.testclient import TestClient

from api.routes.auth import create_user_token
from app import app
from core.database import SessionLocal, engine
from models.base import Base
from schemas.user import User
from utils.user_manager import UserManager


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role="student", **fields):
        n = next(counter)
        values = {
            "username": f"{role}{n}",
            "name": f"{role.title()} {n}",
            "phone_number": f"90000{n:05d}",
            "role": role,
        }
        if role == "student":
            values.update(standard="5", division="A")
        values.update(fields)
        return UserManager(db).create_user(**values)

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user_model):
        token = create_user_token(User.model_validate(user_model))
        return {"Authorization": f"Bearer {token}"}

    return _headers
