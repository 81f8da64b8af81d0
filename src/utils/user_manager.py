"""User management utilities.

This module provides account management: creating staff and student accounts,
changing phone numbers, listing users by role, and co-creating a student with
a linked parent account.
"""

import logging
import re
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import USER_ROLES
from core.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    SchoolPortalError,
)
from models.parent_child import ParentChildModel
from models.user import UserModel
from utils.phone import normalize_phone

logger = logging.getLogger(__name__)


def derive_parent_username(parent_name: str) -> str:
    """Build a parent username from a display name.

    "Rita Sharma" becomes "rita_sharma".
    """
    return re.sub(r"\s+", "_", parent_name.strip().lower())


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def _username_taken(self, username: str) -> bool:
        return (
            self.db.query(UserModel.id)
            .filter(func.lower(UserModel.username) == username.lower())
            .first()
            is not None
        )

    def _phone_owner(self, phone_number: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.phone_number == phone_number)
            .first()
        )

    def _unique_parent_username(self, parent_name: str) -> str:
        base = derive_parent_username(parent_name)
        candidate = base
        suffix = 2
        while self._username_taken(candidate):
            candidate = f"{base}_{suffix}"
            suffix += 1
        if candidate != base:
            logger.warning(
                "Parent username '%s' already taken, using '%s'", base, candidate
            )
        return candidate

    def create_user(
        self,
        username: str,
        name: str,
        phone_number: str,
        role: str,
        email: Optional[str] = None,
        standard: Optional[str] = None,
        division: Optional[str] = None,
        parent_name: Optional[str] = None,
    ) -> UserModel:
        """Create a new user.

        Args:
            username: Login name; stored lower-cased.
            name: Display name.
            phone_number: Phone number, normalized before storing.
            role: One of 'admin', 'teacher', 'student' or 'parent'.
            email: Optional email address.
            standard: Class; required for students.
            division: Section; required for students.
            parent_name: Optional parent name recorded on a student.

        Returns:
            Created UserModel.

        Raises:
            InvalidArgumentError: If the role is unknown, the username is blank
                or a student has no class placement.
            AlreadyExistsError: If the username or phone number is taken.
        """
        if role not in USER_ROLES:
            raise InvalidArgumentError(f"Invalid role: {role}")
        if role == "student" and not (standard and division):
            raise InvalidArgumentError("Students require a standard and division")

        username = username.strip().lower()
        if not username:
            raise InvalidArgumentError("Username cannot be blank")
        if self._username_taken(username):
            raise AlreadyExistsError("Username already exists")

        formatted_phone = normalize_phone(phone_number)
        if self._phone_owner(formatted_phone):
            raise AlreadyExistsError("Phone number already exists")

        model = UserModel(
            username=username,
            role=role,
            name=name,
            email=email,
            phone_number=formatted_phone,
            standard=standard,
            division=division,
            parent_name=parent_name,
        )
        # Two requests can both pass the checks above; the unique
        # constraints on username and phone_number catch the loser.
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise AlreadyExistsError("Username or phone number already exists") from e

        logger.info("Created %s user: %s", role, username)
        return model

    def get_user(self, user_id: int) -> UserModel:
        """Get a user by ID.

        Raises:
            NotFoundError: If no such user exists.
        """
        model = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if not model:
            raise NotFoundError("User", user_id)
        return model

    def get_student(self, student_id: int) -> UserModel:
        """Get a user that has the student role.

        Raises:
            NotFoundError: If the user is missing or is not a student.
        """
        model = (
            self.db.query(UserModel)
            .filter(UserModel.id == student_id, UserModel.role == "student")
            .first()
        )
        if not model:
            raise NotFoundError("Student", student_id)
        return model

    def update_phone(self, user_id: int, new_phone_number: str) -> UserModel:
        """Change a user's phone number.

        Args:
            user_id: User to update.
            new_phone_number: New phone number, normalized before storing.

        Returns:
            Updated UserModel.

        Raises:
            NotFoundError: If the user does not exist.
            AlreadyExistsError: If another user holds the phone number.
        """
        model = self.get_user(user_id)
        formatted_phone = normalize_phone(new_phone_number)

        owner = self._phone_owner(formatted_phone)
        if owner and owner.id != user_id:
            raise AlreadyExistsError("Phone number already exists")

        model.phone_number = formatted_phone
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise AlreadyExistsError("Phone number already exists") from e
        self.db.refresh(model)
        logger.info("Updated phone number for user %s", user_id)
        return model

    def list_users_by_role(self, role: str) -> List[UserModel]:
        """List users with the given role, newest first."""
        return (
            self.db.query(UserModel)
            .filter(UserModel.role == role)
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
            .all()
        )

    def create_student_with_parent(
        self,
        student_name: str,
        student_username: str,
        student_phone: str,
        standard: str,
        division: str,
        parent_name: str,
        parent_phone: str,
    ) -> Tuple[UserModel, UserModel, Optional[str]]:
        """Create a student account and link it to a parent account.

        An existing parent is matched by normalized phone number and the
        parent role; otherwise a parent account is created with a username
        derived from the parent's name. The student row, the optional parent
        row and the link row are committed in one transaction, so a failure
        leaves no orphaned student behind.

        Args:
            student_name: Student display name.
            student_username: Student login name, matched case-insensitively.
            student_phone: Student phone number.
            standard: Student class.
            division: Student section.
            parent_name: Parent display name.
            parent_phone: Parent phone number.

        Returns:
            Tuple of (student, parent, parent_phone). parent_phone is the
            normalized phone when a new parent account was created, else None.

        Raises:
            InvalidArgumentError: If the student username or the parent name
                is blank.
            AlreadyExistsError: If the student username or a phone number is
                already taken.
        """
        username = student_username.strip().lower()
        if not username:
            raise InvalidArgumentError("Student username cannot be blank")
        if not derive_parent_username(parent_name):
            raise InvalidArgumentError("Parent name cannot be blank")
        if self._username_taken(username):
            raise AlreadyExistsError("Student username already exists")

        formatted_student_phone = normalize_phone(student_phone)
        formatted_parent_phone = normalize_phone(parent_phone)

        try:
            parent = (
                self.db.query(UserModel)
                .filter(
                    UserModel.phone_number == formatted_parent_phone,
                    UserModel.role == "parent",
                )
                .first()
            )

            if self._phone_owner(formatted_student_phone):
                raise AlreadyExistsError("Student phone number already exists")

            student = UserModel(
                username=username,
                role="student",
                name=student_name,
                phone_number=formatted_student_phone,
                standard=standard,
                division=division,
                parent_name=parent_name,
            )
            self.db.add(student)
            self.db.flush()

            created_parent_phone = None
            if parent is None:
                if self._phone_owner(formatted_parent_phone):
                    raise AlreadyExistsError(
                        "Parent phone number belongs to a non-parent account"
                    )
                parent = UserModel(
                    username=self._unique_parent_username(parent_name),
                    role="parent",
                    name=parent_name,
                    phone_number=formatted_parent_phone,
                )
                self.db.add(parent)
                self.db.flush()
                created_parent_phone = formatted_parent_phone

            self.db.add(ParentChildModel(parent_id=parent.id, child_id=student.id))
            self.db.commit()
        except SchoolPortalError:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            raise AlreadyExistsError("Username or phone number already exists") from e

        self.db.refresh(student)
        self.db.refresh(parent)
        logger.info(
            "Created student %s linked to parent %s (new parent: %s)",
            student.username,
            parent.username,
            created_parent_phone is not None,
        )
        return student, parent, created_parent_phone

    def ensure_admin(
        self, username: str, name: str, phone_number: str
    ) -> Optional[UserModel]:
        """Create the initial admin account if no admin exists yet.

        Returns:
            The created admin, or None when an admin already exists.
        """
        existing = self.db.query(UserModel.id).filter(UserModel.role == "admin").first()
        if existing:
            return None
        admin = self.create_user(
            username=username, name=name, phone_number=phone_number, role="admin"
        )
        logger.info("Seeded initial admin account: %s", admin.username)
        return admin
