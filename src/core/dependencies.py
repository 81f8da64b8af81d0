"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Every manager gets the request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import analytics_manager
from utils import assignment_manager
from utils import course_manager
from utils import otp_manager
from utils import parent_manager
from utils import progress_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_otp_manager(db: Session = Depends(get_db)) -> otp_manager.OtpManager:
    """Get OtpManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        OtpManager instance.
    """
    return otp_manager.OtpManager(db)


def get_course_manager(db: Session = Depends(get_db)) -> course_manager.CourseManager:
    """Get CourseManager instance with request-scoped DB session."""
    return course_manager.CourseManager(db)


def get_assignment_manager(
    db: Session = Depends(get_db),
) -> assignment_manager.AssignmentManager:
    """Get AssignmentManager instance with request-scoped DB session."""
    return assignment_manager.AssignmentManager(db)


def get_progress_manager(
    db: Session = Depends(get_db),
) -> progress_manager.ProgressManager:
    """Get ProgressManager instance with request-scoped DB session."""
    return progress_manager.ProgressManager(db)


def get_analytics_manager(
    db: Session = Depends(get_db),
) -> analytics_manager.AnalyticsManager:
    """Get AnalyticsManager instance with request-scoped DB session."""
    return analytics_manager.AnalyticsManager(db)


def get_parent_manager(db: Session = Depends(get_db)) -> parent_manager.ParentManager:
    """Get ParentManager instance with request-scoped DB session."""
    return parent_manager.ParentManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
OtpManagerDep = Annotated[
    otp_manager.OtpManager, Depends(get_otp_manager)
]
CourseManagerDep = Annotated[
    course_manager.CourseManager, Depends(get_course_manager)
]
AssignmentManagerDep = Annotated[
    assignment_manager.AssignmentManager, Depends(get_assignment_manager)
]
ProgressManagerDep = Annotated[
    progress_manager.ProgressManager, Depends(get_progress_manager)
]
AnalyticsManagerDep = Annotated[
    analytics_manager.AnalyticsManager, Depends(get_analytics_manager)
]
ParentManagerDep = Annotated[
    parent_manager.ParentManager, Depends(get_parent_manager)
]
