"""Analytics utilities.

Derived, read-only views over users, progress and login logs. Nothing here is
cached; every call recomputes from the store.
"""

import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import LOGIN_WINDOW_DAYS
from core.exceptions import NotFoundError
from models.base import utcnow
from models.course_progress import CourseProgressModel
from models.login_log import LoginLogModel
from models.user import UserModel
from schemas.analytics import (
    AnalyticsOverview,
    Batch,
    BatchStudent,
    StudentCompletion,
)

logger = logging.getLogger(__name__)


class AnalyticsManager:
    """Computes dashboard counters and completion roll-ups."""

    def __init__(self, db: Session):
        self.db = db

    def average_completion(self, student_id: int) -> float:
        """Mean progress over the courses the student has progress for.

        Courses without a progress row are left out rather than counted as
        zero. A student with no progress at all averages 0.
        """
        value = (
            self.db.query(func.avg(CourseProgressModel.progress_percentage))
            .filter(CourseProgressModel.student_id == student_id)
            .scalar()
        )
        return float(value) if value is not None else 0.0

    def _count_role(self, role: str) -> int:
        return self.db.query(func.count(UserModel.id)).filter(UserModel.role == role).scalar() or 0

    def get_overview(self) -> AnalyticsOverview:
        """Totals for the admin dashboard."""
        since = utcnow() - timedelta(days=LOGIN_WINDOW_DAYS)
        logins = (
            self.db.query(func.count(LoginLogModel.id))
            .filter(LoginLogModel.login_time >= since)
            .scalar()
        )
        return AnalyticsOverview(
            total_students=self._count_role("student"),
            total_teachers=self._count_role("teacher"),
            total_logins_this_week=logins or 0,
        )

    def _students_with_completion(
        self, standard: Optional[str] = None, division: Optional[str] = None
    ):
        average = func.coalesce(func.avg(CourseProgressModel.progress_percentage), 0)
        query = (
            self.db.query(UserModel, average.label("average_completion"))
            .outerjoin(CourseProgressModel, CourseProgressModel.student_id == UserModel.id)
            .filter(UserModel.role == "student")
        )
        if standard is not None:
            query = query.filter(UserModel.standard == standard)
        if division is not None:
            query = query.filter(UserModel.division == division)
        return query.group_by(UserModel.id).order_by(UserModel.name, UserModel.id).all()

    def get_student_progress(self) -> List[StudentCompletion]:
        """Every student with their average completion, ordered by name."""
        return [
            StudentCompletion(
                id=user.id,
                name=user.name,
                username=user.username,
                standard=user.standard,
                division=user.division,
                average_completion=float(average),
            )
            for user, average in self._students_with_completion()
        ]

    def _build_batch(self, standard: str, division: str, student_count: int) -> Batch:
        students = [
            BatchStudent(
                id=user.id,
                name=user.name,
                username=user.username,
                average_completion=float(average),
            )
            for user, average in self._students_with_completion(standard, division)
        ]
        return Batch(
            standard=standard,
            division=division,
            student_count=student_count,
            students=students,
        )

    def get_batches(self) -> List[Batch]:
        """Students grouped by (standard, division).

        Students missing either field are not part of any batch.
        """
        rows = (
            self.db.query(
                UserModel.standard,
                UserModel.division,
                func.count(UserModel.id).label("student_count"),
            )
            .filter(
                UserModel.role == "student",
                UserModel.standard.isnot(None),
                UserModel.division.isnot(None),
            )
            .group_by(UserModel.standard, UserModel.division)
            .order_by(UserModel.standard, UserModel.division)
            .all()
        )
        return [self._build_batch(standard, division, count) for standard, division, count in rows]

    def get_batch(self, standard: str, division: str) -> Batch:
        """A single batch.

        Raises:
            NotFoundError: If no student has this placement.
        """
        count = (
            self.db.query(func.count(UserModel.id))
            .filter(
                UserModel.role == "student",
                UserModel.standard == standard,
                UserModel.division == division,
            )
            .scalar()
        )
        if not count:
            raise NotFoundError("Batch", f"{standard}-{division}")
        return self._build_batch(standard, division, count)
