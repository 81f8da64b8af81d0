"""Course progress utilities.

A student has at most one progress row per course. ``completed_at`` is set
the first time the percentage reaches 100 and is never cleared or moved
afterwards.
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import InternalError, NotFoundError
from models.base import utcnow
from models.course import CourseModel
from models.course_progress import CourseProgressModel
from schemas.progress import CourseProgressEntry
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

COMPLETION_THRESHOLD = 100


class ProgressManager:
    """Manages course progress records."""

    def __init__(self, db: Session):
        """Initialize ProgressManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def _get_row(self, course_id: int, student_id: int):
        return (
            self.db.query(CourseProgressModel)
            .filter(
                CourseProgressModel.course_id == course_id,
                CourseProgressModel.student_id == student_id,
            )
            .first()
        )

    def _require_targets(self, course_id: int, student_id: int) -> None:
        if not self.db.query(CourseModel.id).filter(CourseModel.id == course_id).first():
            raise NotFoundError("Course", course_id)
        UserManager(self.db).get_student(student_id)

    @staticmethod
    def _apply(row: CourseProgressModel, progress_percentage: float, now: datetime) -> None:
        row.progress_percentage = progress_percentage
        if progress_percentage >= COMPLETION_THRESHOLD and row.completed_at is None:
            row.completed_at = now
        row.updated_at = now

    def upsert_progress(
        self, course_id: int, student_id: int, progress_percentage: float
    ) -> None:
        """Record a student's completion percentage for a course.

        Updates the existing row for (course_id, student_id) or inserts one.
        The value is stored as given; range checks belong to the caller.

        Args:
            course_id: Course the progress belongs to.
            student_id: Student the progress belongs to.
            progress_percentage: New completion percentage.

        Raises:
            NotFoundError: If the course or student does not exist.
            InternalError: If the row could neither be inserted nor found.
        """
        self._require_targets(course_id, student_id)
        now = utcnow()

        row = self._get_row(course_id, student_id)
        if row is None:
            row = CourseProgressModel(
                course_id=course_id,
                student_id=student_id,
                progress_percentage=progress_percentage,
                completed_at=now if progress_percentage >= COMPLETION_THRESHOLD else None,
                updated_at=now,
            )
            try:
                self.db.add(row)
                self.db.commit()
                logger.info(
                    "Created progress for course %s student %s: %s%%",
                    course_id,
                    student_id,
                    progress_percentage,
                )
                return
            except IntegrityError:
                # Lost an insert race to another request; update its row instead
                self.db.rollback()
                logger.warning(
                    "Concurrent progress insert for course %s student %s, updating instead",
                    course_id,
                    student_id,
                )
                row = self._get_row(course_id, student_id)
                if row is None:
                    raise InternalError("Failed to record course progress")

        self._apply(row, progress_percentage, now)
        self.db.commit()
        logger.info(
            "Updated progress for course %s student %s: %s%%",
            course_id,
            student_id,
            progress_percentage,
        )

    def list_student_progress(self, student_id: int) -> List[CourseProgressEntry]:
        """List a student's progress rows, most recently updated first.

        Raises:
            NotFoundError: If the student does not exist.
        """
        UserManager(self.db).get_student(student_id)

        query = (
            self.db.query(CourseProgressModel, CourseModel.title)
            .join(CourseModel, CourseModel.id == CourseProgressModel.course_id)
            .filter(CourseProgressModel.student_id == student_id)
            .order_by(CourseProgressModel.updated_at.desc(), CourseProgressModel.id.desc())
        )
        return [
            CourseProgressEntry(
                course_id=row.course_id,
                course_title=title,
                progress_percentage=row.progress_percentage,
                completed_at=row.completed_at,
            )
            for row, title in query.all()
        ]
