"""Parent dashboard utilities."""

import logging
from typing import List

from sqlalchemy import and_, exists
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from models.assignment import AssignmentModel
from models.assignment_submission import AssignmentSubmissionModel
from models.course import CourseModel
from models.course_progress import CourseProgressModel
from models.parent_child import ParentChildModel
from models.user import UserModel
from schemas.parent import (
    ChildCourseProgress,
    ChildSummary,
    ParentDashboardResponse,
    PendingAssignment,
)

logger = logging.getLogger(__name__)


class ParentManager:
    """Reads a parent's linked children and their progress."""

    def __init__(self, db: Session):
        self.db = db

    def get_parent(self, parent_id: int) -> UserModel:
        model = (
            self.db.query(UserModel)
            .filter(UserModel.id == parent_id, UserModel.role == "parent")
            .first()
        )
        if not model:
            raise NotFoundError("Parent", parent_id)
        return model

    def list_children(self, parent_id: int) -> List[UserModel]:
        """Children linked to a parent, ordered by name.

        Raises:
            NotFoundError: If the parent does not exist.
        """
        self.get_parent(parent_id)
        return (
            self.db.query(UserModel)
            .join(ParentChildModel, ParentChildModel.child_id == UserModel.id)
            .filter(ParentChildModel.parent_id == parent_id)
            .order_by(UserModel.name, UserModel.id)
            .all()
        )

    def is_parent_of(self, parent_id: int, child_id: int) -> bool:
        link = (
            self.db.query(ParentChildModel.id)
            .filter(
                ParentChildModel.parent_id == parent_id,
                ParentChildModel.child_id == child_id,
            )
            .first()
        )
        return link is not None

    def course_progress(self, child_id: int) -> List[ChildCourseProgress]:
        query = (
            self.db.query(CourseProgressModel, CourseModel.title)
            .join(CourseModel, CourseModel.id == CourseProgressModel.course_id)
            .filter(CourseProgressModel.student_id == child_id)
            .order_by(CourseProgressModel.updated_at.desc(), CourseProgressModel.id.desc())
        )
        return [
            ChildCourseProgress(
                course_id=row.course_id,
                course_title=title,
                progress_percentage=row.progress_percentage,
            )
            for row, title in query.all()
        ]

    def pending_assignments(self, child: UserModel) -> List[PendingAssignment]:
        """Assignments for the child's class that the child has not submitted.

        A child without a class placement has nothing pending.
        """
        if child.standard is None or child.division is None:
            return []

        submitted = exists().where(
            and_(
                AssignmentSubmissionModel.assignment_id == AssignmentModel.id,
                AssignmentSubmissionModel.student_id == child.id,
            )
        )
        query = (
            self.db.query(AssignmentModel)
            .filter(
                AssignmentModel.standard == child.standard,
                AssignmentModel.division == child.division,
                ~submitted,
            )
            .order_by(AssignmentModel.created_at.desc(), AssignmentModel.id.desc())
        )
        return [
            PendingAssignment(
                assignment_id=assignment.id,
                assignment_title=assignment.title,
                assignment_type=assignment.type,
                created_at=assignment.created_at,
            )
            for assignment in query.all()
        ]

    def get_parent_dashboard(self, parent_id: int) -> ParentDashboardResponse:
        """Progress and pending work for each of a parent's children.

        Raises:
            NotFoundError: If the parent does not exist.
        """
        children = []
        for child in self.list_children(parent_id):
            children.append(
                ChildSummary(
                    id=child.id,
                    name=child.name,
                    username=child.username,
                    standard=child.standard,
                    division=child.division,
                    course_progress=self.course_progress(child.id),
                    pending_assignments=self.pending_assignments(child),
                )
            )
        return ParentDashboardResponse(children=children)
