"""Assignment and submission utilities.

Assignments are immutable once created. A student may submit a given
assignment exactly once; a second attempt fails instead of returning the
existing submission.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import ASSIGNMENT_TYPES
from core.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from models.assignment import AssignmentModel
from models.assignment_submission import AssignmentSubmissionModel
from models.user import UserModel
from schemas.assignment import SubmissionDetail
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


class AssignmentManager:
    """Manages assignments and their submissions."""

    def __init__(self, db: Session):
        """Initialize AssignmentManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def create_assignment(
        self,
        title: str,
        assignment_type: str,
        standard: str,
        division: str,
        created_by: int,
        content: Optional[str] = None,
    ) -> AssignmentModel:
        """Create an assignment for one class.

        Raises:
            InvalidArgumentError: If the type is not quiz, written or upload.
            NotFoundError: If the creator does not exist.
        """
        if assignment_type not in ASSIGNMENT_TYPES:
            raise InvalidArgumentError(f"Invalid assignment type: {assignment_type}")
        creator = self.db.query(UserModel.id).filter(UserModel.id == created_by).first()
        if not creator:
            raise NotFoundError("User", created_by)

        model = AssignmentModel(
            title=title,
            type=assignment_type,
            standard=standard,
            division=division,
            content=content,
            created_by=created_by,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info(
            "Created %s assignment %s for %s-%s", assignment_type, model.id, standard, division
        )
        return model

    def get_assignment(self, assignment_id: int) -> AssignmentModel:
        model = (
            self.db.query(AssignmentModel)
            .filter(AssignmentModel.id == assignment_id)
            .first()
        )
        if not model:
            raise NotFoundError("Assignment", assignment_id)
        return model

    def list_assignments(self) -> List[AssignmentModel]:
        return (
            self.db.query(AssignmentModel)
            .order_by(AssignmentModel.created_at.desc(), AssignmentModel.id.desc())
            .all()
        )

    def list_assignments_for_class(self, standard: str, division: str) -> List[AssignmentModel]:
        return (
            self.db.query(AssignmentModel)
            .filter(
                AssignmentModel.standard == standard,
                AssignmentModel.division == division,
            )
            .order_by(AssignmentModel.created_at.desc(), AssignmentModel.id.desc())
            .all()
        )

    def has_submitted(self, assignment_id: int, student_id: int) -> bool:
        existing = (
            self.db.query(AssignmentSubmissionModel.id)
            .filter(
                AssignmentSubmissionModel.assignment_id == assignment_id,
                AssignmentSubmissionModel.student_id == student_id,
            )
            .first()
        )
        return existing is not None

    def submit_assignment(
        self,
        assignment_id: int,
        student_id: int,
        content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> AssignmentSubmissionModel:
        """Record a student's one and only submission for an assignment.

        Checks run in order: the assignment exists, the student exists with
        the student role, and no submission exists yet for the pair.

        Args:
            assignment_id: Assignment being submitted.
            student_id: Submitting student.
            content: Optional answer text.
            file_path: Optional path of an uploaded file.

        Returns:
            The inserted submission, including its ID and submitted_at.

        Raises:
            NotFoundError: If the assignment or student does not exist.
            AlreadyExistsError: If the student already submitted.
        """
        self.get_assignment(assignment_id)
        UserManager(self.db).get_student(student_id)

        if self.has_submitted(assignment_id, student_id):
            raise AlreadyExistsError("Assignment already submitted")

        submission = AssignmentSubmissionModel(
            assignment_id=assignment_id,
            student_id=student_id,
            content=content,
            file_path=file_path,
        )
        # The unique constraint on (assignment_id, student_id) is the real
        # guard; the check above only gives concurrent losers a clean error.
        try:
            self.db.add(submission)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                "Concurrent submission rejected for assignment %s student %s",
                assignment_id,
                student_id,
            )
            raise AlreadyExistsError("Assignment already submitted") from e

        self.db.refresh(submission)
        logger.info("Student %s submitted assignment %s", student_id, assignment_id)
        return submission

    def list_submissions(self, assignment_id: int) -> List[SubmissionDetail]:
        """List submissions for an assignment, newest first.

        Raises:
            NotFoundError: If the assignment does not exist.
        """
        assignment = self.get_assignment(assignment_id)
        query = (
            self.db.query(AssignmentSubmissionModel, UserModel.name)
            .join(UserModel, UserModel.id == AssignmentSubmissionModel.student_id)
            .filter(AssignmentSubmissionModel.assignment_id == assignment_id)
            .order_by(
                AssignmentSubmissionModel.submitted_at.desc(),
                AssignmentSubmissionModel.id.desc(),
            )
        )
        results = []
        for submission, student_name in query.all():
            results.append(
                SubmissionDetail(
                    id=submission.id,
                    assignment_id=submission.assignment_id,
                    student_id=submission.student_id,
                    content=submission.content,
                    file_path=submission.file_path,
                    submitted_at=submission.submitted_at,
                    student_name=student_name,
                    assignment_title=assignment.title,
                )
            )
        return results
