"""Course management utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import InvalidArgumentError, NotFoundError
from models.base import utcnow
from models.course import CourseModel
from models.user import UserModel
from schemas.course import CoursePatch

logger = logging.getLogger(__name__)

# Patch field -> CourseModel attribute. Only these columns are ever written
# by update_course.
COURSE_PATCH_COLUMNS = {
    "title": "title",
    "description": "description",
    "duration": "duration",
    "file_path": "file_path",
    "file_type": "file_type",
}


class CourseManager:
    """Manages course CRUD operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_course(
        self,
        title: str,
        created_by: int,
        description: Optional[str] = None,
        duration: Optional[str] = None,
        file_path: Optional[str] = None,
        file_type: Optional[str] = None,
    ) -> CourseModel:
        """Create a new course.

        Raises:
            NotFoundError: If the creator does not exist.
        """
        creator = self.db.query(UserModel.id).filter(UserModel.id == created_by).first()
        if not creator:
            raise NotFoundError("User", created_by)

        model = CourseModel(
            title=title,
            description=description,
            duration=duration,
            file_path=file_path,
            file_type=file_type,
            created_by=created_by,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created course %s: %s", model.id, title)
        return model

    def get_course(self, course_id: int) -> CourseModel:
        model = self.db.query(CourseModel).filter(CourseModel.id == course_id).first()
        if not model:
            raise NotFoundError("Course", course_id)
        return model

    def list_courses(self) -> List[CourseModel]:
        return (
            self.db.query(CourseModel)
            .order_by(CourseModel.created_at.desc(), CourseModel.id.desc())
            .all()
        )

    def update_course(self, course_id: int, patch: CoursePatch) -> CourseModel:
        """Apply a partial update to a course.

        Only the fields supplied in ``patch`` are written.

        Args:
            course_id: Course to update.
            patch: Supplied fields to change.

        Returns:
            Updated CourseModel.

        Raises:
            InvalidArgumentError: If no fields were supplied or the title is
                set to null.
            NotFoundError: If the course does not exist.
        """
        changes = patch.supplied_fields()
        if not changes:
            raise InvalidArgumentError("No fields to update")
        if "title" in changes and changes["title"] is None:
            raise InvalidArgumentError("Course title cannot be null")

        model = self.get_course(course_id)
        for field, column in COURSE_PATCH_COLUMNS.items():
            if field in changes:
                setattr(model, column, changes[field])
        model.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated course %s fields: %s", course_id, ", ".join(sorted(changes)))
        return model

    def delete_course(self, course_id: int) -> None:
        """Delete a course.

        Dependent progress rows are removed by the store's
        ``ON DELETE CASCADE``.

        Raises:
            NotFoundError: If the course does not exist.
        """
        model = self.get_course(course_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted course: %s", course_id)
