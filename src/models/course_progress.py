from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, UniqueConstraint
from .base import Base, utcnow


class CourseProgressModel(Base):
    __tablename__ = "course_progress"
    # Authoritative guard for one progress row per (course, student)
    __table_args__ = (
        UniqueConstraint(
            "course_id",
            "student_id",
            name="uq_course_progress_course_student",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    student_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    progress_percentage = Column(Float, nullable=False, default=0)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
