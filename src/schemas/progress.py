"""Course progress schema definitions."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UpdateProgressRequest(BaseModel):
    course_id: int
    student_id: int
    progress_percentage: float = Field(
        description="Completion percentage. Stored as sent, without range checks.",
    )


class CourseProgressEntry(BaseModel):
    course_id: int
    course_title: str
    progress_percentage: float
    completed_at: Optional[datetime] = None


class StudentProgressResponse(BaseModel):
    progress: List[CourseProgressEntry]
