"""Parent dashboard schema definitions."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from schemas.user import User


class ChildCourseProgress(BaseModel):
    course_id: int
    course_title: str
    progress_percentage: float


class PendingAssignment(BaseModel):
    assignment_id: int
    assignment_title: str
    assignment_type: str
    created_at: datetime


class ChildSummary(BaseModel):
    id: int
    name: str
    username: str
    standard: Optional[str] = None
    division: Optional[str] = None
    course_progress: List[ChildCourseProgress]
    pending_assignments: List[PendingAssignment]


class ParentDashboardResponse(BaseModel):
    children: List[ChildSummary]


class ChildrenResponse(BaseModel):
    children: List[User]
