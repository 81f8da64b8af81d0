"""Analytics schema definitions."""

from typing import List, Optional

from pydantic import BaseModel


class AnalyticsOverview(BaseModel):
    total_students: int
    total_teachers: int
    total_logins_this_week: int


class StudentCompletion(BaseModel):
    id: int
    name: str
    username: str
    standard: Optional[str] = None
    division: Optional[str] = None
    average_completion: float


class StudentCompletionResponse(BaseModel):
    students: List[StudentCompletion]


class BatchStudent(BaseModel):
    id: int
    name: str
    username: str
    average_completion: float


class Batch(BaseModel):
    """Students sharing one (standard, division) placement."""

    standard: str
    division: str
    student_count: int
    students: List[BatchStudent]


class BatchAnalyticsResponse(BaseModel):
    batches: List[Batch]
