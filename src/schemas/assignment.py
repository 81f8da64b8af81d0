"""Assignment and submission schema definitions."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AssignmentType = Literal["quiz", "written", "upload"]


class Assignment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: AssignmentType
    standard: str
    division: str
    content: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime


class CreateAssignmentRequest(BaseModel):
    title: str = Field(min_length=1)
    type: AssignmentType
    standard: str = Field(min_length=1)
    division: str = Field(min_length=1)
    content: Optional[str] = None
    created_by: Optional[int] = Field(
        default=None,
        description="Creator user ID. Defaults to the caller.",
    )


class AssignmentsResponse(BaseModel):
    assignments: List[Assignment]


class SubmitAssignmentRequest(BaseModel):
    assignment_id: int
    student_id: int
    content: Optional[str] = None
    file_path: Optional[str] = None


class AssignmentSubmission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    assignment_id: int
    student_id: int
    content: Optional[str] = None
    file_path: Optional[str] = None
    submitted_at: datetime


class SubmissionDetail(AssignmentSubmission):
    """Submission joined with the student's name and the assignment title."""

    student_name: str
    assignment_title: str


class SubmissionsResponse(BaseModel):
    submissions: List[SubmissionDetail]
