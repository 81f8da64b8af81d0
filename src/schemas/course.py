"""Course schema definitions."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Course(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    duration: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime


class CreateCourseRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    duration: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    created_by: Optional[int] = Field(
        default=None,
        description="Creator user ID. Defaults to the caller.",
    )


class CoursePatch(BaseModel):
    """Partial course update.

    Only fields present in the request body are applied; an omitted field
    leaves the column untouched, an explicit null clears it.
    """

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    duration: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None

    def supplied_fields(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CoursesResponse(BaseModel):
    courses: List[Course]
