"""Course progress routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user
from config import STAFF_ROLES
from core.dependencies import ParentManagerDep, ProgressManagerDep
from core.exceptions import InternalError, NotFoundError
from schemas.progress import StudentProgressResponse, UpdateProgressRequest
from schemas.user import SuccessResponse, User

router = APIRouter(prefix="/auth/progress", tags=["Progress"])


@router.put("", response_model=SuccessResponse, summary="Record course progress")
def update_progress(
    req: UpdateProgressRequest,
    progress_manager: ProgressManagerDep,
    current_user: User = Depends(get_current_user),
) -> SuccessResponse:
    """Create or update a student's progress for a course.

    Completion time is set the first time progress reaches 100 and is kept
    from then on.

    Raises:
        HTTPException: 403 when updating another student's progress, 404 if
            the course or student is missing.
    """
    if current_user.role not in STAFF_ROLES and current_user.id != req.student_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only update your own progress.",
        )
    try:
        progress_manager.upsert_progress(
            req.course_id, req.student_id, req.progress_percentage
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return SuccessResponse(success=True)


@router.get(
    "/{student_id}",
    response_model=StudentProgressResponse,
    summary="List a student's course progress",
)
def get_student_progress(
    student_id: int,
    progress_manager: ProgressManagerDep,
    parent_manager: ParentManagerDep,
    current_user: User = Depends(get_current_user),
) -> StudentProgressResponse:
    """Readable by the student, their linked parent, and staff."""
    allowed = (
        current_user.role in STAFF_ROLES
        or current_user.id == student_id
        or (
            current_user.role == "parent"
            and parent_manager.is_parent_of(current_user.id, student_id)
        )
    )
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to view this student's progress.",
        )
    try:
        progress = progress_manager.list_student_progress(student_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return StudentProgressResponse(progress=progress)
