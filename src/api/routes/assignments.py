"""Assignment and submission routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user, require_staff
from config import STAFF_ROLES
from core.dependencies import AssignmentManagerDep
from core.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from schemas.assignment import (
    Assignment,
    AssignmentSubmission,
    AssignmentsResponse,
    CreateAssignmentRequest,
    SubmissionsResponse,
    SubmitAssignmentRequest,
)
from schemas.user import User

router = APIRouter(prefix="/auth/assignments", tags=["Assignment"])


@router.post("", response_model=Assignment, summary="Create an assignment")
def create_assignment(
    req: CreateAssignmentRequest,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(require_staff),
) -> Assignment:
    created_by = req.created_by if req.created_by is not None else current_user.id
    try:
        model = assignment_manager.create_assignment(
            title=req.title,
            assignment_type=req.type,
            standard=req.standard,
            division=req.division,
            created_by=created_by,
            content=req.content,
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Assignment.model_validate(model)


@router.get("", response_model=AssignmentsResponse, summary="List all assignments")
def list_assignments(
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> AssignmentsResponse:
    models = assignment_manager.list_assignments()
    return AssignmentsResponse(assignments=[Assignment.model_validate(m) for m in models])


@router.post("/submit", response_model=AssignmentSubmission, summary="Submit an assignment")
def submit_assignment(
    req: SubmitAssignmentRequest,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> AssignmentSubmission:
    """Submit an assignment once.

    Students submit for themselves; teachers and admins may submit on a
    student's behalf.

    Raises:
        HTTPException: 403 when submitting for someone else, 404 if the
            assignment or student is missing, 409 if already submitted.
    """
    if current_user.role not in STAFF_ROLES and current_user.id != req.student_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only submit your own assignments.",
        )
    try:
        model = assignment_manager.submit_assignment(
            assignment_id=req.assignment_id,
            student_id=req.student_id,
            content=req.content,
            file_path=req.file_path,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return AssignmentSubmission.model_validate(model)


# Declared before /{standard}/{division}, which would otherwise swallow it
@router.get(
    "/{assignment_id}/submissions",
    response_model=SubmissionsResponse,
    summary="List submissions for an assignment",
)
def list_submissions(
    assignment_id: int,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(require_staff),
) -> SubmissionsResponse:
    try:
        submissions = assignment_manager.list_submissions(assignment_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return SubmissionsResponse(submissions=submissions)


@router.get(
    "/{standard}/{division}",
    response_model=AssignmentsResponse,
    summary="List assignments for a class",
)
def list_assignments_for_class(
    standard: str,
    division: str,
    assignment_manager: AssignmentManagerDep,
    current_user: User = Depends(get_current_user),
) -> AssignmentsResponse:
    models = assignment_manager.list_assignments_for_class(standard, division)
    return AssignmentsResponse(assignments=[Assignment.model_validate(m) for m in models])
