"""Parent dashboard routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user
from config import STAFF_ROLES
from core.dependencies import ParentManagerDep
from core.exceptions import NotFoundError
from schemas.parent import ChildrenResponse, ParentDashboardResponse
from schemas.user import User

router = APIRouter(prefix="/auth/parents", tags=["Parent"])


def _check_parent_access(parent_id: int, current_user: User) -> None:
    if current_user.role not in STAFF_ROLES and current_user.id != parent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to view this parent's data.",
        )


@router.get(
    "/{parent_id}/dashboard",
    response_model=ParentDashboardResponse,
    summary="Children's progress and pending assignments",
)
def get_parent_dashboard(
    parent_id: int,
    parent_manager: ParentManagerDep,
    current_user: User = Depends(get_current_user),
) -> ParentDashboardResponse:
    """Course progress and unsubmitted assignments for each linked child.

    Raises:
        HTTPException: 403 for other parents and students, 404 if the parent
            does not exist.
    """
    _check_parent_access(parent_id, current_user)
    try:
        return parent_manager.get_parent_dashboard(parent_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent not found")


@router.get(
    "/{parent_id}/children",
    response_model=ChildrenResponse,
    summary="List a parent's children",
)
def list_children(
    parent_id: int,
    parent_manager: ParentManagerDep,
    current_user: User = Depends(get_current_user),
) -> ChildrenResponse:
    _check_parent_access(parent_id, current_user)
    try:
        children = parent_manager.list_children(parent_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent not found")
    return ChildrenResponse(children=[User.model_validate(c) for c in children])
