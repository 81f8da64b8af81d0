"""User account routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user, require_staff
from core.dependencies import UserManagerDep
from core.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from schemas.user import (
    CreateStudentWithParentRequest,
    CreateStudentWithParentResponse,
    CreateUserRequest,
    CreateUserResponse,
    SuccessResponse,
    UpdatePhoneRequest,
    User,
    UserRole,
    UsersResponse,
)

router = APIRouter(prefix="/auth", tags=["Users"])


@router.post("/users", response_model=CreateUserResponse, summary="Create a user")
def create_user(
    req: CreateUserRequest,
    user_manager: UserManagerDep,
    current_user: User = Depends(require_staff),
) -> CreateUserResponse:
    """Create a teacher, admin, student or parent account.

    Only admins may create another admin.

    Raises:
        HTTPException: 403 for a teacher creating an admin, 409 if the
            username or phone number is taken, 400 for a student without
            a class placement.
    """
    if req.role == "admin" and current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can create admin accounts.",
        )
    try:
        model = user_manager.create_user(
            username=req.username,
            name=req.name,
            phone_number=req.phone_number,
            role=req.role,
            email=req.email,
            standard=req.standard,
            division=req.division,
            parent_name=req.parent_name,
        )
    except AlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return CreateUserResponse(user=User.model_validate(model), phone_number=model.phone_number)


@router.put("/phone", response_model=SuccessResponse, summary="Change a phone number")
def update_phone(
    req: UpdatePhoneRequest,
    user_manager: UserManagerDep,
    current_user: User = Depends(get_current_user),
) -> SuccessResponse:
    """Change a user's phone number. Users may change their own; admins any."""
    if current_user.id != req.user_id and current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only change your own phone number.",
        )
    try:
        user_manager.update_phone(req.user_id, req.new_phone_number)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except AlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return SuccessResponse(success=True)


@router.get("/users/{role}", response_model=UsersResponse, summary="List users by role")
def list_users_by_role(
    role: UserRole,
    user_manager: UserManagerDep,
    current_user: User = Depends(require_staff),
) -> UsersResponse:
    models = user_manager.list_users_by_role(role)
    return UsersResponse(users=[User.model_validate(m) for m in models])


@router.post(
    "/student-with-parent",
    response_model=CreateStudentWithParentResponse,
    summary="Create a student and link a parent",
)
def create_student_with_parent(
    req: CreateStudentWithParentRequest,
    user_manager: UserManagerDep,
    current_user: User = Depends(require_staff),
) -> CreateStudentWithParentResponse:
    """Create a student account and link it to a new or existing parent.

    An existing parent is matched by phone number. All rows are created in
    one transaction.

    Raises:
        HTTPException: 409 if the student username or a phone number is taken,
            400 for a blank student username or parent name.
    """
    try:
        student, parent, parent_phone = user_manager.create_student_with_parent(
            student_name=req.student_name,
            student_username=req.student_username,
            student_phone=req.student_phone,
            standard=req.standard,
            division=req.division,
            parent_name=req.parent_name,
            parent_phone=req.parent_phone,
        )
    except AlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return CreateStudentWithParentResponse(
        student=User.model_validate(student),
        parent=User.model_validate(parent),
        parent_phone=parent_phone,
    )
