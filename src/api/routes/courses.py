"""Course routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user, require_staff
from core.dependencies import CourseManagerDep
from core.exceptions import InvalidArgumentError, NotFoundError
from schemas.course import Course, CoursePatch, CoursesResponse, CreateCourseRequest
from schemas.user import SuccessResponse, User

router = APIRouter(prefix="/auth/courses", tags=["Course"])


@router.post("", response_model=Course, summary="Create a course")
def create_course(
    req: CreateCourseRequest,
    course_manager: CourseManagerDep,
    current_user: User = Depends(require_staff),
) -> Course:
    created_by = req.created_by if req.created_by is not None else current_user.id
    try:
        model = course_manager.create_course(
            title=req.title,
            created_by=created_by,
            description=req.description,
            duration=req.duration,
            file_path=req.file_path,
            file_type=req.file_type,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Course.model_validate(model)


@router.get("", response_model=CoursesResponse, summary="List courses")
def list_courses(
    course_manager: CourseManagerDep,
    current_user: User = Depends(get_current_user),
) -> CoursesResponse:
    return CoursesResponse(
        courses=[Course.model_validate(m) for m in course_manager.list_courses()]
    )


@router.get("/{course_id}", response_model=Course, summary="Get a course")
def get_course(
    course_id: int,
    course_manager: CourseManagerDep,
    current_user: User = Depends(get_current_user),
) -> Course:
    try:
        return Course.model_validate(course_manager.get_course(course_id))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")


@router.put("/{course_id}", response_model=Course, summary="Update a course")
def update_course(
    course_id: int,
    patch: CoursePatch,
    course_manager: CourseManagerDep,
    current_user: User = Depends(require_staff),
) -> Course:
    """Partially update a course.

    Only the fields present in the body are changed.

    Raises:
        HTTPException: 400 for an empty body, 404 if the course is missing.
    """
    try:
        model = course_manager.update_course(course_id, patch)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return Course.model_validate(model)


@router.delete("/{course_id}", response_model=SuccessResponse, summary="Delete a course")
def delete_course(
    course_id: int,
    course_manager: CourseManagerDep,
    current_user: User = Depends(require_staff),
) -> SuccessResponse:
    """Delete a course together with its progress records."""
    try:
        course_manager.delete_course(course_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return SuccessResponse(success=True)
