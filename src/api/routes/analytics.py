"""Analytics routes for the admin and teacher dashboards."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import require_staff
from core.dependencies import AnalyticsManagerDep
from core.exceptions import NotFoundError
from schemas.analytics import (
    AnalyticsOverview,
    Batch,
    BatchAnalyticsResponse,
    StudentCompletionResponse,
)
from schemas.user import User

router = APIRouter(prefix="/auth/analytics", tags=["Analytics"])


@router.get("", response_model=AnalyticsOverview, summary="Dashboard totals")
def get_analytics(
    analytics_manager: AnalyticsManagerDep,
    current_user: User = Depends(require_staff),
) -> AnalyticsOverview:
    return analytics_manager.get_overview()


@router.get(
    "/student-progress",
    response_model=StudentCompletionResponse,
    summary="Average completion per student",
)
def get_student_progress(
    analytics_manager: AnalyticsManagerDep,
    current_user: User = Depends(require_staff),
) -> StudentCompletionResponse:
    """Every student with their average completion, used for exports."""
    return StudentCompletionResponse(students=analytics_manager.get_student_progress())


@router.get("/batches", response_model=BatchAnalyticsResponse, summary="Per-class roll-up")
def get_batches(
    analytics_manager: AnalyticsManagerDep,
    current_user: User = Depends(require_staff),
) -> BatchAnalyticsResponse:
    return BatchAnalyticsResponse(batches=analytics_manager.get_batches())


@router.get(
    "/batches/{standard}/{division}",
    response_model=Batch,
    summary="Roll-up for one class",
)
def get_batch(
    standard: str,
    division: str,
    analytics_manager: AnalyticsManagerDep,
    current_user: User = Depends(require_staff),
) -> Batch:
    try:
        return analytics_manager.get_batch(standard, division)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
