"""Dashboard routes."""

from fastapi import APIRouter

from core.dependencies import CurrentIdentity, DashboardManagerDep
from schemas.report import DashboardSummary

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary, summary="Dashboard summary")
def get_summary(identity: CurrentIdentity, dashboard_manager: DashboardManagerDep) -> DashboardSummary:
    return dashboard_manager.summary(identity)
