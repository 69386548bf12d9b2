"""Compliance report routes."""

from typing import Optional

from fastapi import APIRouter, Query

from core.dependencies import AdminIdentity, ComplianceManagerDep
from schemas.report import ComplianceReport
from utils.compliance import month_window

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/compliance", response_model=ComplianceReport, summary="Compliance report")
def get_compliance_report(
    identity: AdminIdentity,
    compliance_manager: ComplianceManagerDep,
    month: Optional[str] = Query(default=None, description="Reporting month, YYYY-MM"),
    file_type: Optional[str] = Query(default="all", alias="fileType"),
    department: Optional[str] = Query(default="all"),
) -> ComplianceReport:
    """Per-employee, per-category submission status for one month.

    Args:
        identity: Admin identity.
        compliance_manager: Injected ComplianceManager instance.
        month: Reporting month. Defaults to the current month.
        file_type: Category filter or "all".
        department: Department filter or "all".

    Returns:
        ComplianceReport with rows ordered by employee name.
    """
    window = month_window(month)
    rows = compliance_manager.compute_status(window, category=file_type, department=department)
    return ComplianceReport(
        window_start=window.start,
        window_end=window.end,
        grace_days=compliance_manager.grace_days,
        rows=rows,
    )
