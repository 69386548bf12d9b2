"""Compliance report and dashboard schema definitions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ComplianceStatus(str, Enum):
    """Submission status of one employee for one category in a window.

    - uploaded: at least one file was uploaded inside the window.
    - pending: nothing in the window, last file still within the grace period.
    - overdue: nothing in the window, last file older than the grace period.
    - missing: the employee never uploaded a file in this category.
    """

    UPLOADED = "uploaded"
    PENDING = "pending"
    OVERDUE = "overdue"
    MISSING = "missing"


@dataclass(frozen=True)
class ReportWindow:
    """Inclusive time window ``[start, end]`` in naive UTC."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


class ComplianceRow(BaseModel):
    employee_id: int
    employee_name: str
    department: Optional[str] = None
    category: str
    last_upload_at: Optional[datetime] = None
    status: ComplianceStatus
    days_overdue: Optional[int] = None


class ComplianceReport(BaseModel):
    window_start: datetime
    window_end: datetime
    grace_days: int
    rows: List[ComplianceRow]


class CategoryCount(BaseModel):
    category: str
    count: int


class RecentActivity(BaseModel):
    filename: str
    status: str
    created_at: datetime


class DashboardSummary(BaseModel):
    files_uploaded: int = Field(description="Files uploaded since the start of the current month.")
    total_employees: int = Field(description="Active accounts.")
    recent_activity: List[RecentActivity]
    categories: List[CategoryCount]
