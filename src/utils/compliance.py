"""Compliance aggregation.

Derives, for every employee and category, whether the employee submitted a
document in a reporting window. Rows are computed on demand and never stored.

Status rule for one (employee, category) pair and window ``[start, end]``:

- ``uploaded``: some file was created inside the window (inclusive).
- ``missing``: the employee never uploaded a file in this category.
- ``overdue``: the newest file before the window precedes the window start
  by more than the grace period; ``days_overdue`` counts whole days from
  that file to the window start.
- ``pending``: otherwise.

Files created after the window are ignored, so past reports stay stable.
"""

import calendar
import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

import config
from core.exceptions import InvalidReportWindowError, InvalidCategoryError
from models.file_record import FileRecordModel
from models.user import UserModel
from schemas.report import ComplianceRow, ComplianceStatus, ReportWindow
from utils.timeutil import to_naive_utc, utc_now

logger = logging.getLogger(__name__)


def month_window(month: Optional[str] = None) -> ReportWindow:
    """Build the inclusive window covering a calendar month.

    Args:
        month: ``YYYY-MM``. Defaults to the current UTC month.

    Raises:
        InvalidReportWindowError: If ``month`` is malformed.
    """
    if not month:
        now = utc_now()
        year, month_number = now.year, now.month
    else:
        try:
            parsed = datetime.strptime(month.strip(), "%Y-%m")
        except ValueError:
            raise InvalidReportWindowError()
        year, month_number = parsed.year, parsed.month

    last_day = calendar.monthrange(year, month_number)[1]
    start = datetime(year, month_number, 1)
    end = datetime(year, month_number, last_day) + timedelta(days=1) - timedelta(microseconds=1)
    return ReportWindow(start=start, end=end)


def normalize_filter(value: Optional[str]) -> Optional[str]:
    """Map the ``all`` sentinel and blanks to "no filter"."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == config.FILTER_ALL:
        return None
    return value


def derive_status(
    uploads: Sequence[datetime],
    window: ReportWindow,
    grace_days: int,
) -> Tuple[ComplianceStatus, Optional[datetime], Optional[int]]:
    """Apply the status rule to one employee's uploads in one category.

    Args:
        uploads: Creation times of the employee's files in the category.
        window: Reporting window.
        grace_days: Days a submission stays current.

    Returns:
        Tuple of status, the upload time the status is based on, and the
        whole days overdue (only for ``overdue``).
    """
    in_window = [u for u in uploads if window.contains(u)]
    if in_window:
        return ComplianceStatus.UPLOADED, max(in_window), None

    earlier = [u for u in uploads if u < window.start]
    if not earlier:
        return ComplianceStatus.MISSING, None, None

    last = max(earlier)
    # timedelta.days truncates partial days
    days = (window.start - last).days
    if days > grace_days:
        return ComplianceStatus.OVERDUE, last, days
    return ComplianceStatus.PENDING, last, None


def build_rows(
    users: Iterable[UserModel],
    files: Iterable[FileRecordModel],
    window: ReportWindow,
    categories: Sequence[str],
    grace_days: int,
) -> List[ComplianceRow]:
    """Left-join users against their files and derive one row per category."""
    uploads: Dict[Tuple[int, str], List[datetime]] = defaultdict(list)
    for record in files:
        uploads[(record.owner_id, record.category)].append(to_naive_utc(record.created_at))

    rows = []
    for user in users:
        for category in categories:
            status, last_upload_at, days_overdue = derive_status(
                uploads.get((user.id, category), []), window, grace_days
            )
            rows.append(
                ComplianceRow(
                    employee_id=user.id,
                    employee_name=user.username,
                    department=user.department,
                    category=category,
                    last_upload_at=last_upload_at,
                    status=status,
                    days_overdue=days_overdue,
                )
            )
    rows.sort(key=lambda r: (r.employee_name.lower(), r.employee_id, categories.index(r.category)))
    return rows


class ComplianceManager:
    """Computes compliance rows from the user and file tables."""

    def __init__(
        self,
        db: Session,
        grace_days: int = config.COMPLIANCE_GRACE_DAYS,
        categories: Iterable[str] = None,
    ):
        self.db = db
        self.grace_days = grace_days
        self.categories = list(categories or config.FILE_CATEGORIES)

    def compute_status(
        self,
        window: ReportWindow,
        category: Optional[str] = None,
        department: Optional[str] = None,
    ) -> List[ComplianceRow]:
        """Compute compliance rows for a window.

        Args:
            window: Inclusive reporting window.
            category: Category filter; ``None`` or ``all`` covers every
                configured category.
            department: Department filter; ``None`` or ``all`` covers every
                user.

        Returns:
            Rows ordered by employee name, then category.

        Raises:
            InvalidCategoryError: If the category filter is unknown.
        """
        category = normalize_filter(category)
        department = normalize_filter(department)

        if category is not None and category not in self.categories:
            raise InvalidCategoryError(f"Unknown file category: {category}")
        categories = [category] if category else self.categories

        user_query = self.db.query(UserModel)
        if department is not None:
            user_query = user_query.filter(UserModel.department == department)
        users = user_query.all()
        if not users:
            return []

        # Only files up to the window end matter
        file_query = self.db.query(FileRecordModel).filter(
            FileRecordModel.owner_id.in_([u.id for u in users]),
            FileRecordModel.category.in_(categories),
            FileRecordModel.created_at <= window.end,
        )
        rows = build_rows(users, file_query.all(), window, categories, self.grace_days)
        logger.info(
            "Computed %d compliance rows for %s..%s (category=%s, department=%s)",
            len(rows), window.start.date(), window.end.date(),
            category or config.FILTER_ALL, department or config.FILTER_ALL,
        )
        return rows
