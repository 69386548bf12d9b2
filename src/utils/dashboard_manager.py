"""Dashboard summary utilities."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

import config
from models.file_record import FileRecordModel
from models.user import UserModel
from schemas.report import CategoryCount, DashboardSummary, RecentActivity
from schemas.user import AccountStatus, Identity
from utils.compliance import month_window

logger = logging.getLogger(__name__)


class DashboardManager:
    """Builds the summary counters shown on the landing page.

    Admins see figures across all files; employees only their own.
    """

    def __init__(self, db: Session):
        self.db = db

    def summary(self, identity: Identity) -> DashboardSummary:
        def scoped(query):
            if identity.is_admin:
                return query
            return query.filter(FileRecordModel.owner_id == identity.id)

        window = month_window()
        files_uploaded = scoped(
            self.db.query(func.count(FileRecordModel.id)).filter(
                FileRecordModel.created_at >= window.start
            )
        ).scalar()

        total_employees = (
            self.db.query(func.count(UserModel.id))
            .filter(UserModel.account_status == AccountStatus.ACTIVE.value)
            .scalar()
        )

        recent = (
            scoped(self.db.query(FileRecordModel))
            .order_by(FileRecordModel.created_at.desc(), FileRecordModel.id.desc())
            .limit(config.DASHBOARD_RECENT_LIMIT)
            .all()
        )

        count = func.count(FileRecordModel.id).label("count")
        categories = (
            scoped(self.db.query(FileRecordModel.category, count))
            .group_by(FileRecordModel.category)
            .order_by(count.desc(), FileRecordModel.category)
            .all()
        )

        return DashboardSummary(
            files_uploaded=files_uploaded or 0,
            total_employees=total_employees or 0,
            recent_activity=[
                RecentActivity(filename=r.filename, status=r.status, created_at=r.created_at)
                for r in recent
            ],
            categories=[CategoryCount(category=c, count=n) for c, n in categories],
        )
