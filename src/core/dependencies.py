"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes. Every
manager gets the request-scoped DB session and, where needed, the blob
storage; tests swap either through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from config import UPLOAD_DIR
from core.database import get_db
from core.security import get_current_identity, get_current_identity_from_link, require_admin
from schemas.user import Identity
from utils import compliance
from utils import dashboard_manager
from utils import file_manager
from utils import user_manager
from utils.blob_storage import BlobStorage, LocalBlobStorage

# Singleton for the local blob storage
_blob_storage_instance: BlobStorage = None


def get_blob_storage() -> BlobStorage:
    """Get the BlobStorage singleton instance.

    Returns:
        LocalBlobStorage rooted at UPLOAD_DIR.
    """
    global _blob_storage_instance
    if _blob_storage_instance is None:
        _blob_storage_instance = LocalBlobStorage(UPLOAD_DIR)
    return _blob_storage_instance


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_file_manager(
    db: Session = Depends(get_db),
    storage: BlobStorage = Depends(get_blob_storage),
) -> file_manager.FileManager:
    """Get FileManager instance with request-scoped DB session.

    Args:
        db: Database session.
        storage: Blob storage for file bytes.

    Returns:
        FileManager instance.
    """
    return file_manager.FileManager(db, storage)


def get_compliance_manager(db: Session = Depends(get_db)) -> compliance.ComplianceManager:
    """Get ComplianceManager instance with request-scoped DB session."""
    return compliance.ComplianceManager(db)


def get_dashboard_manager(db: Session = Depends(get_db)) -> dashboard_manager.DashboardManager:
    """Get DashboardManager instance with request-scoped DB session."""
    return dashboard_manager.DashboardManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
FileManagerDep = Annotated[
    file_manager.FileManager, Depends(get_file_manager)
]
ComplianceManagerDep = Annotated[
    compliance.ComplianceManager, Depends(get_compliance_manager)
]
DashboardManagerDep = Annotated[
    dashboard_manager.DashboardManager, Depends(get_dashboard_manager)
]

CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
LinkIdentity = Annotated[Identity, Depends(get_current_identity_from_link)]
AdminIdentity = Annotated[Identity, Depends(require_admin)]
