"""Admin routes for employee account management.

Every endpoint here requires the admin role. Changes to role or account
status reach the affected user's requests once their current token expires.
"""

import logging

from fastapi import APIRouter

from core.dependencies import AdminIdentity, UserManagerDep
from schemas.user import EmployeeListResponse, UpdateEmployeeRequest, UpdateStatusRequest, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/employees", response_model=EmployeeListResponse, summary="List employees")
def list_employees(identity: AdminIdentity, user_manager: UserManagerDep) -> EmployeeListResponse:
    logger.info("Employee list requested by admin %s", identity.id)
    return EmployeeListResponse(
        employees=[User.model_validate(m) for m in user_manager.list_users()]
    )


@router.put("/employees/{user_id}/status", response_model=User, summary="Set account status")
def update_employee_status(
    user_id: int,
    req: UpdateStatusRequest,
    identity: AdminIdentity,
    user_manager: UserManagerDep,
) -> User:
    """Activate or deactivate an account.

    Deactivated users cannot log in again; tokens already issued stay valid
    until they expire.
    """
    model = user_manager.update_status(user_id, req.account_status)
    return User.model_validate(model)


@router.put("/employees/{user_id}", response_model=User, summary="Update employee")
def update_employee(
    user_id: int,
    req: UpdateEmployeeRequest,
    identity: AdminIdentity,
    user_manager: UserManagerDep,
) -> User:
    model = user_manager.update_user(
        user_id,
        username=req.username,
        email=req.email,
        department=req.department,
        role=req.role,
        account_status=req.account_status,
    )
    return User.model_validate(model)
