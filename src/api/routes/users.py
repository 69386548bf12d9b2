"""User routes."""

from typing import List

from fastapi import APIRouter

from core.dependencies import AdminIdentity, CurrentIdentity, UserManagerDep
from core.exceptions import UnauthenticatedError
from schemas.user import User, UserSummary

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=User, summary="Current user profile")
def get_me(identity: CurrentIdentity, user_manager: UserManagerDep) -> User:
    model = user_manager.get_user_by_id(identity.id)
    if model is None:
        raise UnauthenticatedError()
    return User.model_validate(model)


@router.get("/all", response_model=List[UserSummary], summary="List all users")
def get_all_users(identity: AdminIdentity, user_manager: UserManagerDep) -> List[UserSummary]:
    return [UserSummary.model_validate(m) for m in user_manager.list_users()]
