"""Authentication routes.

This module handles HTTP endpoints for user registration and login. Both
return a signed access token; there is no server-side session.
"""

import logging

from fastapi import APIRouter, status

from core.dependencies import CurrentIdentity, UserManagerDep
from core.security import create_access_token
from schemas.user import AuthResponse, LoginRequest, RegisterRequest, User
from utils.user_manager import model_to_identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account",
)
def register(req: RegisterRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Register a new employee or admin account.

    Args:
        req: Registration request with username, email, password, role and
            department.
        user_manager: Injected UserManager instance.

    Returns:
        AuthResponse with the created user and an access token.
    """
    model = user_manager.create_user(
        username=req.username,
        email=req.email,
        password=req.password,
        role=req.role,
        department=req.department,
    )
    token = create_access_token(model_to_identity(model))
    return AuthResponse(token=token, user=User.model_validate(model))


@router.post("/login", response_model=AuthResponse, summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Login with email and password.

    Args:
        req: Login request with email and password.
        user_manager: Injected UserManager instance.

    Returns:
        AuthResponse with user information and access token.
    """
    model = user_manager.authenticate(req.email, req.password)
    token = create_access_token(model_to_identity(model))
    logger.info("User %s logged in", model.id)
    return AuthResponse(token=token, user=User.model_validate(model))


@router.post("/logout", summary="Log out")
def logout(identity: CurrentIdentity) -> dict:
    """Logout endpoint.

    Note: Since we're using stateless JWT tokens, logout is handled
    client-side by removing the token. The token stays valid until it
    expires.

    Returns:
        Dictionary with success message.
    """
    return {"success": True, "message": "Logged out successfully"}
