"""Access guard.

This module issues and verifies signed, time-limited identity tokens and gates
every protected operation by identity and role.

Tokens are stateless: nothing is stored server side and a token cannot be
revoked before it expires. Role or account-status changes made by an admin
take effect for the affected user once their current token expires, so the
revocation lag is bounded by ``ACCESS_TOKEN_EXPIRE_MINUTES``.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

import pytz
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.exceptions import (
    InsufficientPermissionError,
    TokenInvalidError,
    TokenMissingError,
)
from schemas.user import Identity, Role

logger = logging.getLogger(__name__)

# Query parameter accepted for download links opened by the browser
TOKEN_QUERY_PARAM = "token"

# Missing or non-Bearer headers resolve to None and surface as TokenMissing
bearer = HTTPBearer(auto_error=False)


def create_access_token(
    identity: Identity,
    expires_delta: Optional[timedelta] = None,
    secret_key: str = None,
) -> str:
    """Create a JWT access token for an identity.

    Args:
        identity: Identity to encode. ``sub`` holds the user id.
        expires_delta: Optional validity window. Defaults to the configured TTL.
        secret_key: Optional signing key override.

    Returns:
        Encoded JWT token string.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(pytz.utc) + expires_delta
    to_encode = {
        "sub": str(identity.id),
        "username": identity.username,
        "email": identity.email,
        "role": identity.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, secret_key or JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret_key: str = None) -> Identity:
    """Verify a token and rebuild the identity it carries.

    Expired and malformed tokens raise the same error; which one it was is
    only logged.

    Raises:
        TokenInvalidError: If signature, expiry or claims do not verify.
    """
    try:
        payload = jwt.decode(token, secret_key or JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Rejected expired access token")
        raise TokenInvalidError()
    except JWTError as e:
        logger.warning("Rejected malformed access token: %s", e)
        raise TokenInvalidError()

    try:
        return Identity(
            id=int(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            role=payload["role"],
        )
    except (KeyError, TypeError, ValueError, ValidationError):
        logger.warning("Rejected access token with missing or invalid claims")
        raise TokenInvalidError()


def authorize(
    raw_token: Optional[str],
    required_roles: Iterable[Role] = (),
    secret_key: str = None,
) -> Identity:
    """Resolve the identity behind a raw bearer token.

    Args:
        raw_token: Token string, or None when the request carried none.
        required_roles: Roles allowed at this call site. Empty means any
            valid identity.
        secret_key: Optional verification key override.

    Returns:
        Identity embedded in the token.

    Raises:
        TokenMissingError: If no token was supplied.
        TokenInvalidError: If the token does not verify.
        InsufficientPermissionError: If the role is not in ``required_roles``.
    """
    if not raw_token:
        raise TokenMissingError()

    identity = decode_access_token(raw_token, secret_key=secret_key)

    roles = set(required_roles)
    if roles and identity.role not in roles:
        logger.info(
            "User %s with role %s denied, requires one of %s",
            identity.id,
            identity.role.value,
            sorted(r.value for r in roles),
        )
        raise InsufficientPermissionError()
    return identity


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    allow_query: bool = False,
) -> Optional[str]:
    """Pick the raw token for a request.

    Bearer credentials win. With ``allow_query`` the ``token`` query
    parameter is accepted as well; it ends up in access logs and browser
    history, so only download links use it.
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials

    if allow_query:
        token = request.query_params.get(TOKEN_QUERY_PARAM)
        if token:
            logger.debug("Access token taken from query string for %s", request.url.path)
            return token
    return None


def require_identity(*roles: Role, allow_query: bool = False):
    """Build a FastAPI dependency that authorizes the current request.

    Args:
        *roles: Roles allowed at the call site. None means any valid identity.
        allow_query: Accept the token from the query string as well.

    Returns:
        Dependency callable returning the resolved Identity.
    """
    required = frozenset(roles)

    def dependency(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    ) -> Identity:
        return authorize(extract_token(request, credentials, allow_query=allow_query), required)

    return dependency


# Common guards
get_current_identity = require_identity()
get_current_identity_from_link = require_identity(allow_query=True)
require_admin = require_identity(Role.ADMIN)
