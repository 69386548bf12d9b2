"""User schema definitions.

This module defines the closed role/status enumerations, the token-derived
Identity, the stored User view and the auth request/response bodies.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Role(str, Enum):
    EMPLOYEE = "employee"
    ADMIN = "admin"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Identity(BaseModel):
    """Identity resolved from a verified access token.

    This is the only identity representation trusted downstream for the
    remainder of a request. It is never re-fetched from the store, so role
    changes apply once the token expires.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Subject id (users.id).")
    username: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class User(BaseModel):
    """Stored user account, without credentials."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role
    account_status: AccountStatus = AccountStatus.ACTIVE
    department: Optional[str] = None
    join_date: Optional[date] = None


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: Role = Role.EMPLOYEE
    department: Optional[str] = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """Returned by register and login."""

    token: str
    user: User


class UpdateStatusRequest(BaseModel):
    account_status: AccountStatus


class UpdateEmployeeRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    department: Optional[str] = Field(default=None, max_length=100)
    role: Role
    account_status: AccountStatus


class EmployeeListResponse(BaseModel):
    employees: List[User]
