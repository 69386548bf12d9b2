"""User management utilities.

This module provides account management: registration, credential checks,
and admin-authorized updates of employee records. Accounts are never deleted,
only deactivated through ``account_status``.
"""

import logging
from typing import List, Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS
from core.exceptions import (
    AccountInactiveError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationFailedError,
)
from models.user import UserModel
from schemas.user import AccountStatus, Identity, Role, User
from utils.timeutil import utc_now

logger = logging.getLogger(__name__)

# bcrypt ignores everything past 72 bytes
BCRYPT_MAX_BYTES = 72


def model_to_identity(model: UserModel) -> Identity:
    return Identity(
        id=model.id,
        username=model.username,
        email=model.email,
        role=model.role,
    )


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session, bcrypt_rounds: int = BCRYPT_ROUNDS):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
            bcrypt_rounds: Cost factor used when hashing new passwords.
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            # Stored value is not a bcrypt hash
            logger.error("Password verification error: %s", e)
            return False

    def _email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(UserModel).filter(UserModel.email == email)
        if exclude_id is not None:
            query = query.filter(UserModel.id != exclude_id)
        return query.first() is not None

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        role: Role,
        department: Optional[str] = None,
    ) -> UserModel:
        """Register a new account.

        Args:
            username: Display name of the employee.
            email: Login email, unique across all accounts.
            password: Plain text password.
            role: Account role.
            department: Department name; required for employees.

        Returns:
            Created UserModel instance.

        Raises:
            ValidationFailedError: If an employee has no department.
            EmailAlreadyRegisteredError: If the email is already registered.
        """
        role = Role(role)
        department = department.strip() if department else None
        if role == Role.EMPLOYEE and not department:
            raise ValidationFailedError("Department is required for employees")

        email = email.strip().lower()
        if self._email_taken(email):
            raise EmailAlreadyRegisteredError()

        model = UserModel(
            username=username.strip(),
            email=email,
            password_hash=self.hash_password(password),
            role=role.value,
            account_status=AccountStatus.ACTIVE.value,
            department=department,
            join_date=utc_now().date(),
        )
        # Two concurrent registrations can both pass the check above; the
        # unique constraint on email decides
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise EmailAlreadyRegisteredError() from e

        logger.info("Registered user %s (id=%s, role=%s)", email, model.id, role.value)
        return model

    def authenticate(self, email: str, password: str) -> UserModel:
        """Check login credentials.

        Unknown email and wrong password produce the same error.

        Raises:
            InvalidCredentialsError: If the credentials do not match.
            AccountInactiveError: If the account has been deactivated.
        """
        model = self.get_user_by_email(email)
        if model is None or not self.verify_password(password, model.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise InvalidCredentialsError()
        if model.account_status != AccountStatus.ACTIVE.value:
            logger.info("Login refused for inactive account %s", email)
            raise AccountInactiveError()
        return model

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )

    def get_user_by_id(self, user_id: int) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def require_user(self, user_id: int) -> UserModel:
        model = self.get_user_by_id(user_id)
        if model is None:
            raise NotFoundError(f"User {user_id} not found")
        return model

    def list_users(self) -> List[UserModel]:
        """List all users ordered by id."""
        return self.db.query(UserModel).order_by(UserModel.id).all()

    def update_status(self, user_id: int, account_status: AccountStatus) -> UserModel:
        """Activate or deactivate an account.

        Raises:
            NotFoundError: If the user does not exist.
        """
        model = self.require_user(user_id)
        model.account_status = AccountStatus(account_status).value
        self.db.commit()
        self.db.refresh(model)
        logger.info("User %s account status set to %s", user_id, model.account_status)
        return model

    def update_user(
        self,
        user_id: int,
        username: str,
        email: str,
        department: Optional[str],
        role: Role,
        account_status: AccountStatus,
    ) -> UserModel:
        """Replace the editable profile fields of an account.

        Raises:
            NotFoundError: If the user does not exist.
            EmailAlreadyRegisteredError: If the email belongs to another user.
            ValidationFailedError: If an employee would be left without a
                department.
        """
        model = self.require_user(user_id)
        role = Role(role)
        department = department.strip() if department else None
        if role == Role.EMPLOYEE and not department:
            raise ValidationFailedError("Department is required for employees")

        email = email.strip().lower()
        if self._email_taken(email, exclude_id=user_id):
            raise EmailAlreadyRegisteredError()

        model.username = username.strip()
        model.email = email
        model.department = department
        model.role = role.value
        model.account_status = AccountStatus(account_status).value
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise EmailAlreadyRegisteredError() from e
        self.db.refresh(model)
        logger.info("Updated user %s", user_id)
        return model
