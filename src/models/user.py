"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(128), nullable=False)
    role = Column(String(20), nullable=False)  # 'employee' or 'admin'
    account_status = Column(String(20), nullable=False, default="active")  # 'active' or 'inactive'
    department = Column(String(100), nullable=True)
    join_date = Column(Date, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    files = relationship("FileRecordModel", back_populates="owner")
