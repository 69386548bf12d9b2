"""Database models.

Importing this package registers every model with ``Base.metadata``.
"""

from .base import Base
from .user import UserModel
from .file_record import FileRecordModel

__all__ = ["Base", "UserModel", "FileRecordModel"]
