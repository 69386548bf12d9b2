from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base


class FileRecordModel(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    filename = Column(String(255), nullable=False)  # original upload name, used for downloads
    storage_ref = Column(String(255), nullable=False, unique=True)  # randomized name inside the blob store
    mime_type = Column(String(255), nullable=False, default="application/octet-stream")
    size_bytes = Column(Integer, nullable=False, default=0)
    category = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="uploaded")
    # Naive UTC, set by the file manager
    created_at = Column(DateTime, nullable=False, index=True)

    owner = relationship("UserModel", back_populates="files")
