"""File record schema definitions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileStatus(str, Enum):
    """Status of a stored file record.

    Deleting a file removes its record, so ``uploaded`` is the only status.
    """

    UPLOADED = "uploaded"


@dataclass
class FilePayload:
    """One physical file of an upload batch."""

    filename: str
    content: bytes
    mime_type: str = "application/octet-stream"


class FileRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    storage_ref: str = Field(exclude=True)
    mime_type: str
    size_bytes: int
    owner_id: int
    category: str
    description: Optional[str] = None
    status: FileStatus = FileStatus.UPLOADED
    created_at: datetime


class FailedUpload(BaseModel):
    filename: str
    kind: str
    detail: str


class UploadResponse(BaseModel):
    """Outcome of a batch upload.

    Batches are not atomic: ``files`` holds what was stored, ``failed`` what
    was skipped.
    """

    message: str
    files: List[FileRecord]
    failed: List[FailedUpload] = Field(default_factory=list)


class FileListResponse(BaseModel):
    files: List[FileRecord]
