"""File resource management.

This module owns the file record lifecycle (create on upload, read, delete)
and enforces the ownership rules on every operation:

- any authenticated user stores files owned by themselves;
- the owner or an admin may read a file;
- only the owner may delete a file, admins included.

Bytes go to the injected blob storage, metadata to the injected session.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import config
from core.exceptions import (
    BackingBytesMissingError,
    ForbiddenError,
    InvalidCategoryError,
    MissingCategoryError,
    NoFilesProvidedError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from models.file_record import FileRecordModel
from models.user import UserModel
from schemas.file_record import FailedUpload, FilePayload, FileStatus
from schemas.user import Identity
from utils.blob_storage import BlobNotFoundError, BlobStorage
from utils.timeutil import utc_now

logger = logging.getLogger(__name__)


@dataclass
class UploadOutcome:
    stored: List[FileRecordModel] = field(default_factory=list)
    failed: List[FailedUpload] = field(default_factory=list)


class FileManager:
    """Manages file records and their stored bytes."""

    def __init__(
        self,
        db: Session,
        storage: BlobStorage,
        categories: Iterable[str] = None,
    ):
        """Initialize FileManager.

        Args:
            db: SQLAlchemy Session.
            storage: Blob storage holding the uploaded bytes.
            categories: Accepted categories. Defaults to the configured list.
        """
        self.db = db
        self.storage = storage
        self.categories = list(categories or config.FILE_CATEGORIES)

    def _discard_bytes(self, storage_ref: str) -> bool:
        """Best-effort blob removal. Returns False if nothing was removed."""
        try:
            return self.storage.delete(storage_ref)
        except OSError as e:
            logger.warning("Failed to remove blob %s: %s", storage_ref, e)
            return False

    def _validate_category(self, category: Optional[str]) -> str:
        if category is None or not category.strip():
            raise MissingCategoryError()
        category = category.strip()
        if category not in self.categories:
            raise InvalidCategoryError(f"Unknown file category: {category}")
        return category

    def store(
        self,
        payloads: List[FilePayload],
        owner_id: int,
        category: Optional[str],
        description: Optional[str] = None,
    ) -> UploadOutcome:
        """Store a batch of uploaded files for one owner.

        Each payload's bytes are written before its record. Batches are not
        atomic: a payload that fails is reported in ``failed`` and the ones
        stored before and after it are kept.

        Args:
            payloads: Uploaded files.
            owner_id: Id of the uploading user.
            category: One of the configured categories.
            description: Optional free text shared by the whole batch.

        Returns:
            UploadOutcome with stored records and per-file failures.

        Raises:
            NoFilesProvidedError: If the batch is empty.
            MissingCategoryError: If no category was given.
            InvalidCategoryError: If the category is not accepted.
            UnauthenticatedError: If the owner is not a registered user.
            StoreUnavailableError: If no payload could be stored.
        """
        if not payloads:
            raise NoFilesProvidedError()
        category = self._validate_category(category)
        description = description.strip() if description and description.strip() else None

        try:
            owner = self.db.query(UserModel).filter(UserModel.id == owner_id).first()
        except SQLAlchemyError as e:
            logger.error("Owner lookup failed for upload: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        if owner is None:
            raise UnauthenticatedError()

        outcome = UploadOutcome()
        for payload in payloads:
            storage_ref = self.storage.new_ref(payload.filename)
            try:
                self.storage.save(storage_ref, payload.content)
            except OSError as e:
                logger.error(
                    "Failed to store bytes for %s (owner=%s): %s",
                    payload.filename, owner_id, e,
                )
                outcome.failed.append(
                    FailedUpload(
                        filename=payload.filename,
                        kind=StoreUnavailableError.kind,
                        detail="File could not be stored",
                    )
                )
                continue

            record = FileRecordModel(
                owner_id=owner_id,
                filename=payload.filename,
                storage_ref=storage_ref,
                mime_type=payload.mime_type or "application/octet-stream",
                size_bytes=len(payload.content),
                category=category,
                description=description,
                status=FileStatus.UPLOADED.value,
                created_at=utc_now(),
            )
            try:
                self.db.add(record)
                self.db.commit()
                self.db.refresh(record)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    "Failed to record %s (owner=%s): %s",
                    payload.filename, owner_id, e, exc_info=True,
                )
                self._discard_bytes(storage_ref)
                outcome.failed.append(
                    FailedUpload(
                        filename=payload.filename,
                        kind=StoreUnavailableError.kind,
                        detail="File could not be recorded",
                    )
                )
                continue

            outcome.stored.append(record)
            logger.info(
                "Stored file %s (id=%s, owner=%s, category=%s)",
                record.filename, record.id, owner_id, category,
            )

        if not outcome.stored:
            raise StoreUnavailableError("No files could be stored")
        return outcome

    def list_owned(self, owner_id: int) -> List[FileRecordModel]:
        """List files owned by a user, newest first."""
        return (
            self.db.query(FileRecordModel)
            .filter(FileRecordModel.owner_id == owner_id)
            .order_by(FileRecordModel.created_at.desc(), FileRecordModel.id.desc())
            .all()
        )

    def get(self, file_id: int) -> Optional[FileRecordModel]:
        return self.db.query(FileRecordModel).filter(FileRecordModel.id == file_id).first()

    def read(self, file_id: int, requester: Identity) -> Tuple[FileRecordModel, bytes]:
        """Load a file's bytes for download.

        Args:
            file_id: File record id.
            requester: Identity of the caller.

        Returns:
            Tuple of the file record and its bytes.

        Raises:
            NotFoundError: If no record has this id.
            ForbiddenError: If the requester is neither owner nor admin.
            BackingBytesMissingError: If the record's bytes are gone.
            StoreUnavailableError: If the bytes cannot be read.
        """
        record = self.get(file_id)
        if record is None:
            raise NotFoundError()
        if not requester.is_admin and record.owner_id != requester.id:
            logger.info("User %s denied read of file %s", requester.id, file_id)
            raise ForbiddenError()

        try:
            content = self.storage.read(record.storage_ref)
        except BlobNotFoundError:
            logger.error(
                "Orphaned file record %s: blob %s is missing",
                record.id, record.storage_ref,
            )
            raise BackingBytesMissingError()
        except OSError as e:
            logger.error(
                "Failed to read blob %s of file record %s: %s",
                record.storage_ref, record.id, e,
            )
            raise StoreUnavailableError() from e
        return record, content

    def delete(self, file_id: int, requester: Identity) -> None:
        """Delete one of the requester's files.

        Admins get no override here. Deleting an id that is missing or owned
        by someone else raises the same error, so repeating a delete is safe.

        Raises:
            NotFoundError: If the requester owns no file with this id.
        """
        record = (
            self.db.query(FileRecordModel)
            .filter(
                FileRecordModel.id == file_id,
                FileRecordModel.owner_id == requester.id,
            )
            .first()
        )
        if record is None:
            raise NotFoundError()

        if not self._discard_bytes(record.storage_ref):
            logger.warning(
                "Orphaned file record %s: blob %s was not removed",
                record.id, record.storage_ref,
            )

        # A concurrent delete may have won the race; the row count tells
        deleted = (
            self.db.query(FileRecordModel)
            .filter(
                FileRecordModel.id == file_id,
                FileRecordModel.owner_id == requester.id,
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if not deleted:
            raise NotFoundError()
        logger.info("Deleted file %s (owner=%s)", file_id, requester.id)
