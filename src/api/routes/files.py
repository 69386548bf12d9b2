"""File upload, listing, download and deletion routes."""

import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from core.dependencies import CurrentIdentity, FileManagerDep, LinkIdentity
from schemas.file_record import FileListResponse, FilePayload, FileRecord, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["Files"])


def _content_disposition(filename: str) -> str:
    """Attachment header carrying the original upload name."""
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace('"', "_")
    return f"attachment; filename=\"{ascii_name}\"; filename*=utf-8''{quoted}"


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload files",
)
async def upload_files(
    identity: CurrentIdentity,
    file_manager: FileManagerDep,
    files: Optional[List[UploadFile]] = File(default=None, description="Files to upload"),
    category: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
) -> UploadResponse:
    """Upload a batch of files into one category.

    Files stored before a failing file are kept; failures are listed in the
    response.
    """
    payloads = []
    for upload in files or []:
        # Browsers submit an empty part when no file was picked
        if not upload.filename:
            continue
        payloads.append(
            FilePayload(
                filename=upload.filename,
                content=await upload.read(),
                mime_type=upload.content_type or "application/octet-stream",
            )
        )

    outcome = file_manager.store(payloads, identity.id, category, description)
    return UploadResponse(
        message=f"{len(outcome.stored)} file(s) uploaded successfully",
        files=[FileRecord.model_validate(r) for r in outcome.stored],
        failed=outcome.failed,
    )


@router.get("/mine", response_model=FileListResponse, summary="List my files")
def list_my_files(identity: CurrentIdentity, file_manager: FileManagerDep) -> FileListResponse:
    records = file_manager.list_owned(identity.id)
    return FileListResponse(files=[FileRecord.model_validate(r) for r in records])


@router.get("/{file_id}/download", summary="Download a file")
def download_file(file_id: int, identity: LinkIdentity, file_manager: FileManagerDep) -> Response:
    """Return a file's bytes under its original filename.

    Accepts the token from the ``token`` query parameter as well, so links
    can be opened directly in a browser.
    """
    record, content = file_manager.read(file_id, identity)
    return Response(
        content=content,
        media_type=record.mime_type,
        headers={"Content-Disposition": _content_disposition(record.filename)},
    )


@router.delete("/{file_id}", summary="Delete a file")
def delete_file(file_id: int, identity: CurrentIdentity, file_manager: FileManagerDep) -> dict:
    file_manager.delete(file_id, identity)
    return {"success": True, "message": "File deleted successfully"}
