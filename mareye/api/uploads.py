"""Helpers for forwarding uploaded files."""

from fastapi import HTTPException, UploadFile, status

from mareye.services.upstream import UploadPart


async def read_upload(file: UploadFile, default_name: str = "upload") -> UploadPart:
    """Read an upload into a multipart part, bytes unmodified."""
    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty"
        )
    return (
        file.filename or default_name,
        content,
        file.content_type or "application/octet-stream",
    )
