"""
Upload validation shared by the file-accepting routers.

Type and size are checked before anything is staged or sent to the AI
service, so a rejected upload never creates state.
"""

import os
from typing import Iterable
from fastapi import HTTPException, UploadFile
from app.core.config import settings
from app.services import file_parser
from app.services.match_pipeline import UploadedFile


def upload_size(file: UploadFile) -> int:
    """Size of an upload in bytes, leaving the stream at position 0."""
    stream = file.file
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def describe_extensions(extensions: Iterable[str]) -> str:
    names = [ext.lstrip(".").upper() for ext in extensions]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + f" and {names[-1]}"


def validate_upload(file: UploadFile, allowed_extensions: Iterable[str]) -> int:
    """
    Reject an upload with the wrong type or size.

    Returns:
        The upload size in bytes

    Raises:
        HTTPException 400: Unsupported type or file too large
    """
    if not file.filename or not file_parser.validate_file_type(file.filename, allowed_extensions):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Only {describe_extensions(allowed_extensions)} files are allowed."
        )

    size = upload_size(file)
    if not file_parser.validate_file_size(size):
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit"
        )
    return size


def to_uploaded_file(file: UploadFile) -> UploadedFile:
    """Wrap an UploadFile for the batch pipeline, which validates per file."""
    return UploadedFile(
        file_name=file.filename or "upload",
        size=upload_size(file),
        stream=file.file
    )
