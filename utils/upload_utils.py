import os
from typing import List, Optional
from fastapi import UploadFile
from core.exceptions import FileUploadException, PayloadTooLargeException


def is_image_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.lower().startswith("image/")


def get_upload_size(upload: UploadFile) -> int:
    """Size in bytes, measured on the spooled file when the framework did not record it."""
    if upload.size is not None:
        return upload.size
    position = upload.file.tell()
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(position)
    return size


def validate_image_files(
    files: Optional[List[UploadFile]],
    max_files: int,
    max_file_size: int
) -> List[UploadFile]:
    """
    Reject the whole request unless every file is an image within the size cap.

    Runs before any collaborator call.

    Returns:
        The non-empty list of files

    Raises:
        FileUploadException: No files, too many files, or a non-image file
        PayloadTooLargeException: A file larger than ``max_file_size``
    """
    files = [f for f in (files or []) if f is not None]

    if not files:
        raise FileUploadException("No files uploaded")

    if len(files) > max_files:
        raise FileUploadException(
            f"Too many files (max {max_files})",
            details={"count": len(files), "max_files": max_files}
        )

    for upload in files:
        if not is_image_content_type(upload.content_type):
            raise FileUploadException(
                "Only image files are allowed",
                filename=upload.filename,
                details={"content_type": upload.content_type}
            )
        if get_upload_size(upload) > max_file_size:
            raise PayloadTooLargeException(upload.filename, max_file_size)

    return files


def describe_error(error: Exception) -> str:
    """Readable message for a collaborator error; Supabase errors carry a dict payload."""
    if error.args and isinstance(error.args[0], dict):
        payload = error.args[0]
        message = payload.get("message") or payload.get("error")
        if message:
            return str(message)
    return str(error) or error.__class__.__name__
