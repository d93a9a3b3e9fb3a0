"""
Image upload API routes for SML Cars Backend.
"""

from typing import Dict, Any, List, Optional
from fastapi import APIRouter, UploadFile, File, Depends
from models.auth import ErrorResponse
from models.car_model import MessageResponse
from models.upload_model import UploadBatchResult, SingleUploadResponse
from services.upload_service import ImageUploadService
from core.config import get_settings
from core.dependencies import get_current_admin
from core.logging import get_logger
from utils.upload_utils import validate_image_files

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["image upload"])

UPLOAD_RESPONSES = {
    400: {"model": ErrorResponse, "description": "No files, too many files, or a non-image file"},
    401: {"model": ErrorResponse, "description": "Unauthorized - Invalid or missing token"},
    413: {"model": ErrorResponse, "description": "File too large"},
    500: {"model": ErrorResponse, "description": "Internal server error"}
}


def get_upload_service() -> ImageUploadService:
    """Dependency to get image upload service instance."""
    return ImageUploadService()


@router.post(
    "/upload",
    response_model=SingleUploadResponse,
    responses=UPLOAD_RESPONSES,
    summary="Upload Image",
    description="Upload one image (form field `image`) to the public bucket."
)
async def upload_image(
    image: Optional[UploadFile] = File(None, description="Image file"),
    current_user: Dict[str, Any] = Depends(get_current_admin),
    upload_service: ImageUploadService = Depends(get_upload_service)
):
    settings = get_settings()
    files = validate_image_files([image] if image else [], 1, settings.max_file_size)

    logger.info(f"Single upload request: {files[0].filename}")
    return await upload_service.upload_single(files[0])


@router.post(
    "/upload-multiple",
    response_model=UploadBatchResult,
    response_model_exclude_none=True,
    responses=UPLOAD_RESPONSES,
    summary="Upload Images",
    description="Upload up to 10 images (form field `images`); failures are reported per file."
)
async def upload_images(
    images: Optional[List[UploadFile]] = File(None, description="Image files"),
    current_user: Dict[str, Any] = Depends(get_current_admin),
    upload_service: ImageUploadService = Depends(get_upload_service)
):
    """
    Upload a batch of images.

    The whole request is rejected if any file is not an image or exceeds the
    size cap. Otherwise every file is attempted and the response lists one
    outcome per file.
    """
    settings = get_settings()
    files = validate_image_files(images, settings.max_upload_files, settings.max_file_size)

    logger.info(f"Batch upload request: {len(files)} files")
    return await upload_service.upload_batch(files)


@router.delete(
    "/upload/{file_id:path}",
    response_model=MessageResponse,
    responses={
        401: UPLOAD_RESPONSES[401],
        404: {"model": ErrorResponse, "description": "Image not found"}
    },
    summary="Delete Image",
    description="Remove a stored image, e.g. one left behind when saving a car failed."
)
async def delete_image(
    file_id: str,
    current_user: Dict[str, Any] = Depends(get_current_admin),
    upload_service: ImageUploadService = Depends(get_upload_service)
):
    upload_service.delete_image(file_id)
    return MessageResponse(message="Image deleted")
