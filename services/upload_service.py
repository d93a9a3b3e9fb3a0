"""
Image upload pipeline for SML Cars Backend.

Uploaded files are staged to a temporary directory, each staged file is sent
to the storage bucket independently, and the per-file outcomes are
aggregated into one result. Staged files are removed on every exit path.
"""

import asyncio
import os
import shutil
import tempfile
from dataclasses import dataclass
from typing import List, Optional
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from services.base import BaseService
from services.storage_service import StorageService
from models.upload_model import UploadOutcome, UploadBatchResult, SingleUploadResponse
from core.exceptions import CarDealerException, StorageException
from utils.upload_utils import describe_error


@dataclass
class StagedArtifact:
    """An uploaded file written to the staging directory."""
    name: str
    content_type: str
    path: str

    def read(self) -> bytes:
        with open(self.path, "rb") as staged_file:
            return staged_file.read()


class ImageUploadService(BaseService):
    """Service for staging, uploading and cleaning up car images."""

    def __init__(self, storage: Optional[StorageService] = None):
        super().__init__()
        self.storage = storage or StorageService()

    @property
    def staging_dir(self) -> str:
        return self.settings.upload_tmp_dir

    def _stage_one(self, upload: UploadFile) -> StagedArtifact:
        name = upload.filename or "unnamed"
        suffix = os.path.splitext(name)[1].lower()
        fd, path = tempfile.mkstemp(prefix="upload-", suffix=suffix, dir=self.staging_dir)
        try:
            with os.fdopen(fd, "wb") as staged_file:
                upload.file.seek(0)
                shutil.copyfileobj(upload.file, staged_file)
        except Exception:
            self._remove_staged(path)
            raise

        return StagedArtifact(
            name=name,
            content_type=upload.content_type or "application/octet-stream",
            path=path
        )

    async def stage(self, uploads: List[UploadFile]) -> List[StagedArtifact]:
        """
        Write every upload to the staging directory.

        Raises:
            StorageException: If a file cannot be staged; files staged so far
                are removed first
        """
        staged: List[StagedArtifact] = []
        try:
            os.makedirs(self.staging_dir, exist_ok=True)
            for upload in uploads:
                staged.append(await run_in_threadpool(self._stage_one, upload))
        except Exception as e:
            self.logger.error(f"Failed to stage uploaded files: {e}")
            self.cleanup(staged)
            raise StorageException("Failed to stage uploaded files", operation="stage") from e

        return staged

    def _remove_staged(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            self.logger.warning(f"Cleanup warning: staged file already removed: {path}")
        except OSError as e:
            self.logger.warning(f"Cleanup warning: {path}: {e}")

    def cleanup(self, staged: List[StagedArtifact]) -> None:
        """Remove staged files; failures are logged, never raised."""
        for artifact in staged:
            self._remove_staged(artifact.path)

    async def _close_uploads(self, uploads: List[UploadFile]) -> None:
        for upload in uploads:
            try:
                await upload.close()
            except Exception as e:
                self.logger.warning(f"Cleanup warning: could not close {upload.filename}: {e}")

    def _upload_one(self, artifact: StagedArtifact) -> UploadOutcome:
        try:
            uploaded = self.storage.put(artifact.read(), artifact.name, artifact.content_type)
            self.logger.info(f"Uploaded: {artifact.name} -> {uploaded['url']}")
            return UploadOutcome.uploaded(artifact.name, uploaded["id"], uploaded["url"])

        except Exception as e:
            error = describe_error(e)
            self.logger.error(f"Failed to upload: {artifact.name} - {error}")
            return UploadOutcome.failed(artifact.name, error)

    async def upload_batch(self, uploads: List[UploadFile]) -> UploadBatchResult:
        """
        Upload every file, recording success or failure per file.

        One file failing never stops the others. Uploads run concurrently on
        the thread pool and each outcome lands in its own slot, so the result
        keeps input order.

        Args:
            uploads: Validated image files from the request

        Returns:
            Aggregate result, returned even when every upload failed
        """
        staged: List[StagedArtifact] = []
        try:
            staged = await self.stage(uploads)
            outcomes = await asyncio.gather(
                *(run_in_threadpool(self._upload_one, artifact) for artifact in staged)
            )
            result = UploadBatchResult.from_outcomes(list(outcomes))

            self.logger.info(
                f"Upload summary: {result.successful} successful, {result.failed} failed"
            )
            return result

        finally:
            self.cleanup(staged)
            await self._close_uploads(uploads)

    async def upload_single(self, upload: UploadFile) -> SingleUploadResponse:
        """
        Upload one file.

        Raises:
            StorageException: If the bucket rejects the upload
        """
        staged: List[StagedArtifact] = []
        try:
            staged = await self.stage([upload])
            artifact = staged[0]
            try:
                uploaded = await run_in_threadpool(
                    self.storage.put, artifact.read(), artifact.name, artifact.content_type
                )
            except Exception as e:
                error = describe_error(e)
                self.logger.error(f"Upload single error: {artifact.name} - {error}")
                raise StorageException(error or "Upload failed", operation="upload") from e

            self.logger.info(f"Uploaded: {artifact.name} -> {uploaded['url']}")
            return SingleUploadResponse(image_url=uploaded["url"], id=uploaded["id"])

        finally:
            self.cleanup(staged)
            await self._close_uploads([upload])

    def delete_image(self, file_id: str) -> None:
        """Remove a stored image, e.g. one orphaned by a failed car save."""
        try:
            self.storage.delete(file_id)
        except CarDealerException:
            raise
        except Exception as e:
            self.logger.error(f"Failed to delete image {file_id}: {e}")
            raise StorageException("Failed to delete image", operation="delete") from e
