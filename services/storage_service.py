"""
Object storage wrapper around a public Supabase Storage bucket.
"""

import uuid
from typing import Any, Dict, List
from services.base import BaseService
from core.exceptions import ResourceNotFoundException


class StorageService(BaseService):
    """Puts, lists and removes car images in the configured bucket."""

    @property
    def bucket(self):
        return self.db.storage.from_(self.settings.storage_bucket)

    def build_object_path(self, filename: str) -> str:
        """Unique storage path keeping the original file extension."""
        file_extension = filename.rsplit('.', 1)[-1].lower() if filename and '.' in filename else 'png'
        return f"{self.settings.storage_folder}/{uuid.uuid4().hex}.{file_extension}"

    def put(self, data: bytes, filename: str, content_type: str) -> Dict[str, str]:
        """
        Upload one image; exactly one call to the bucket, no retry.

        Args:
            data: Image bytes
            filename: Original filename, used for the extension and the result
            content_type: Declared MIME type stored with the object

        Returns:
            ``{"id": <storage path>, "url": <public URL>, "name": filename}``

        Raises:
            Whatever the Supabase client raises; callers decide how to record it.
        """
        object_path = self.build_object_path(filename)

        self.bucket.upload(
            object_path,
            data,
            file_options={"content-type": content_type, "upsert": "false"}
        )
        public_url = self.bucket.get_public_url(object_path)

        self.logger.info(f"Image stored: {filename} -> {object_path}")
        return {"id": object_path, "url": public_url, "name": filename}

    def delete(self, file_id: str) -> None:
        """
        Remove one stored image.

        Raises:
            ResourceNotFoundException: If nothing was removed
        """
        removed = self.bucket.remove([file_id])
        if not removed:
            raise ResourceNotFoundException("Image", file_id)
        self.logger.info(f"Image removed: {file_id}")

    def list(self, limit: int = 100) -> List[Dict[str, Any]]:
        """List stored images in the car images folder."""
        return self.bucket.list(self.settings.storage_folder, {"limit": limit}) or []

    def health_check(self) -> dict:
        try:
            files = self.list(limit=1)
            return {"ok": True, "files": len(files)}
        except Exception as e:
            self.logger.error(f"Storage health check failed: {e}")
            return {"ok": False, "error": str(e)}
