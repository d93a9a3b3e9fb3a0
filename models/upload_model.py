"""
Pydantic models for image upload functionality.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class UploadOutcome(BaseModel):
    """Result of one upload attempt within a batch."""
    success: bool
    name: str
    id: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def uploaded(cls, name: str, file_id: str, url: str) -> "UploadOutcome":
        return cls(success=True, name=name, id=file_id, url=url)

    @classmethod
    def failed(cls, name: str, error: str) -> "UploadOutcome":
        return cls(success=False, name=name, error=error)


class UploadBatchResult(BaseModel):
    """Aggregate of a multi-file upload; counts always add up to ``total``."""
    success: bool = True
    total: int
    successful: int
    failed: int
    files: List[UploadOutcome] = []

    @classmethod
    def from_outcomes(cls, outcomes: List[UploadOutcome]) -> "UploadBatchResult":
        successful = sum(1 for outcome in outcomes if outcome.success)
        return cls(
            total=len(outcomes),
            successful=successful,
            failed=len(outcomes) - successful,
            files=list(outcomes)
        )


class SingleUploadResponse(BaseModel):
    """Response model for the single image upload."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    image_url: str = Field(alias="imageUrl")
    id: str
