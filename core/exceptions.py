"""
Custom exceptions for SML Cars Backend.

Every exception carries the HTTP status and error code used to build the
``{"success": false, "error": ...}`` response envelope.
"""

from typing import Any, Dict, Optional
from fastapi import status


class CarDealerException(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERIC_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self, request_id: str = "unknown") -> Dict[str, Any]:
        """Render the exception as an error envelope."""
        content = {
            "success": False,
            "error": self.message,
            "code": self.error_code,
            "request_id": request_id
        }
        if self.details:
            content["details"] = self.details
        return content


class ValidationException(CarDealerException):
    """Exception raised for request validation errors."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"field": field, **(details or {})} if field else details
        )


class AuthenticationException(CarDealerException):
    """Exception raised for bad credentials and missing, invalid or expired tokens."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details
        )


class ResourceNotFoundException(CarDealerException):
    """Exception raised when a resource is not found."""

    def __init__(self, resource: str, identifier: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"{resource} not found",
            error_code="RESOURCE_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "identifier": identifier, **(details or {})}
        )


class DatabaseException(CarDealerException):
    """Exception raised for document store errors."""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="DATABASE_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"operation": operation, **(details or {})}
        )


class FileUploadException(CarDealerException):
    """Exception raised when an upload request is rejected before any upload."""

    def __init__(self, message: str, filename: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="FILE_UPLOAD_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"filename": filename, **(details or {})} if filename else details
        )


class PayloadTooLargeException(CarDealerException):
    """Exception raised when an uploaded file exceeds the size cap."""

    def __init__(self, filename: Optional[str], max_size: int):
        super().__init__(
            message=f"File too large (max {max_size} bytes)",
            error_code="FILE_TOO_LARGE",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details={"filename": filename, "max_size": max_size}
        )


class StorageException(CarDealerException):
    """Exception raised for object storage errors."""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"operation": operation, **(details or {})}
        )
