"""
Custom middleware for SML Cars Backend.
"""

import time
import uuid
from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from core.logging import get_logger
from core.exceptions import CarDealerException

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            f"[{request_id}] {request.method} {request.url.path} - "
            f"Client: {client_ip} - User-Agent: {request.headers.get('user-agent', 'unknown')}"
        )

        try:
            response = await call_next(request)

            process_time = time.time() - start_time
            logger.info(
                f"[{request_id}] Response: {response.status_code} - "
                f"Processing time: {process_time:.4f}s"
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"[{request_id}] Error: {str(e)} - "
                f"Processing time: {process_time:.4f}s"
            )
            raise


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Last line of defence: turns anything that escaped the handlers into an envelope."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except CarDealerException as e:
            request_id = getattr(request.state, 'request_id', 'unknown')

            logger.error(
                f"[{request_id}] Application exception: {e.error_code} - {e.message}",
                extra={"details": e.details}
            )

            return JSONResponse(
                status_code=e.status_code,
                content=e.to_response(request_id)
            )

        except Exception as e:
            request_id = getattr(request.state, 'request_id', 'unknown')

            logger.error(
                f"[{request_id}] Unexpected error: {str(e)}",
                exc_info=True
            )

            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Internal server error",
                    "code": "INTERNAL_SERVER_ERROR",
                    "request_id": request_id
                }
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware for adding security headers."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
