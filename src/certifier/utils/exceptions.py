# File location: src/certifier/utils/exceptions.py
from typing import List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class CertificateError(Exception):
    """Base class for failures reported to the client with a status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "An unexpected error occurred while generating your certificate. Please try again later."

    def __init__(self, message: Optional[str] = None, details: Optional[List[str]] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class ValidationFailed(CertificateError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input data"


class NotAuthorized(CertificateError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Email not authorized. Please contact support for assistance."


class DetailMismatch(CertificateError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Provided details do not match our records. Please verify your name and college information."


class StorageUnavailable(CertificateError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Storage is temporarily unavailable. Please try again later."


class RenderFailure(CertificateError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to generate certificate PDF. Please try again later."


class AdminUnauthorized(CertificateError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized access"


def error_response(status_code: int, message: str, details: Optional[List[str]] = None, **extra) -> JSONResponse:
    content = {"error": message, "success": False}
    if details:
        content["details"] = details
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def certificate_error_handler(request: Request, exc: CertificateError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.info(f"Rejected invalid input on {request.url.path}: {details}")
    failure = ValidationFailed(details=details)
    return error_response(failure.status_code, failure.message, failure.details)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
    )
