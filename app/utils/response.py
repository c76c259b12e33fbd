import logging

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def create_response(data=None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Return the payload as JSON with the given status code."""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def handle_exception(error: Exception, fallback_message: str = "Server Error") -> JSONResponse:
    """Coerce raised errors into a ``{"message": ...}`` body."""
    if isinstance(error, HTTPException):
        detail = error.detail if isinstance(error.detail, str) else str(error.detail)
        return error_response(detail, error.status_code)

    logger.error("Request failed: %s", error, exc_info=error)
    return error_response(fallback_message, status.HTTP_500_INTERNAL_SERVER_ERROR)
