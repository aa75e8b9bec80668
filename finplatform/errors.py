# finplatform/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateError(ValidationError):
    pass


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def envelope_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to the {success: false, message} envelope."""

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        return envelope_error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
        return envelope_error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(SQLAlchemyError)
    async def _store_error(request: Request, exc: SQLAlchemyError):
        # Driver text is forwarded to the caller as-is.
        detail = str(getattr(exc, "orig", None) or exc)
        logger.error("Database error on %s: %s", request.url.path, detail)
        return envelope_error(StoreError.status_code, f"Database error: {detail}")

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return envelope_error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Server error: {exc}")
