"""
Global exception handler for the Mess Import API.
Provides centralized error handling for all API exceptions.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .exceptions import (
    UploadNotFoundException,
    ValidationException,
    CSVStreamException,
    UnknownImportKindException,
    DynamoDBException,
    FileStorageException
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""

    @app.exception_handler(UploadNotFoundException)
    async def handle_not_found(request: Request, exc: UploadNotFoundException):
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": exc.message}
        )

    @app.exception_handler(ValidationException)
    async def handle_validation_error(request: Request, exc: ValidationException):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation Error", "message": exc.message}
        )

    @app.exception_handler(UnknownImportKindException)
    async def handle_unknown_kind(request: Request, exc: UnknownImportKindException):
        return JSONResponse(
            status_code=400,
            content={"error": "Unknown Upload Type", "message": exc.message}
        )

    @app.exception_handler(CSVStreamException)
    async def handle_csv_error(request: Request, exc: CSVStreamException):
        return JSONResponse(
            status_code=400,
            content={"error": "CSV Processing Failed", "message": exc.message}
        )

    @app.exception_handler(FileStorageException)
    async def handle_storage_error(request: Request, exc: FileStorageException):
        logger.error("Upload storage error: %s", exc.message)
        return JSONResponse(
            status_code=500,
            content={"error": "File Storage Failed", "message": exc.message}
        )

    @app.exception_handler(DynamoDBException)
    async def handle_dynamodb_error(request: Request, exc: DynamoDBException):
        logger.error("Database error: %s", exc.message)
        return JSONResponse(
            status_code=500,
            content={"error": "Database Error", "message": exc.message}
        )

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "An unexpected error occurred"}
        )
