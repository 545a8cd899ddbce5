"""
Custom exceptions for the Mess Import API.
Provides specific error types for different failure scenarios.
"""
from typing import Optional


class MessImportException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(MessImportException):
    """Raised when upload validation fails."""
    pass


class UploadNotFoundException(MessImportException):
    """Raised when an upload record is not found."""
    pass


class CSVStreamException(MessImportException):
    """Raised when the uploaded CSV stream cannot be read."""
    pass


class UnknownImportKindException(MessImportException):
    """Raised when the declared import type is not recognized."""
    pass


class RowImportException(MessImportException):
    """Raised when a single CSV row cannot be imported."""
    def __init__(self, message: str, row_index: Optional[int] = None):
        self.row_index = row_index
        super().__init__(message)


class DynamoDBException(MessImportException):
    """Raised when DynamoDB operation fails."""
    pass


class FileStorageException(MessImportException):
    """Raised when a transient upload file cannot be stored or read."""
    pass
