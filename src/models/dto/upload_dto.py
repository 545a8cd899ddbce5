"""
Data Transfer Objects for the CSV upload API.
Defines response schemas for upload intake and registry queries.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.models.upload_record import UploadRecord


class UploadAcceptedResponse(BaseModel):
    """Response schema for an accepted CSV upload."""
    upload_id: str = Field(..., description="Unique identifier for the upload")
    status: str = Field(..., description="Upload status")
    message: str = Field(..., description="Status message")


class RowErrorResponse(BaseModel):
    """A single entry of an upload's error log."""
    row: Optional[int] = Field(default=None, description="1-based data row index")
    error: str
    data: Optional[Dict[str, Any]] = None


class UploadRecordResponse(BaseModel):
    """Response schema for an upload registry entry."""
    upload_id: str
    upload_type: str
    filename: str
    uploaded_by: str
    uploaded_by_name: Optional[str] = None
    status: str
    total_rows: int = 0
    successful_rows: int = 0
    failed_rows: int = 0
    error_log: List[RowErrorResponse] = []
    created_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: UploadRecord) -> "UploadRecordResponse":
        return cls(
            upload_id=record.upload_id,
            upload_type=record.upload_type,
            filename=record.filename,
            uploaded_by=record.uploaded_by,
            uploaded_by_name=record.uploaded_by_name,
            status=record.status.value,
            total_rows=record.total_rows,
            successful_rows=record.successful_rows,
            failed_rows=record.failed_rows,
            error_log=[RowErrorResponse(**entry.to_dict()) for entry in record.error_log],
            created_at=record.created_at,
            completed_at=record.completed_at
        )


class UploadListResponse(BaseModel):
    """Response schema for the upload history, newest first."""
    uploads: List[UploadRecordResponse]
    count: int
