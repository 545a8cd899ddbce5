"""
Upload Record domain model.
Represents one CSV bulk-import attempt and its outcome.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional


class UploadStatus(str, Enum):
    """Lifecycle states of an upload. COMPLETED and FAILED are terminal."""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class RowError:
    """One failed row: 1-based data row index, message and the raw row."""

    def __init__(self, row: Optional[int], error: str, data: Optional[dict] = None):
        self.row = row
        self.error = error
        self.data = data

    def to_dict(self) -> dict:
        entry = {'error': self.error}
        if self.row is not None:
            entry['row'] = self.row
        if self.data is not None:
            entry['data'] = self.data
        return entry

    @classmethod
    def from_dict(cls, entry: dict) -> "RowError":
        row = entry.get('row')
        return cls(
            row=int(row) if row is not None else None,
            error=entry.get('error', ''),
            data=entry.get('data')
        )

    def __repr__(self):
        return f"RowError(row={self.row}, error={self.error!r})"


class UploadRecord:
    """Domain model for upload registry entries."""

    def __init__(
        self,
        upload_id: str,
        upload_type: str,
        filename: str,
        uploaded_by: str,
        created_at: datetime,
        uploaded_by_name: Optional[str] = None,
        status: UploadStatus = UploadStatus.PROCESSING,
        total_rows: int = 0,
        successful_rows: int = 0,
        failed_rows: int = 0,
        error_log: Optional[List[RowError]] = None,
        completed_at: Optional[datetime] = None
    ):
        self.upload_id = upload_id
        self.upload_type = upload_type
        self.filename = filename
        self.uploaded_by = uploaded_by
        self.uploaded_by_name = uploaded_by_name
        self.status = UploadStatus(status)
        self.created_at = created_at
        self.total_rows = total_rows
        self.successful_rows = successful_rows
        self.failed_rows = failed_rows
        self.error_log = error_log or []
        self.completed_at = completed_at

    def __repr__(self):
        return (
            f"UploadRecord(upload_id={self.upload_id}, upload_type={self.upload_type}, "
            f"status={self.status.value})"
        )
