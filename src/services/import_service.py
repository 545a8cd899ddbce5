"""
Import Service for business logic.
Orchestrates CSV upload intake and upload registry queries.
"""
import csv
import io
from typing import BinaryIO
from src.core.auth_dependencies import AuthenticatedUser
from src.core.exceptions import UnknownImportKindException, UploadNotFoundException
from src.models.dto.upload_dto import UploadAcceptedResponse, UploadListResponse, UploadRecordResponse
from src.models.import_kind import ImportKind
from src.repositories.upload_file_repository import UploadFileRepository
from src.repositories.upload_record_repository import UploadRecordRepository
from src.services.file_service import FileService
from src.services.import_coordinator import ImportCoordinator


class ImportService:
    """Service for CSV bulk-import operations."""

    def __init__(
        self,
        coordinator: ImportCoordinator,
        upload_record_repository: UploadRecordRepository = None,
        file_repository: UploadFileRepository = None,
        file_service: FileService = None
    ):
        self.coordinator = coordinator
        self.upload_record_repository = upload_record_repository or UploadRecordRepository()
        self.file_repository = file_repository or UploadFileRepository()
        self.file_service = file_service or FileService()

    def upload_csv(
        self,
        file: BinaryIO,
        filename: str,
        upload_type: str,
        user: AuthenticatedUser
    ) -> UploadAcceptedResponse:
        """
        Handle CSV upload intake.

        The header is checked against the declared kind, the file is stored
        locally, and processing is handed to the import coordinator. An
        unrecognized kind is not rejected here; the coordinator records the
        upload as failed so it shows up in the upload history.

        Args:
            file: Uploaded CSV file
            filename: Original filename
            upload_type: Declared import type
            user: Authenticated submitter

        Returns:
            UploadAcceptedResponse with the new upload id

        Raises:
            ValidationException: If the CSV header is unusable for the kind
            FileStorageException: If the file cannot be stored
            DynamoDBException: If the upload record cannot be created
        """
        try:
            kind = ImportKind.parse(upload_type)
        except UnknownImportKindException:
            kind = None

        if kind is not None:
            self.file_service.validate_csv_structure(file, kind)

        file_path = self.file_repository.save(file)

        handle = self.coordinator.start_import(
            file_path=file_path,
            upload_type=upload_type,
            filename=filename,
            uploaded_by=user.user_id,
            uploaded_by_name=user.name
        )

        return UploadAcceptedResponse(
            upload_id=handle.upload_id,
            status="PROCESSING",
            message="CSV upload started successfully"
        )

    def get_upload(self, upload_id: str) -> UploadRecordResponse:
        """
        Get a single upload record.

        Raises:
            UploadNotFoundException: If upload_id not found
        """
        record = self.upload_record_repository.get_by_id(upload_id)

        if not record:
            raise UploadNotFoundException(f"Upload ID '{upload_id}' not found")

        return UploadRecordResponse.from_record(record)

    def list_uploads(self) -> UploadListResponse:
        """Get the full upload history, newest first."""
        records = self.upload_record_repository.list_all()
        uploads = [UploadRecordResponse.from_record(record) for record in records]
        return UploadListResponse(uploads=uploads, count=len(uploads))

    def get_template(self, upload_type: str) -> str:
        """
        Build the downloadable CSV template for an import kind.

        Raises:
            UnknownImportKindException: If the kind is not recognized
        """
        kind = ImportKind.parse(upload_type)

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerow(kind.columns)
        writer.writerows(kind.sample_rows)
        return buffer.getvalue()
