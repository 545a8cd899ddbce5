"""
Import Coordinator.
Drives one CSV upload from acceptance to a finalized upload record.
"""
import logging
import threading
import uuid
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional
from src.core.exceptions import MessImportException, RowImportException
from src.models.import_kind import ImportKind
from src.models.upload_record import RowError, UploadRecord, UploadStatus
from src.repositories.db_repository import MessRepository
from src.repositories.dynamo_repository import DynamoRepository
from src.repositories.upload_file_repository import UploadFileRepository
from src.repositories.upload_record_repository import UploadRecordRepository
from src.services.file_service import FileService
from src.services.importers import RowImporter, get_importer

logger = logging.getLogger(__name__)


@dataclass
class ImportOutcome:
    """Result of folding an upload's rows."""
    status: UploadStatus = UploadStatus.COMPLETED
    total_rows: int = 0
    successful_rows: int = 0
    errors: List[RowError] = field(default_factory=list)

    @property
    def failed_rows(self) -> int:
        return self.total_rows - self.successful_rows


class ImportHandle:
    """Handle on a background import; the future resolves to its ImportOutcome."""

    def __init__(self, upload_id: str, future: Future):
        self.upload_id = upload_id
        self.future = future

    def done(self) -> bool:
        return self.future.done()

    def wait(self, timeout: Optional[float] = None) -> ImportOutcome:
        return self.future.result(timeout=timeout)

    def __repr__(self):
        return f"ImportHandle(upload_id={self.upload_id}, done={self.done()})"


def accumulate_rows(rows: Iterable[dict], importer: RowImporter) -> ImportOutcome:
    """
    Fold a row sequence through an importer.
    Row failures are collected in row order and never stop the fold.

    Args:
        rows: Row mappings in file order
        importer: Importer for the upload's kind

    Returns:
        ImportOutcome with counts and per-row errors

    Raises:
        CSVStreamException: If the row sequence itself fails
    """
    outcome = ImportOutcome()
    for row_index, row in enumerate(rows, start=1):
        outcome.total_rows += 1
        try:
            importer.process(row, row_index)
        except RowImportException as e:
            outcome.errors.append(RowError(row=row_index, error=e.message, data=dict(row)))
        else:
            outcome.successful_rows += 1
    return outcome


class ImportCoordinator:
    """Creates upload records and runs their imports on a background executor."""

    def __init__(
        self,
        executor: Executor,
        upload_record_repository: UploadRecordRepository = None,
        file_repository: UploadFileRepository = None,
        file_service: FileService = None,
        repository_factory: Callable[[], MessRepository] = None,
        upload_record_repository_factory: Callable[[], UploadRecordRepository] = None
    ):
        self.executor = executor
        self.upload_record_repository = upload_record_repository or UploadRecordRepository()
        self.file_repository = file_repository or UploadFileRepository()
        self.file_service = file_service or FileService()
        self.repository_factory = repository_factory or DynamoRepository
        self.upload_record_repository_factory = upload_record_repository_factory or UploadRecordRepository
        self._handles: Dict[str, ImportHandle] = {}
        self._lock = threading.Lock()

    def start_import(
        self,
        file_path: str,
        upload_type: str,
        filename: str,
        uploaded_by: str,
        uploaded_by_name: Optional[str] = None
    ) -> ImportHandle:
        """
        Register an upload and start processing it in the background.

        Args:
            file_path: Path of the stored upload file
            upload_type: Declared import type as received
            filename: Original filename
            uploaded_by: Submitter id
            uploaded_by_name: Submitter display name

        Returns:
            ImportHandle for the background task

        Raises:
            DynamoDBException: If the upload record cannot be created
            RuntimeError: If the executor no longer accepts work; the record is
                finalized as FAILED
        """
        record = UploadRecord(
            upload_id=str(uuid.uuid4()),
            upload_type=upload_type,
            filename=filename,
            uploaded_by=uploaded_by,
            uploaded_by_name=uploaded_by_name,
            status=UploadStatus.PROCESSING,
            created_at=datetime.now(timezone.utc)
        )
        try:
            self.upload_record_repository.create(record)
        except MessImportException:
            self.file_repository.delete(file_path)
            raise

        logger.info("Upload %s accepted: type=%s file=%s", record.upload_id, upload_type, filename)

        with self._lock:
            try:
                future = self.executor.submit(self._run_import, record.upload_id, upload_type, file_path)
            except RuntimeError as e:
                logger.error("Upload %s could not be scheduled: %s", record.upload_id, e)
                self.file_repository.delete(file_path)
                self._finalize(
                    self.upload_record_repository,
                    record.upload_id,
                    ImportOutcome(
                        status=UploadStatus.FAILED,
                        errors=[RowError(row=None, error=f"Import could not be scheduled: {e}")]
                    )
                )
                raise
            handle = ImportHandle(record.upload_id, future)
            if not future.done():
                self._handles[record.upload_id] = handle
        future.add_done_callback(lambda _: self._forget(record.upload_id))
        return handle

    def get_handle(self, upload_id: str) -> Optional[ImportHandle]:
        """Handle of an import that is still running, if any."""
        with self._lock:
            return self._handles.get(upload_id)

    def _forget(self, upload_id: str) -> None:
        with self._lock:
            self._handles.pop(upload_id, None)

    def _run_import(self, upload_id: str, upload_type: str, file_path: str) -> ImportOutcome:
        """Process a stored upload and finalize its record. Runs on the executor."""
        try:
            outcome = self._process(upload_type, file_path)
        except MessImportException as e:
            logger.error("Upload %s failed: %s", upload_id, e.message)
            outcome = ImportOutcome(status=UploadStatus.FAILED, errors=[RowError(row=None, error=e.message)])
        except Exception as e:
            logger.exception("Upload %s failed unexpectedly", upload_id)
            outcome = ImportOutcome(status=UploadStatus.FAILED, errors=[RowError(row=None, error=str(e))])
        finally:
            self.file_repository.delete(file_path)

        upload_records = None
        try:
            upload_records = self.upload_record_repository_factory()
            self._finalize(upload_records, upload_id, outcome)
        except MessImportException as e:
            logger.exception("Upload %s could not be finalized", upload_id)
            if upload_records is None:
                raise
            outcome = ImportOutcome(
                status=UploadStatus.FAILED,
                total_rows=outcome.total_rows,
                successful_rows=outcome.successful_rows,
                errors=[RowError(row=None, error=f"Import results could not be stored: {e.message}")]
            )
            self._finalize(upload_records, upload_id, outcome)
        logger.info(
            "Upload %s %s: total=%d successful=%d failed=%d",
            upload_id, outcome.status.value, outcome.total_rows,
            outcome.successful_rows, outcome.failed_rows
        )
        return outcome

    def _finalize(self, upload_records: UploadRecordRepository, upload_id: str, outcome: ImportOutcome) -> None:
        upload_records.finalize(
            upload_id,
            status=outcome.status,
            total_rows=outcome.total_rows,
            successful_rows=outcome.successful_rows,
            error_log=outcome.errors,
            completed_at=datetime.now(timezone.utc)
        )

    def _process(self, upload_type: str, file_path: str) -> ImportOutcome:
        kind = ImportKind.parse(upload_type)
        importer = get_importer(kind, self.repository_factory())
        with self.file_repository.open(file_path) as stream:
            return accumulate_rows(self.file_service.iter_rows(stream), importer)
