"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for services and repositories.
"""
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from src.core import config
from src.repositories.upload_file_repository import UploadFileRepository
from src.repositories.upload_record_repository import UploadRecordRepository
from src.services.file_service import FileService
from src.services.import_coordinator import ImportCoordinator
from src.services.import_service import ImportService


@lru_cache()
def get_upload_record_repository() -> UploadRecordRepository:
    """Get UploadRecordRepository singleton instance."""
    return UploadRecordRepository()


@lru_cache()
def get_upload_file_repository() -> UploadFileRepository:
    """Get UploadFileRepository singleton instance."""
    return UploadFileRepository()


@lru_cache()
def get_file_service() -> FileService:
    """Get FileService singleton instance."""
    return FileService()


@lru_cache()
def get_import_executor() -> ThreadPoolExecutor:
    """Get the shared executor that runs background imports."""
    return ThreadPoolExecutor(
        max_workers=config.settings.import_max_workers,
        thread_name_prefix="csv-import"
    )


@lru_cache()
def get_import_coordinator() -> ImportCoordinator:
    """Get ImportCoordinator singleton instance."""
    return ImportCoordinator(
        executor=get_import_executor(),
        upload_record_repository=get_upload_record_repository(),
        file_repository=get_upload_file_repository(),
        file_service=get_file_service()
    )


@lru_cache()
def get_import_service() -> ImportService:
    """Get ImportService singleton instance with injected dependencies."""
    return ImportService(
        coordinator=get_import_coordinator(),
        upload_record_repository=get_upload_record_repository(),
        file_repository=get_upload_file_repository(),
        file_service=get_file_service()
    )
