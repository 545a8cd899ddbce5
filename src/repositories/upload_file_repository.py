"""
Upload File Repository for transient local storage.
Holds uploaded CSV files on disk until their import finishes.
"""
import logging
import os
import shutil
import time
import uuid
from typing import BinaryIO
from src.core import config
from src.core.exceptions import FileStorageException

logger = logging.getLogger(__name__)


class UploadFileRepository:
    """Repository for transient upload files."""

    def __init__(self, upload_dir: str = None):
        self.upload_dir = upload_dir or config.settings.upload_dir

    def save(self, file: BinaryIO) -> str:
        """
        Persist an uploaded file to the upload directory.

        Args:
            file: File object to store

        Returns:
            Path of the stored file

        Raises:
            FileStorageException: If the file cannot be written
        """
        try:
            os.makedirs(self.upload_dir, exist_ok=True)
            path = os.path.join(self.upload_dir, self._generate_filename())

            with open(path, 'wb') as target:
                shutil.copyfileobj(file, target)

            return path

        except OSError as e:
            raise FileStorageException(f"Failed to store uploaded file: {str(e)}") from e

    def open(self, path: str) -> BinaryIO:
        """
        Open a stored file for reading.

        Raises:
            FileStorageException: If the file is missing or unreadable
        """
        try:
            return open(path, 'rb')
        except OSError as e:
            raise FileStorageException(f"Failed to open stored file: {str(e)}") from e

    def delete(self, path: str) -> None:
        """Remove a stored file; a file that is already gone is ignored."""
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not delete stored upload %s: %s", path, e)

    def _generate_filename(self) -> str:
        """
        Generate unique name for a stored upload.

        Format: csv-{epoch_millis}-{random}.csv
        """
        return f"csv-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.csv"
