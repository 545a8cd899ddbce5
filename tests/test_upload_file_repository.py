import io
import os
import re
import pytest
from src.core.exceptions import FileStorageException
from src.repositories.upload_file_repository import UploadFileRepository


@pytest.fixture
def repository(tmp_path):
    return UploadFileRepository(upload_dir=str(tmp_path / "uploads"))


class TestUploadFileRepository:
    def test_save_creates_directory_and_file(self, repository):
        path = repository.save(io.BytesIO(b"name\nVegetables\n"))

        assert os.path.dirname(path) == repository.upload_dir
        assert re.match(r"^csv-\d+-[0-9a-f]{8}\.csv$", os.path.basename(path))
        with open(path, "rb") as stored:
            assert stored.read() == b"name\nVegetables\n"

    def test_saved_names_are_unique(self, repository):
        first = repository.save(io.BytesIO(b"a"))
        second = repository.save(io.BytesIO(b"b"))

        assert first != second

    def test_open_reads_stored_bytes(self, repository):
        path = repository.save(io.BytesIO(b"name\nDairy\n"))

        with repository.open(path) as stream:
            assert stream.read() == b"name\nDairy\n"

    def test_open_missing_file(self, repository):
        with pytest.raises(FileStorageException) as exc_info:
            repository.open(os.path.join(repository.upload_dir, "missing.csv"))
        assert "Failed to open stored file" in str(exc_info.value)

    def test_delete_removes_file(self, repository):
        path = repository.save(io.BytesIO(b"name\n"))

        repository.delete(path)

        assert not os.path.exists(path)

    def test_delete_missing_file_is_ignored(self, repository):
        repository.delete(os.path.join(repository.upload_dir, "missing.csv"))

    def test_save_failure(self, tmp_path):
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("x")
        repository = UploadFileRepository(upload_dir=str(blocker))

        with pytest.raises(FileStorageException):
            repository.save(io.BytesIO(b"name\n"))
