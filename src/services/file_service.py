"""
File Service for CSV processing.
Handles CSV header validation and lazy row parsing.
"""
import csv
import io
from typing import BinaryIO, Dict, Iterator, Optional
from src.core.exceptions import CSVStreamException, ValidationException
from src.models.import_kind import ImportKind

EXTRA_FIELDS_KEY = '_extra'


class FileService:
    """Service for file processing operations."""

    def validate_csv_structure(self, file: BinaryIO, kind: ImportKind) -> None:
        """
        Validate CSV header against the columns an import kind requires.
        Only the header line is read; the file pointer is reset afterwards.

        Args:
            file: CSV file to validate
            kind: Declared import kind

        Raises:
            ValidationException: If the header is missing required columns or is not UTF-8
            CSVStreamException: If the file cannot be read
        """
        try:
            header_line = file.readline().decode('utf-8-sig')
            file.seek(0)

            headers = {name.strip() for name in next(csv.reader([header_line]), [])}

            missing_columns = kind.required_columns - headers
            if missing_columns:
                raise ValidationException(
                    f"Missing required columns: {', '.join(sorted(missing_columns))}"
                )

        except ValidationException:
            raise
        except UnicodeDecodeError as e:
            raise ValidationException("File must be a valid UTF-8 encoded CSV") from e
        except Exception as e:
            raise CSVStreamException(f"Failed to validate CSV structure: {str(e)}") from e

    def iter_rows(self, stream: BinaryIO) -> Iterator[Dict[str, Optional[str]]]:
        """
        Lazily parse a CSV stream into one mapping per data row.
        The stream is read once; a new parse needs a fresh stream.

        Args:
            stream: Readable binary stream, header line first

        Yields:
            Mapping of header column to raw value

        Raises:
            CSVStreamException: If the stream cannot be read or decoded
        """
        try:
            text = io.TextIOWrapper(stream, encoding='utf-8-sig', newline='')
            reader = csv.DictReader(text, restkey=EXTRA_FIELDS_KEY)
            if reader.fieldnames is None:
                return
            reader.fieldnames = [name.strip() for name in reader.fieldnames]

            for row in reader:
                yield row

        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise CSVStreamException(f"Failed to read CSV stream: {str(e)}") from e
