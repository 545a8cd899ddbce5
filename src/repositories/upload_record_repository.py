"""
Upload Record Repository for DynamoDB operations.
Durable registry of every CSV upload attempt.
"""
import json
from datetime import datetime, timezone
from typing import List, Optional
import boto3
from botocore.exceptions import ClientError
from src.core import config
from src.core.exceptions import DynamoDBException
from src.models.upload_record import RowError, UploadRecord, UploadStatus


class UploadRecordRepository:
    """Repository for upload record DynamoDB operations."""

    def __init__(self):
        session = boto3.session.Session()
        self.dynamodb = session.resource('dynamodb', region_name=config.settings.aws_region)
        self.table = self.dynamodb.Table(config.settings.upload_records_table_name)

    def create(self, record: UploadRecord) -> None:
        """
        Create new upload record.

        Args:
            record: UploadRecord domain model

        Raises:
            DynamoDBException: If create operation fails
        """
        try:
            item = {
                'upload_id': record.upload_id,
                'upload_type': record.upload_type,
                'filename': record.filename,
                'uploaded_by': record.uploaded_by,
                'status': record.status.value,
                'created_at': record.created_at.isoformat(),
                'total_rows': record.total_rows,
                'successful_rows': record.successful_rows,
                'failed_rows': record.failed_rows,
                'error_log': [entry.to_dict() for entry in record.error_log]
            }

            if record.uploaded_by_name:
                item['uploaded_by_name'] = record.uploaded_by_name

            self.table.put_item(Item=item)

        except ClientError as e:
            raise DynamoDBException(f"Failed to create upload record: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error creating upload record: {str(e)}") from e

    def get_by_id(self, upload_id: str) -> Optional[UploadRecord]:
        """
        Retrieve upload record by ID.

        Args:
            upload_id: Upload identifier

        Returns:
            UploadRecord object or None if not found

        Raises:
            DynamoDBException: If query fails
        """
        try:
            response = self.table.get_item(Key={'upload_id': upload_id})

            if 'Item' not in response:
                return None

            return self._item_to_upload_record(response['Item'])

        except ClientError as e:
            raise DynamoDBException(f"Failed to get upload record: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error getting upload record: {str(e)}") from e

    def list_all(self) -> List[UploadRecord]:
        """
        Retrieve every upload record, newest first.

        Raises:
            DynamoDBException: If scan fails
        """
        try:
            scan_kwargs = {}
            items = []
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get('Items', []))
                if 'LastEvaluatedKey' not in response:
                    break
                scan_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']

            records = [self._item_to_upload_record(item) for item in items]
            records.sort(key=lambda record: record.created_at, reverse=True)
            return records

        except ClientError as e:
            raise DynamoDBException(f"Failed to list upload records: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error listing upload records: {str(e)}") from e

    def update(self, upload_id: str, updates: dict) -> None:
        """
        Update upload record fields.

        Args:
            upload_id: Upload identifier
            updates: Dictionary of fields to update

        Raises:
            DynamoDBException: If update operation fails
        """
        try:
            update_expression = "SET "
            expression_values = {}
            expression_names = {}

            for key, value in updates.items():
                update_expression += f"#{key} = :{key}, "
                expression_values[f":{key}"] = value
                expression_names[f"#{key}"] = key

            update_expression = update_expression.rstrip(", ")

            self.table.update_item(
                Key={'upload_id': upload_id},
                UpdateExpression=update_expression,
                ExpressionAttributeNames=expression_names,
                ExpressionAttributeValues=expression_values
            )

        except ClientError as e:
            raise DynamoDBException(f"Failed to update upload record: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error updating upload record: {str(e)}") from e

    def finalize(
        self,
        upload_id: str,
        status: UploadStatus,
        total_rows: int,
        successful_rows: int,
        error_log: List[RowError],
        completed_at: datetime
    ) -> None:
        """
        Write the terminal status, counts and error log of an upload.

        The stored error log is capped to fit in one item; counts stay exact.

        Raises:
            DynamoDBException: If update operation fails
        """
        failed_rows = total_rows - successful_rows
        self.update(upload_id, {
            'status': status.value,
            'total_rows': total_rows,
            'successful_rows': successful_rows,
            'failed_rows': failed_rows,
            'error_log': cap_error_log(error_log, config.settings.error_log_max_bytes),
            'completed_at': completed_at.isoformat()
        })

    def _item_to_upload_record(self, item: dict) -> UploadRecord:
        """Convert DynamoDB item to UploadRecord domain model."""
        completed_at = item.get('completed_at')
        return UploadRecord(
            upload_id=item['upload_id'],
            upload_type=item['upload_type'],
            filename=item['filename'],
            uploaded_by=item['uploaded_by'],
            uploaded_by_name=item.get('uploaded_by_name'),
            status=UploadStatus(item['status']),
            created_at=_parse_timestamp(item['created_at']),
            total_rows=int(item.get('total_rows', 0)),
            successful_rows=int(item.get('successful_rows', 0)),
            failed_rows=int(item.get('failed_rows', 0)),
            error_log=[RowError.from_dict(entry) for entry in item.get('error_log', [])],
            completed_at=_parse_timestamp(completed_at) if completed_at else None
        )


def _parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def cap_error_log(error_log: List[RowError], max_bytes: int) -> List[dict]:
    """
    Serialize an error log so it fits in max_bytes.

    Entries keep their row data while half the budget remains, then are
    stored without data. Entries that no longer fit are replaced by a
    single trailing entry counting them.
    """
    detail_budget = max_bytes // 2
    used = 0
    entries = []

    for position, error in enumerate(error_log):
        entry = error.to_dict()
        size = _entry_size(entry)
        if 'data' in entry and used + size > detail_budget:
            del entry['data']
            size = _entry_size(entry)
        if used + size > max_bytes:
            omitted = len(error_log) - position
            entries.append({'error': f"{omitted} more row errors not stored"})
            break
        entries.append(entry)
        used += size

    return entries


def _entry_size(entry: dict) -> int:
    return len(json.dumps(entry, default=str).encode('utf-8'))
