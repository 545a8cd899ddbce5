"""
DynamoDB Repository for mess reference data.
Resolves and upserts categories, vendors, dishes, items, recipes and students.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional, Tuple
import uuid
import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from src.core import config
from src.core.exceptions import DynamoDBException
from src.models.mess_model import Category, Dish, Item, Recipe, Student, Vendor
from src.repositories.db_repository import MessRepository

VENDOR_NAME_INDEX = 'NameIndex'


class DynamoRepository(MessRepository):
    """Repository for DynamoDB operations on mess reference data."""

    def __init__(self):
        # One session per repository; resources must not cross threads
        session = boto3.session.Session()
        self.dynamodb = session.resource('dynamodb', region_name=config.settings.aws_region)
        self.categories_table = self.dynamodb.Table(config.settings.categories_table_name)
        self.vendors_table = self.dynamodb.Table(config.settings.vendors_table_name)
        self.dishes_table = self.dynamodb.Table(config.settings.dishes_table_name)
        self.items_table = self.dynamodb.Table(config.settings.items_table_name)
        self.recipes_table = self.dynamodb.Table(config.settings.recipes_table_name)
        self.students_table = self.dynamodb.Table(config.settings.students_table_name)

    def get_or_create_category(self, name: str) -> Category:
        """
        Find a category by name, creating it if absent.

        Args:
            name: Category name

        Returns:
            Existing or newly created Category

        Raises:
            DynamoDBException: If lookup or creation fails
        """
        item = self._get_or_create_by_name(self.categories_table, name, "category")
        return Category(id=item['id'], name=item['name'])

    def find_vendor_by_name(self, name: str) -> Optional[Vendor]:
        """
        Find the first vendor with the given name using the name GSI.

        Args:
            name: Vendor name

        Returns:
            Vendor or None if no vendor has that name

        Raises:
            DynamoDBException: If query fails
        """
        try:
            response = self.vendors_table.query(
                IndexName=VENDOR_NAME_INDEX,
                KeyConditionExpression=Key('name').eq(name),
                Limit=1
            )
            items = response.get('Items', [])
            if not items:
                return None
            return Vendor(id=items[0]['vendor_id'], name=items[0]['name'])

        except ClientError as e:
            raise DynamoDBException(f"Failed to query vendor '{name}': {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error querying vendor '{name}': {str(e)}") from e

    def get_or_create_dish(self, name: str) -> Dish:
        """Find a dish by name, creating it with minimal fields if absent."""
        item = self._get_or_create_by_name(self.dishes_table, name, "dish")
        return Dish(id=item['id'], name=item['name'])

    def find_item_by_name(self, name: str) -> Optional[Item]:
        """
        Find an inventory item by name.

        Raises:
            DynamoDBException: If lookup fails
        """
        try:
            response = self.items_table.get_item(Key={'name': name})
            if 'Item' not in response:
                return None
            return self._to_item(response['Item'])

        except ClientError as e:
            raise DynamoDBException(f"Failed to get item '{name}': {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error getting item '{name}': {str(e)}") from e

    def upsert_item(self, item: Item) -> Item:
        """
        Create or update an inventory item keyed by name.
        The surrogate id is assigned on creation and kept on update.

        Args:
            item: Item domain model

        Returns:
            Item as stored

        Raises:
            DynamoDBException: If the upsert fails
        """
        now = _now()
        attributes = {
            'sku': item.sku,
            'unit': item.unit,
            'category_id': item.category_id,
            'preferred_vendor_id': item.preferred_vendor_id,
            'moq': item.moq,
            'reorder_point': item.reorder_point,
            'storage_type': item.storage_type,
            'perishable': item.perishable,
            'updated_at': now
        }
        on_create = {'id': item.id or str(uuid.uuid4()), 'created_at': now}

        stored = self._upsert(self.items_table, {'name': item.name}, attributes, on_create, "item")
        return self._to_item(stored)

    def upsert_recipe(self, recipe: Recipe) -> None:
        """
        Create or update the quantity of an item used by a dish.

        Raises:
            DynamoDBException: If the upsert fails
        """
        now = _now()
        self._upsert(
            self.recipes_table,
            {'dish_id': recipe.dish_id, 'item_id': recipe.item_id},
            {'qty_per_student': Decimal(str(recipe.qty_per_student)), 'updated_at': now},
            {'created_at': now},
            "recipe"
        )

    def find_recipe(self, dish_id: str, item_id: str) -> Optional[Recipe]:
        """Find the recipe line for a dish and item."""
        try:
            response = self.recipes_table.get_item(Key={'dish_id': dish_id, 'item_id': item_id})
            if 'Item' not in response:
                return None
            stored = response['Item']
            return Recipe(
                dish_id=stored['dish_id'],
                item_id=stored['item_id'],
                qty_per_student=float(stored['qty_per_student'])
            )

        except ClientError as e:
            raise DynamoDBException(f"Failed to get recipe: {str(e)}") from e

    def upsert_student(self, student: Student) -> Student:
        """
        Create or update a student keyed by register number.
        The QR code is only written when the record is created.

        Args:
            student: Student domain model carrying a freshly generated QR code

        Returns:
            Student as stored, with the QR code that is actually in effect

        Raises:
            DynamoDBException: If the upsert fails
        """
        now = _now()
        attributes = {
            'name': student.name,
            'mobile_number': student.mobile_number,
            'email': student.email,
            'room_number': student.room_number,
            'user_type': student.user_type,
            'employee_id': student.employee_id,
            'department': student.department,
            'updated_at': now
        }
        on_create = {'qr_code': student.qr_code, 'created_at': now}

        stored = self._upsert(
            self.students_table,
            {'register_number': student.register_number},
            attributes,
            on_create,
            "student"
        )
        return self._to_student(stored)

    def find_student(self, register_number: str) -> Optional[Student]:
        """
        Find a student by register number.

        Raises:
            DynamoDBException: If lookup fails
        """
        try:
            response = self.students_table.get_item(Key={'register_number': register_number})
            if 'Item' not in response:
                return None
            return self._to_student(response['Item'])

        except ClientError as e:
            raise DynamoDBException(f"Failed to get student '{register_number}': {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error getting student '{register_number}': {str(e)}") from e

    def _get_or_create_by_name(self, table, name: str, entity: str) -> dict:
        """
        Find-or-create on a table keyed by name.
        A conditional put guards the create; losing a concurrent race re-reads the winner.
        """
        try:
            response = table.get_item(Key={'name': name})
            if 'Item' in response:
                return response['Item']

            item = {'id': str(uuid.uuid4()), 'name': name, 'created_at': _now()}
            try:
                table.put_item(Item=item, ConditionExpression=Attr('name').not_exists())
                return item
            except ClientError as e:
                if e.response['Error']['Code'] != 'ConditionalCheckFailedException':
                    raise

            response = table.get_item(Key={'name': name}, ConsistentRead=True)
            return response['Item']

        except ClientError as e:
            raise DynamoDBException(f"Failed to resolve {entity} '{name}': {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error resolving {entity} '{name}': {str(e)}") from e

    def _upsert(self, table, key: dict, attributes: dict, on_create: dict, entity: str) -> dict:
        """Single UpdateItem that overwrites attributes and sets on_create fields only when missing."""
        try:
            expression, names, values = _build_update_expression(attributes, on_create)
            response = table.update_item(
                Key=key,
                UpdateExpression=expression,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues='ALL_NEW'
            )
            return response['Attributes']

        except ClientError as e:
            raise DynamoDBException(f"Failed to upsert {entity}: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error upserting {entity}: {str(e)}") from e

    def _to_item(self, stored: dict) -> Item:
        """Convert DynamoDB item to Item domain model."""
        return Item(
            id=stored.get('id'),
            name=stored['name'],
            sku=stored.get('sku'),
            unit=stored.get('unit'),
            category_id=stored.get('category_id'),
            preferred_vendor_id=stored.get('preferred_vendor_id'),
            moq=int(stored.get('moq', 0)),
            reorder_point=int(stored.get('reorder_point', 0)),
            storage_type=stored.get('storage_type'),
            perishable=bool(stored.get('perishable', False))
        )

    def _to_student(self, stored: dict) -> Student:
        """Convert DynamoDB item to Student domain model."""
        return Student(
            register_number=stored['register_number'],
            name=stored.get('name'),
            mobile_number=stored.get('mobile_number'),
            email=stored.get('email'),
            room_number=stored.get('room_number'),
            qr_code=stored.get('qr_code'),
            user_type=stored.get('user_type', 'STUDENT'),
            employee_id=stored.get('employee_id'),
            department=stored.get('department')
        )


def _build_update_expression(attributes: dict, on_create: dict) -> Tuple[str, Dict[str, str], dict]:
    """Build a SET expression; on_create fields use if_not_exists so updates keep them."""
    assignments = []
    names = {}
    values = {}

    for key, value in attributes.items():
        assignments.append(f"#{key} = :{key}")
        names[f"#{key}"] = key
        values[f":{key}"] = value

    for key, value in on_create.items():
        assignments.append(f"#{key} = if_not_exists(#{key}, :{key})")
        names[f"#{key}"] = key
        values[f":{key}"] = value

    return "SET " + ", ".join(assignments), names, values


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
