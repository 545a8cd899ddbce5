"""
Type-specific CSV row importers.
Each importer turns one CSV row into upserts against the mess repository.
"""
import re
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional, Type
from src.core.exceptions import RowImportException
from src.models.import_kind import ImportKind
from src.models.mess_model import Item, Recipe, Student
from src.repositories.db_repository import MessRepository

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')
_LEADING_FLOAT = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')

QR_CODE_PREFIX = "QR"
DEFAULT_USER_TYPE = "STUDENT"


class RowImporter(ABC):
    """Base class for importers that process one CSV row at a time."""

    def __init__(self, repository: MessRepository):
        self.repository = repository

    def process(self, row: dict, row_index: int) -> None:
        """
        Import a single row.

        Args:
            row: Mapping of column name to raw value
            row_index: 1-based data row index

        Raises:
            RowImportException: If the row cannot be imported
        """
        try:
            self.import_row(row)
        except RowImportException as e:
            e.row_index = row_index
            raise
        except Exception as e:
            message = getattr(e, 'message', None) or str(e)
            raise RowImportException(message, row_index) from e

    @abstractmethod
    def import_row(self, row: dict) -> None:
        """Upsert the entities described by one row."""
        pass


class ItemsImporter(RowImporter):
    """Imports inventory items, resolving their category and preferred vendor."""

    def import_row(self, row: dict) -> None:
        name = _required(row, 'name')
        category = self.repository.get_or_create_category(_required(row, 'category_name'))

        vendor_id = None
        vendor_name = _value(row, 'preferred_vendor_name')
        if vendor_name:
            vendor = self.repository.find_vendor_by_name(vendor_name)
            vendor_id = vendor.id if vendor else None

        self.repository.upsert_item(Item(
            name=name,
            sku=_value(row, 'sku') or None,
            unit=_value(row, 'unit') or None,
            category_id=category.id,
            preferred_vendor_id=vendor_id,
            moq=parse_int_or_zero(row.get('moq')),
            reorder_point=parse_int_or_zero(row.get('reorder_point')),
            storage_type=_value(row, 'storage_type') or None,
            perishable=parse_perishable(row.get('perishable'))
        ))


class CategoriesImporter(RowImporter):
    """Imports categories; existing names are left untouched."""

    def import_row(self, row: dict) -> None:
        self.repository.get_or_create_category(_required(row, 'name'))


class RecipesImporter(RowImporter):
    """Imports dish recipes. Dishes are created on demand, items must already exist."""

    def import_row(self, row: dict) -> None:
        dish = self.repository.get_or_create_dish(_required(row, 'dish_name'))

        item_name = _required(row, 'item_name')
        item = self.repository.find_item_by_name(item_name)
        if not item:
            raise RowImportException(f"Item '{item_name}' not found")

        qty = parse_float(row.get('qty_per_student'))
        if qty is None:
            raise RowImportException(
                f"qty_per_student must be a number, got: {row.get('qty_per_student')!r}"
            )

        self.repository.upsert_recipe(Recipe(dish_id=dish.id, item_id=item.id, qty_per_student=qty))


class StudentsImporter(RowImporter):
    """Imports students and employees; a QR code is issued only on first import."""

    def import_row(self, row: dict) -> None:
        register_number = _required(row, 'register_number')

        self.repository.upsert_student(Student(
            register_number=register_number,
            name=_value(row, 'name'),
            mobile_number=_value(row, 'mobile_number'),
            email=_value(row, 'email'),
            room_number=_value(row, 'room_number'),
            qr_code=generate_qr_code(register_number),
            user_type=_value(row, 'user_type') or DEFAULT_USER_TYPE,
            employee_id=_value(row, 'employee_id'),
            department=_value(row, 'department')
        ))


IMPORTERS: Dict[ImportKind, Type[RowImporter]] = {
    ImportKind.ITEMS: ItemsImporter,
    ImportKind.CATEGORIES: CategoriesImporter,
    ImportKind.RECIPES: RecipesImporter,
    ImportKind.STUDENTS: StudentsImporter,
}


def get_importer(kind: ImportKind, repository: MessRepository) -> RowImporter:
    """Build the importer bound to an import kind."""
    return IMPORTERS[kind](repository)


def generate_qr_code(register_number: str) -> str:
    """QR token format: QR_<register_number>_<8 hex chars>."""
    return f"{QR_CODE_PREFIX}_{register_number}_{uuid.uuid4().hex[:8]}"


def parse_int_or_zero(value: Optional[str]) -> int:
    """Parse the leading integer of a value ("12kg" -> 12, "3.7" -> 3); 0 when there is none."""
    match = _LEADING_INT.match(value or '')
    return int(match.group(1)) if match else 0


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse the leading decimal number of a value ("0.15kg" -> 0.15); None when there is none."""
    match = _LEADING_FLOAT.match(value or '')
    return float(match.group(1)) if match else None


def parse_perishable(value: Optional[str]) -> bool:
    # Exact, case-sensitive match: "True", "TRUE" and "1" are all False.
    return value == 'true'


def _value(row: dict, column: str) -> str:
    return (row.get(column) or '').strip()


def _required(row: dict, column: str) -> str:
    value = _value(row, column)
    if not value:
        raise RowImportException(f"{column} is required")
    return value
