"""
Import kind enumeration.
Each kind names one CSV layout and one importer.
"""
from enum import Enum
from typing import List, Tuple
from src.core.exceptions import UnknownImportKindException


class ImportKind(str, Enum):
    """Closed set of CSV bulk-import kinds."""

    ITEMS = "items"
    CATEGORIES = "categories"
    RECIPES = "recipes"
    STUDENTS = "students"

    @classmethod
    def parse(cls, raw: str) -> "ImportKind":
        """
        Convert a declared upload type into an ImportKind.

        Args:
            raw: Upload type as received from the client

        Returns:
            Matching ImportKind

        Raises:
            UnknownImportKindException: If the value is not a recognized kind
        """
        try:
            return cls((raw or "").strip())
        except ValueError:
            allowed = ", ".join(kind.value for kind in cls)
            raise UnknownImportKindException(
                f"Invalid upload type '{raw}'. Expected one of: {allowed}"
            )

    @property
    def columns(self) -> List[str]:
        """Template column order for this kind."""
        return list(_TEMPLATES[self][0])

    @property
    def required_columns(self) -> set:
        """Columns that must be present in the CSV header."""
        return set(_REQUIRED_COLUMNS[self])

    @property
    def sample_rows(self) -> List[Tuple[str, ...]]:
        """Example data rows shipped with the downloadable template."""
        return list(_TEMPLATES[self][1])


_REQUIRED_COLUMNS = {
    ImportKind.ITEMS: ("name", "category_name"),
    ImportKind.CATEGORIES: ("name",),
    ImportKind.RECIPES: ("dish_name", "item_name", "qty_per_student"),
    ImportKind.STUDENTS: ("register_number",),
}

_TEMPLATES = {
    ImportKind.ITEMS: (
        ("name", "sku", "unit", "category_name", "preferred_vendor_name",
         "moq", "reorder_point", "storage_type", "perishable"),
        (
            ("Rice Basmati", "RICE001", "kg", "Grains", "ABC Traders", "100", "50", "Dry", "false"),
            ("Onion", "VEG001", "kg", "Vegetables", "Fresh Produce", "25", "10", "Cool & Dry", "true"),
        ),
    ),
    ImportKind.CATEGORIES: (
        ("name",),
        (("Vegetables",), ("Grains & Pulses",), ("Dairy Products",), ("Spices & Condiments",)),
    ),
    ImportKind.RECIPES: (
        ("dish_name", "item_name", "qty_per_student"),
        (
            ("Vegetable Curry", "Onion", "0.05"),
            ("Vegetable Curry", "Tomato", "0.08"),
            ("Rice", "Rice Basmati", "0.15"),
        ),
    ),
    ImportKind.STUDENTS: (
        ("register_number", "name", "mobile_number", "email", "room_number",
         "user_type", "employee_id", "department"),
        (
            ("CS2021001", "John Doe", "9876543210", "john@college.edu", "A-101",
             "STUDENT", "", "Computer Science"),
            ("EMP001", "Dr. Smith", "9876543211", "smith@college.edu", "",
             "EMPLOYEE", "EMP001", "Mathematics"),
        ),
    ),
}
