"""
Domain models for mess reference data touched by CSV imports.
Database-agnostic representations keyed by their natural keys.
"""
from typing import Optional


class Category:
    """Inventory item category, unique by name."""

    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name

    def __repr__(self):
        return f"Category(id={self.id}, name={self.name})"


class Vendor:
    """Supplier; names are not unique, lookups take the first match."""

    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name

    def __repr__(self):
        return f"Vendor(id={self.id}, name={self.name})"


class Dish:
    """Menu dish, unique by name."""

    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name

    def __repr__(self):
        return f"Dish(id={self.id}, name={self.name})"


class Item:
    """Inventory item, unique by name."""

    def __init__(
        self,
        name: str,
        category_id: str,
        id: Optional[str] = None,
        sku: Optional[str] = None,
        unit: Optional[str] = None,
        preferred_vendor_id: Optional[str] = None,
        moq: int = 0,
        reorder_point: int = 0,
        storage_type: Optional[str] = None,
        perishable: bool = False
    ):
        self.id = id
        self.name = name
        self.sku = sku
        self.unit = unit
        self.category_id = category_id
        self.preferred_vendor_id = preferred_vendor_id
        self.moq = moq
        self.reorder_point = reorder_point
        self.storage_type = storage_type
        self.perishable = perishable

    def __repr__(self):
        return f"Item(id={self.id}, name={self.name}, sku={self.sku})"


class Recipe:
    """Per-student quantity of an item used by a dish."""

    def __init__(self, dish_id: str, item_id: str, qty_per_student: float):
        self.dish_id = dish_id
        self.item_id = item_id
        self.qty_per_student = qty_per_student

    def __repr__(self):
        return f"Recipe(dish_id={self.dish_id}, item_id={self.item_id}, qty_per_student={self.qty_per_student})"


class Student:
    """Student or employee eligible for mess service, unique by register number."""

    def __init__(
        self,
        register_number: str,
        name: Optional[str] = None,
        mobile_number: Optional[str] = None,
        email: Optional[str] = None,
        room_number: Optional[str] = None,
        qr_code: Optional[str] = None,
        user_type: str = "STUDENT",
        employee_id: Optional[str] = None,
        department: Optional[str] = None
    ):
        self.register_number = register_number
        self.name = name
        self.mobile_number = mobile_number
        self.email = email
        self.room_number = room_number
        self.qr_code = qr_code
        self.user_type = user_type
        self.employee_id = employee_id
        self.department = department

    def __repr__(self):
        return f"Student(register_number={self.register_number}, name={self.name}, user_type={self.user_type})"
