"""
Abstract base class for mess data repositories.
Defines the lookup and upsert contract the CSV importers rely on.
"""
from abc import ABC, abstractmethod
from typing import Optional
from src.models.mess_model import Category, Dish, Item, Recipe, Student, Vendor


class MessRepository(ABC):
    """Abstract repository interface for mess reference data."""

    @abstractmethod
    def get_or_create_category(self, name: str) -> Category:
        """Find a category by name, creating it if absent."""
        pass

    @abstractmethod
    def find_vendor_by_name(self, name: str) -> Optional[Vendor]:
        """Find the first vendor with the given name."""
        pass

    @abstractmethod
    def get_or_create_dish(self, name: str) -> Dish:
        """Find a dish by name, creating it if absent."""
        pass

    @abstractmethod
    def find_item_by_name(self, name: str) -> Optional[Item]:
        """Find an item by name."""
        pass

    @abstractmethod
    def upsert_item(self, item: Item) -> Item:
        """Create or update an item keyed by name."""
        pass

    @abstractmethod
    def upsert_recipe(self, recipe: Recipe) -> None:
        """Create or update a recipe keyed by dish and item."""
        pass

    @abstractmethod
    def upsert_student(self, student: Student) -> Student:
        """Create or update a student keyed by register number, keeping an issued QR code."""
        pass
