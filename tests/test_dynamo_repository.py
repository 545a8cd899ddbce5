"""
Tests for DynamoRepository.
"""
from unittest.mock import Mock
import pytest
from botocore.exceptions import ClientError
from src.core import config
from src.core.exceptions import DynamoDBException
from src.models.mess_model import Item, Recipe, Student
from src.repositories.dynamo_repository import DynamoRepository, _build_update_expression


def client_error(code, operation="PutItem"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def repository(dynamodb):
    return DynamoRepository()


class TestDynamoRepository:
    def test_get_or_create_category_creates_once(self, repository, dynamodb):
        first = repository.get_or_create_category("Grains")
        second = repository.get_or_create_category("Grains")

        assert first.id == second.id
        table = dynamodb.Table(config.settings.categories_table_name)
        assert len(table.scan()["Items"]) == 1

    def test_get_or_create_reads_winner_after_lost_race(self, repository):
        table = Mock()
        table.get_item.side_effect = [
            {},
            {"Item": {"id": "winner-id", "name": "Dairy"}}
        ]
        table.put_item.side_effect = client_error("ConditionalCheckFailedException")
        repository.categories_table = table

        category = repository.get_or_create_category("Dairy")

        assert category.id == "winner-id"
        assert table.get_item.call_count == 2

    def test_get_or_create_other_client_error(self, repository):
        table = Mock()
        table.get_item.return_value = {}
        table.put_item.side_effect = client_error("ProvisionedThroughputExceededException")
        repository.dishes_table = table

        with pytest.raises(DynamoDBException) as exc_info:
            repository.get_or_create_dish("Rice")
        assert "Failed to resolve dish 'Rice'" in str(exc_info.value)

    def test_find_vendor_by_name_first_match(self, repository, dynamodb):
        table = dynamodb.Table(config.settings.vendors_table_name)
        table.put_item(Item={"vendor_id": "v-1", "name": "ABC Traders"})
        table.put_item(Item={"vendor_id": "v-2", "name": "Fresh Produce"})

        vendor = repository.find_vendor_by_name("ABC Traders")

        assert vendor.id == "v-1"
        assert repository.find_vendor_by_name("Unknown") is None

    def test_upsert_item_keeps_id_and_overwrites_fields(self, repository):
        created = repository.upsert_item(Item(name="Rice Basmati", category_id="cat-1", sku="RICE001", moq=100))
        updated = repository.upsert_item(Item(name="Rice Basmati", category_id="cat-2", sku="RICE002", moq=50))

        assert created.id
        assert updated.id == created.id
        assert updated.category_id == "cat-2"
        assert updated.sku == "RICE002"
        assert updated.moq == 50

    def test_upsert_recipe_round_trip(self, repository):
        repository.upsert_recipe(Recipe(dish_id="dish-1", item_id="item-1", qty_per_student=0.15))

        recipe = repository.find_recipe("dish-1", "item-1")
        assert recipe.qty_per_student == pytest.approx(0.15)
        assert repository.find_recipe("dish-1", "item-2") is None

    def test_upsert_student_returns_effective_qr_code(self, repository):
        first = repository.upsert_student(Student(register_number="S001", name="Jane", qr_code="QR_S001_aaaaaaaa"))
        second = repository.upsert_student(Student(register_number="S001", name="Janet", qr_code="QR_S001_bbbbbbbb"))

        assert first.qr_code == "QR_S001_aaaaaaaa"
        assert second.qr_code == "QR_S001_aaaaaaaa"
        assert second.name == "Janet"

    def test_find_student_not_found(self, repository):
        assert repository.find_student("missing") is None

    def test_upsert_error_handling(self, repository, dynamodb):
        dynamodb.Table(config.settings.students_table_name).delete()

        with pytest.raises(DynamoDBException):
            repository.upsert_student(Student(register_number="S001", qr_code="QR_S001_aaaaaaaa"))


def test_build_update_expression_guards_create_fields():
    expression, names, values = _build_update_expression({"name": "Jane"}, {"qr_code": "QR_1"})

    assert expression == "SET #name = :name, #qr_code = if_not_exists(#qr_code, :qr_code)"
    assert names == {"#name": "name", "#qr_code": "qr_code"}
    assert values == {":name": "Jane", ":qr_code": "QR_1"}
