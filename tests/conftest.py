"""
Shared test fixtures and utilities.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from concurrent.futures import Executor, Future
from datetime import datetime, timedelta

import boto3
import jwt
import pytest
from moto import mock_aws

from src.core import config


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def create_tables(dynamodb):
    """Create every table the service uses with the configured names."""
    settings = config.settings
    simple_tables = [
        (settings.upload_records_table_name, "upload_id"),
        (settings.categories_table_name, "name"),
        (settings.dishes_table_name, "name"),
        (settings.items_table_name, "name"),
        (settings.students_table_name, "register_number"),
    ]
    for table_name, key in simple_tables:
        dynamodb.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": key, "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST"
        )

    dynamodb.create_table(
        TableName=settings.recipes_table_name,
        KeySchema=[
            {"AttributeName": "dish_id", "KeyType": "HASH"},
            {"AttributeName": "item_id", "KeyType": "RANGE"}
        ],
        AttributeDefinitions=[
            {"AttributeName": "dish_id", "AttributeType": "S"},
            {"AttributeName": "item_id", "AttributeType": "S"}
        ],
        BillingMode="PAY_PER_REQUEST"
    )

    dynamodb.create_table(
        TableName=settings.vendors_table_name,
        KeySchema=[{"AttributeName": "vendor_id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "vendor_id", "AttributeType": "S"},
            {"AttributeName": "name", "AttributeType": "S"}
        ],
        GlobalSecondaryIndexes=[{
            "IndexName": "NameIndex",
            "KeySchema": [{"AttributeName": "name", "KeyType": "HASH"}],
            "Projection": {"ProjectionType": "ALL"}
        }],
        BillingMode="PAY_PER_REQUEST"
    )


@pytest.fixture
def dynamodb():
    """Mocked DynamoDB with all service tables created."""
    with mock_aws():
        resource = boto3.resource("dynamodb", region_name=config.settings.aws_region)
        create_tables(resource)
        yield resource


@pytest.fixture
def inline_executor():
    return InlineExecutor()


@pytest.fixture
def make_token():
    """Build signed access tokens for a role."""
    def _make_token(role="ADMIN", sub="user-1", name="Test Admin", expires_in=timedelta(hours=1)):
        payload = {
            "sub": sub,
            "name": name,
            "role": role,
            "exp": datetime.utcnow() + expires_in,
            "iat": datetime.utcnow()
        }
        return jwt.encode(payload, config.settings.jwt_secret, algorithm=config.settings.jwt_algorithm)
    return _make_token


@pytest.fixture
def auth_headers(make_token):
    """Authorization headers for an ADMIN caller."""
    return {"Authorization": f"Bearer {make_token()}"}
