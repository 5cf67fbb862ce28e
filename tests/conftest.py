import boto3
import pytest
from moto import mock_aws

from dynamo_fixture.testing.tables import connection_config, create_composite_table, create_table

REGION = "us-east-1"
SIMPLE_TABLE = "dynamo-fixture-test"
COMPOSITE_TABLE = "orders"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Keep boto3 away from real credentials."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def conn_config():
    return connection_config(region=REGION)


@pytest.fixture
def dynamodb():
    """Provide a mocked DynamoDB resource."""
    with mock_aws():
        yield boto3.resource("dynamodb", region_name=REGION)


@pytest.fixture
def simple_table(dynamodb):
    return create_table(dynamodb, SIMPLE_TABLE)


@pytest.fixture
def composite_table(dynamodb):
    return create_composite_table(dynamodb, COMPOSITE_TABLE)
