"""Tests for DynamoDB key-value store."""

from unittest.mock import MagicMock, patch

import pytest

from src.infrastructure.dynamodb_key_value_store import DynamoDBKeyValueStore


@pytest.fixture
def mock_dynamodb_table():
    """Create a mock DynamoDB table."""
    with patch("src.infrastructure.dynamodb_key_value_store.boto3") as mock_boto3:
        mock_resource = MagicMock()
        mock_table = MagicMock()
        mock_boto3.resource.return_value = mock_resource
        mock_resource.Table.return_value = mock_table
        yield mock_table


@pytest.fixture
def store(mock_dynamodb_table):
    """Create a DynamoDB key-value store instance."""
    return DynamoDBKeyValueStore(table_name="test-sessions", region_name="us-east-1")


class TestDynamoDBKeyValueStore:
    """Test cases for DynamoDBKeyValueStore."""

    def test_init(self, store, mock_dynamodb_table):
        """Test store initialization."""
        assert store.table_name == "test-sessions"
        assert store.table == mock_dynamodb_table

    def test_get_success(self, store, mock_dynamodb_table):
        """Test successful blob retrieval."""
        mock_dynamodb_table.get_item.return_value = {
            "Item": {"key": "current", "value": '{"a": 1}'}
        }

        assert store.get("current") == '{"a": 1}'
        mock_dynamodb_table.get_item.assert_called_once_with(Key={"key": "current"})

    def test_get_not_found(self, store, mock_dynamodb_table):
        """Test missing item scenario."""
        mock_dynamodb_table.get_item.return_value = {}

        assert store.get("current") is None

    def test_put(self, store, mock_dynamodb_table):
        store.put("current", "payload")

        mock_dynamodb_table.put_item.assert_called_once_with(
            Item={"key": "current", "value": "payload"}
        )

    def test_put_propagates_errors(self, store, mock_dynamodb_table):
        """Test that backend errors reach the caller; the persistence adapter handles them."""
        mock_dynamodb_table.put_item.side_effect = Exception("DynamoDB error")

        with pytest.raises(Exception, match="DynamoDB error"):
            store.put("current", "payload")
