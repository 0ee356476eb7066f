"""DynamoDB implementation of KeyValueStore."""

from typing import Optional

import boto3

from ..domain.interfaces.key_value_store import KeyValueStore


class DynamoDBKeyValueStore(KeyValueStore):
    """DynamoDB implementation of the KeyValueStore protocol.

    Each blob is one item ``{"key": <key>, "value": <document text>}`` in a
    table whose partition key is ``key``.
    """

    def __init__(self, table_name: str, region_name: str = "us-east-1"):
        """Initialize the DynamoDB key-value store.

        Args:
            table_name: The name of the DynamoDB table.
            region_name: AWS region name (default: us-east-1).
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource("dynamodb", region_name=region_name)
        self.table = self.dynamodb.Table(table_name)

    def get(self, key: str) -> Optional[str]:
        """Retrieve a blob by key from DynamoDB.

        Args:
            key: The storage key.

        Returns:
            Optional[str]: The stored document, or None if the item is absent.
        """
        response = self.table.get_item(Key={"key": key})

        if "Item" not in response:
            return None

        return response["Item"]["value"]

    def put(self, key: str, value: str) -> None:
        """Save a blob to DynamoDB.

        Args:
            key: The storage key.
            value: The serialized document.

        Raises:
            Exception: If the put operation fails.
        """
        self.table.put_item(Item={"key": key, "value": value})
