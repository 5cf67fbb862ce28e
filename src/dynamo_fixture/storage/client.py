import logging
import threading
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import boto3

logger = logging.getLogger(__name__)


@runtime_checkable
class StorageClient(Protocol):
    """Minimal document-store capability a TableFixture needs. Real clients and test doubles both fit."""

    def put(self, table: str, item: Any) -> Any:
        ...

    def delete(self, table: str, key: Any) -> Any:
        ...

    def get(self, table: str, key: Any) -> Any:
        ...


class DocumentClient:
    """
    StorageClient backed by the boto3 DynamoDB resource.

    ``conn_config`` is passed as-is to ``boto3.resource("dynamodb", ...)`` the
    first time a request is made, so a bad region or endpoint only shows up
    as a botocore error from that request.
    """

    def __init__(self, conn_config: Mapping[str, Any] | None = None) -> None:
        self.conn_config = conn_config
        self._resource = None
        self._lock = threading.Lock()

    @property
    def resource(self):
        with self._lock:
            if self._resource is None:
                logger.debug("dynamo-fixture: creating DynamoDB resource")
                self._resource = boto3.resource("dynamodb", **(self.conn_config or {}))
        return self._resource

    def put(self, table: str, item: Any) -> dict:
        return self.resource.Table(table).put_item(Item=item)

    def delete(self, table: str, key: Any) -> dict:
        return self.resource.Table(table).delete_item(Key=key)

    def get(self, table: str, key: Any) -> dict:
        return self.resource.Table(table).get_item(Key=key)
