import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from dynamo_fixture.fixture.keys import get_key
from dynamo_fixture.fixture.lifecycle import FixtureLifecycle
from dynamo_fixture.storage.client import DocumentClient, StorageClient

logger = logging.getLogger(__name__)


class TableFixture:
    """
    Test fixture for inserting and removing rows in a single DynamoDB table.

    Items are tracked by ``provision``/``add_data`` and removed again by
    ``cleanup``. ``insert``, ``remove`` and ``get`` talk to the table directly
    and never touch tracking.

    Keys are inferred from attribute names: ``partitionKey``/``sortKey`` for
    composite tables, ``id`` for simple ones. Override ``get_key`` for tables
    keyed on anything else.
    """

    def __init__(
        self,
        conn_config: Mapping[str, Any] | None,
        table_name: str,
        *,
        client_factory: Callable[[Any], StorageClient] = DocumentClient,
    ) -> None:
        self._table_name = table_name
        self._db = client_factory(conn_config)
        self._lifecycle = FixtureLifecycle(insert=self.insert, remove=self.remove)

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def db(self) -> StorageClient:
        return self._db

    @property
    def data(self) -> list[Any]:
        return self._lifecycle.data

    def insert(self, item: Any) -> Any:
        """Create or overwrite the row for ``item``. Returns the storage client's response."""
        logger.debug("dynamo-fixture: put into %s", self._table_name)
        return self._db.put(self._table_name, item)

    def remove(self, key_or_item: Any) -> Any:
        """Delete the row identified by a key or full item. Removing a missing row is not an error."""
        key = self.get_key(key_or_item)
        logger.debug("dynamo-fixture: delete %r from %s", key, self._table_name)
        return self._db.delete(self._table_name, key)

    def get(self, key_or_item: Any) -> Any:
        """Fetch a row. The response has no ``Item`` entry when nothing matches."""
        key = self.get_key(key_or_item)
        logger.debug("dynamo-fixture: get %r from %s", key, self._table_name)
        return self._db.get(self._table_name, key)

    def get_key(self, key_or_item: Any) -> Any:
        return get_key(key_or_item)

    def add_data(self, item: Any) -> int:
        return self._lifecycle.add_data(item)

    def provision(self, items: Sequence[Any]) -> list[Any]:
        return self._lifecycle.provision(items)

    def cleanup(self) -> None:
        self._lifecycle.cleanup()

    def __repr__(self) -> str:
        return f"TableFixture(table_name={self._table_name!r}, tracked={len(self.data)})"
