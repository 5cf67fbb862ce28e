from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

ID_ATTR = "id"
PARTITION_KEY_ATTR = "partitionKey"
SORT_KEY_ATTR = "sortKey"


@dataclass(frozen=True)
class SimpleKey:
    id: Any

    def as_key(self) -> dict:
        return {ID_ATTR: self.id}


@dataclass(frozen=True)
class CompositeKey:
    partition_key: Any
    sort_key: Any

    def as_key(self) -> dict:
        return {PARTITION_KEY_ATTR: self.partition_key, SORT_KEY_ATTR: self.sort_key}


@dataclass(frozen=True)
class OpaqueKey:
    """Input that matches no known key shape. Assumed to already be a key."""

    value: Any

    def as_key(self) -> Any:
        return self.value


def classify_key(key_or_item: Any) -> SimpleKey | CompositeKey | OpaqueKey:
    """
    Work out which key shape a full item or bare key has.

    A composite pair wins over an ``id`` attribute when both are present.
    Anything that is not a mapping, or a mapping with neither shape, is opaque.
    """
    if isinstance(key_or_item, Mapping):
        if PARTITION_KEY_ATTR in key_or_item and SORT_KEY_ATTR in key_or_item:
            return CompositeKey(
                partition_key=key_or_item[PARTITION_KEY_ATTR],
                sort_key=key_or_item[SORT_KEY_ATTR],
            )
        if ID_ATTR in key_or_item:
            return SimpleKey(id=key_or_item[ID_ATTR])
    return OpaqueKey(value=key_or_item)


def get_key(key_or_item: Any) -> Any:
    """Return only the key attributes of an item, or the input itself if it has no known key shape."""
    return classify_key(key_or_item).as_key()
