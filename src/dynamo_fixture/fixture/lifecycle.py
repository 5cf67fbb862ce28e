import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Fixture(Protocol):
    """Capability contract for anything that provisions test data and removes it afterwards."""

    @property
    def data(self) -> list[Any]:
        ...

    def add_data(self, item: Any) -> int:
        ...

    def provision(self, items: Sequence[Any]) -> list[Any]:
        ...

    def cleanup(self) -> None:
        ...


class FixtureLifecycle:
    """Tracks provisioned items so they can all be removed in one cleanup call."""

    def __init__(
        self,
        insert: Callable[[Any], Any],
        remove: Callable[[Any], Any],
        *,
        max_workers: int = 10,
    ) -> None:
        self._insert = insert
        self._remove = remove
        self.max_workers = max_workers
        self._data: list[Any] = []
        self._lock = threading.Lock()

    @property
    def data(self) -> list[Any]:
        with self._lock:
            return self._data[:]

    def add_data(self, item: Any) -> int:
        with self._lock:
            self._data.append(item)
            return len(self._data)

    def provision(self, items: Sequence[Any]) -> list[Any]:
        """Insert every item in parallel, then track them all. Nothing is tracked if any insert fails."""
        items = list(items)
        if not items:
            return []

        results = self._run_all(self._insert, items, "insert")
        with self._lock:
            self._data.extend(items)
        logger.debug("dynamo-fixture: provisioned %d item(s)", len(items))
        return results

    def cleanup(self) -> None:
        """Remove every tracked item in parallel. Tracking is cleared only if all removals succeed."""
        with self._lock:
            tracked = self._data[:]
        if tracked:
            self._run_all(self._remove, tracked, "remove")

        with self._lock:
            # Items tracked while removal was in flight stay tracked
            del self._data[:len(tracked)]
        logger.debug("dynamo-fixture: cleaned up %d item(s)", len(tracked))

    def _run_all(self, fn: Callable[[Any], Any], items: list[Any], action: str) -> list[Any]:
        with ThreadPoolExecutor(max_workers=min(len(items), self.max_workers)) as executor:
            futures: list[Future] = [executor.submit(fn, item) for item in items]

        # The executor has joined, so every future is settled here
        failures = [future.exception() for future in futures if future.exception() is not None]
        if failures:
            logger.warning(
                "dynamo-fixture: %d of %d %s operation(s) failed",
                len(failures), len(items), action,
                exc_info=failures[0],
            )
            raise failures[0]
        return [future.result() for future in futures]


@contextmanager
def provisioned(fixture: Fixture, items: Sequence[Any]) -> Iterator[list[Any]]:
    """Provision ``items`` for the duration of a ``with`` block, cleaning up on the way out."""
    results = fixture.provision(items)
    try:
        yield results
    finally:
        fixture.cleanup()
