"""Holder for the current table snapshot and the one-shot catalog loader."""

from __future__ import annotations

import threading
from typing import Any, Callable

from character_table.catalog.fetcher import CharacterAggregator, FetchFailure
from character_table.catalog.state import (
    FETCH_ERROR_MESSAGE,
    TableState,
    initial_state,
    load_failed,
    load_started,
    load_succeeded,
)
from character_table.core.logging import get_logger
from character_table.core.metrics import RECORDS_LOADED

logger = get_logger(__name__)

Listener = Callable[[TableState], None]


class TableStore:
    """Applies transitions to the snapshot one at a time."""

    def __init__(self, state: TableState | None = None) -> None:
        self._state = state or initial_state()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> TableState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, transition: Callable[..., TableState], *args: Any) -> TableState:
        """Replace the snapshot with ``transition(state, *args)`` and notify listeners."""
        # Listeners run under the lock so they observe snapshots in dispatch order.
        with self._lock:
            new_state = transition(self._state, *args)
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return new_state


class CatalogLoader:
    """Runs the aggregator exactly once and records the outcome in the store."""

    def __init__(self, store: TableStore, aggregator: CharacterAggregator) -> None:
        self.store = store
        self.aggregator = aggregator
        self._started = False
        self._start_lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def started(self) -> bool:
        return self._started

    def run(self) -> TableState:
        with self._start_lock:
            if self._started:
                logger.warning("Catalog load already triggered; ignoring")
                return self.store.state
            self._started = True
        self.store.dispatch(load_started)
        try:
            records = self.aggregator.run()
        except FetchFailure as exc:
            logger.error("Error fetching data", exc_info=exc, extra={"ctx_url": exc.url})
            return self.store.dispatch(load_failed, FETCH_ERROR_MESSAGE)
        except Exception:  # noqa: BLE001
            # The loading flag must never outlive the run.
            logger.exception("Unexpected error while loading characters")
            return self.store.dispatch(load_failed, FETCH_ERROR_MESSAGE)
        RECORDS_LOADED.set(len(records))
        return self.store.dispatch(load_succeeded, records)

    def start_background(self) -> threading.Thread:
        """Run the load on a daemon thread; the store reports ``loading`` meanwhile."""
        thread = threading.Thread(target=self.run, name="catalog-loader", daemon=True)
        self._thread = thread
        thread.start()
        return thread

    def wait(self, timeout: float | None = None) -> bool:
        """Join the background load; True once it has finished."""
        if self._thread is None:
            return self._started
        self._thread.join(timeout)
        return not self._thread.is_alive()


__all__ = ["CatalogLoader", "TableStore"]
