"""Fetch-all aggregation over the cursor-paginated character endpoint."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Protocol

import requests
from pydantic import ValidationError

from character_table.core.logging import get_logger
from character_table.core.metrics import FETCH_FAILURES, LOAD_DURATION, PAGES_FETCHED
from character_table.models.dto import CharacterPage
from character_table.models.entities import Character

logger = get_logger(__name__)


class FetchFailure(Exception):
    """Any failure that aborts a fetch-all run."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class HttpSession(Protocol):
    def get(self, url: str, **kwargs: Any) -> Any:
        ...


class FetchPhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AggregatorState:
    """One step of the fetch-all state machine.

    ``cursor`` is only set while fetching; ``records`` is only meaningful once
    the run has succeeded.
    """

    phase: FetchPhase = FetchPhase.IDLE
    cursor: str | None = None
    records: tuple[Character, ...] = ()
    pages: int = 0
    error: str | None = None


def start(state: AggregatorState, url: str) -> AggregatorState:
    if state.phase is not FetchPhase.IDLE:
        raise ValueError(f"cannot start from phase {state.phase.value}")
    return AggregatorState(phase=FetchPhase.FETCHING, cursor=url)


def page_received(state: AggregatorState, page: CharacterPage) -> AggregatorState:
    if state.phase is not FetchPhase.FETCHING:
        raise ValueError(f"unexpected page in phase {state.phase.value}")
    records = state.records + tuple(item.to_entity() for item in page.results)
    next_cursor = page.info.next or None
    if next_cursor is None:
        return replace(state, phase=FetchPhase.SUCCEEDED, cursor=None, records=records, pages=state.pages + 1)
    return replace(state, cursor=next_cursor, records=records, pages=state.pages + 1)


def fail(state: AggregatorState, error: str) -> AggregatorState:
    # Partial pages never leave a failed run.
    return AggregatorState(phase=FetchPhase.FAILED, pages=state.pages, error=error)


class CharacterAggregator:
    """Follows ``info.next`` from the base URL until the cursor runs out.

    Pages are requested strictly one after another. There is no page limit;
    ``timeout`` is passed through to the session and defaults to none.
    """

    def __init__(
        self,
        base_url: str,
        session: HttpSession | None = None,
        timeout: float | None = None,
        on_transition: Callable[[AggregatorState], None] | None = None,
    ) -> None:
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout
        self.on_transition = on_transition
        self.state = AggregatorState()

    def run(self) -> tuple[Character, ...]:
        """Fetch every page and return the full collection or raise FetchFailure."""
        started = time.perf_counter()
        self._advance(start(self.state, self.base_url))
        while self.state.phase is FetchPhase.FETCHING:
            url = self.state.cursor
            try:
                page = self._fetch_page(url)
            except FetchFailure as exc:
                self._advance(fail(self.state, str(exc)))
                raise
            PAGES_FETCHED.inc()
            logger.debug(
                "Fetched page",
                extra={"ctx_url": url, "ctx_page": self.state.pages + 1, "ctx_results": len(page.results)},
            )
            self._advance(page_received(self.state, page))
        LOAD_DURATION.observe(time.perf_counter() - started)
        logger.info(
            "Fetched all characters",
            extra={"ctx_pages": self.state.pages, "ctx_records": len(self.state.records)},
        )
        return self.state.records

    def _fetch_page(self, url: str | None) -> CharacterPage:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return CharacterPage.model_validate(response.json())
        except requests.JSONDecodeError as exc:
            FETCH_FAILURES.labels(reason="payload").inc()
            raise FetchFailure(f"Response from {url} is not JSON", url=url) from exc
        except requests.RequestException as exc:
            FETCH_FAILURES.labels(reason="http").inc()
            raise FetchFailure(f"Request to {url} failed: {exc}", url=url) from exc
        except ValidationError as exc:
            FETCH_FAILURES.labels(reason="payload").inc()
            raise FetchFailure(f"Malformed page from {url}", url=url) from exc
        except Exception as exc:  # noqa: BLE001
            # e.g. RecursionError while decoding a deeply nested body.
            FETCH_FAILURES.labels(reason="payload").inc()
            raise FetchFailure(f"Unreadable response from {url}: {exc!r}", url=url) from exc

    def _advance(self, state: AggregatorState) -> None:
        self.state = state
        if self.on_transition is not None:
            self.on_transition(state)


__all__ = [
    "AggregatorState",
    "CharacterAggregator",
    "FetchFailure",
    "FetchPhase",
    "HttpSession",
    "fail",
    "page_received",
    "start",
]
