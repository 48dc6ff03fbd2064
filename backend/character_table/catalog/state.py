"""Immutable table snapshot and its transitions."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Sequence

from character_table.catalog.view import (
    FilterState,
    PaginationState,
    SortState,
    TableView,
    derive_view,
)
from character_table.core.config import DEFAULT_PAGE_SIZE_OPTIONS
from character_table.models.entities import Character, CharacterField

FETCH_ERROR_MESSAGE = "Error fetching data. Please try again later."


@dataclass(frozen=True, slots=True)
class TableState:
    records: tuple[Character, ...] = ()
    filters: FilterState = field(default_factory=FilterState)
    sort: SortState = field(default_factory=SortState)
    pagination: PaginationState = field(default_factory=PaginationState)
    page_size_options: tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
    loaded: bool = False
    loading: bool = False
    error: str | None = None

    @property
    def status(self) -> str:
        if self.loading:
            return "loading"
        if self.error is not None:
            return "error"
        return "ready" if self.loaded else "idle"


def initial_state(
    page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
    page_size: int | None = None,
) -> TableState:
    options = tuple(page_size_options)
    size = options[0] if page_size is None else page_size
    if size not in options:
        raise ValueError(f"page size {size} is not one of {options}")
    return TableState(pagination=PaginationState(page=0, page_size=size), page_size_options=options)


def set_filter(state: TableState, name: CharacterField, pattern: str) -> TableState:
    return replace(
        state,
        filters=state.filters.with_pattern(name, pattern),
        pagination=replace(state.pagination, page=0),
    )


def request_sort(state: TableState, name: CharacterField) -> TableState:
    # Page index is kept on purpose: only filter and page size reset it.
    return replace(state, sort=state.sort.toggle(name))


def change_page(state: TableState, page: int) -> TableState:
    if page < 0:
        raise ValueError("page index must be >= 0")
    return replace(state, pagination=replace(state.pagination, page=page))


def change_page_size(state: TableState, page_size: int) -> TableState:
    if page_size not in state.page_size_options:
        raise ValueError(f"page size {page_size} is not one of {state.page_size_options}")
    return replace(state, pagination=PaginationState(page=0, page_size=page_size))


def load_started(state: TableState) -> TableState:
    return replace(state, loading=True, error=None)


def load_succeeded(state: TableState, records: Sequence[Character]) -> TableState:
    return replace(state, records=tuple(records), loaded=True, loading=False, error=None)


def load_failed(state: TableState, message: str = FETCH_ERROR_MESSAGE) -> TableState:
    return replace(state, records=(), loaded=False, loading=False, error=message)


def render(state: TableState) -> TableView:
    """Window to display; empty while loading or after a failed load."""
    if state.loading or state.error is not None:
        return TableView(rows=(), count=0)
    return derive_view(state.records, state.filters, state.sort, state.pagination)


__all__ = [
    "FETCH_ERROR_MESSAGE",
    "TableState",
    "change_page",
    "change_page_size",
    "initial_state",
    "load_failed",
    "load_started",
    "load_succeeded",
    "render",
    "request_sort",
    "set_filter",
]
