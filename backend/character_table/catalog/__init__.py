"""Character catalog: fetching, table state and view derivation."""

from .fetcher import AggregatorState, CharacterAggregator, FetchFailure, FetchPhase
from .state import TableState, initial_state, render
from .store import CatalogLoader, TableStore
from .view import FilterState, PaginationState, SortDirection, SortState, TableView, derive_view

__all__ = [
    "AggregatorState",
    "CharacterAggregator",
    "FetchFailure",
    "FetchPhase",
    "TableState",
    "initial_state",
    "render",
    "CatalogLoader",
    "TableStore",
    "FilterState",
    "PaginationState",
    "SortDirection",
    "SortState",
    "TableView",
    "derive_view",
]
