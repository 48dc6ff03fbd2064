"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from character_table.catalog import CatalogLoader, CharacterAggregator, TableStore, initial_state
from character_table.core.config import Settings, get_settings

_STORE: TableStore | None = None
_LOADER: CatalogLoader | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_store() -> TableStore:
    global _STORE
    if _STORE is None:
        settings = get_app_settings()
        _STORE = TableStore(
            initial_state(settings.page_size_options, page_size=settings.default_page_size)
        )
    return _STORE


def get_aggregator() -> CharacterAggregator:
    settings = get_app_settings()
    return CharacterAggregator(settings.base_url, timeout=settings.request_timeout)


def get_loader() -> CatalogLoader:
    global _LOADER
    if _LOADER is None:
        _LOADER = CatalogLoader(store=get_store(), aggregator=get_aggregator())
    return _LOADER


__all__ = [
    "get_app_settings",
    "get_aggregator",
    "get_loader",
    "get_store",
]
