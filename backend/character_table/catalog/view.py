"""Filter, sort and paginate derivation over the loaded characters.

Every function here is pure: the input sequence is never mutated and the
same inputs always produce the same window.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from character_table.models.entities import (
    FILTERABLE_FIELDS,
    SORTABLE_FIELDS,
    Character,
    CharacterField,
    field_value,
)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _empty_patterns() -> Mapping[CharacterField, str]:
    return MappingProxyType({name: "" for name in FILTERABLE_FIELDS})


@dataclass(frozen=True, slots=True)
class FilterState:
    patterns: Mapping[CharacterField, str] = field(default_factory=_empty_patterns)

    def pattern(self, name: CharacterField) -> str:
        return self.patterns.get(name, "")

    def with_pattern(self, name: CharacterField, pattern: str) -> "FilterState":
        if name not in FILTERABLE_FIELDS:
            raise ValueError(f"{name.value} is not a filterable field")
        updated = dict(self.patterns)
        updated[name] = pattern
        return FilterState(MappingProxyType(updated))

    def as_dict(self) -> dict[str, str]:
        return {name.value: self.pattern(name) for name in FILTERABLE_FIELDS}


@dataclass(frozen=True, slots=True)
class SortState:
    field: CharacterField = CharacterField.NAME
    direction: SortDirection = SortDirection.ASC

    def toggle(self, name: CharacterField) -> "SortState":
        """Flip direction on the active field, otherwise sort ascending by ``name``."""
        if name not in SORTABLE_FIELDS:
            raise ValueError(f"{name.value} is not a sortable field")
        if name == self.field and self.direction is SortDirection.ASC:
            return SortState(name, SortDirection.DESC)
        return SortState(name, SortDirection.ASC)


@dataclass(frozen=True, slots=True)
class PaginationState:
    page: int = 0
    page_size: int = 5


@dataclass(frozen=True, slots=True)
class TableView:
    rows: tuple[Character, ...]
    count: int


def matches(character: Character, filters: FilterState) -> bool:
    for name in FILTERABLE_FIELDS:
        pattern = filters.pattern(name)
        if not pattern:
            continue
        value = field_value(character, name) or ""
        if pattern.lower() not in value.lower():
            return False
    return True


def filter_records(records: Iterable[Character], filters: FilterState) -> list[Character]:
    return [character for character in records if matches(character, filters)]


def _sort_key(name: CharacterField):
    def key(character: Character) -> tuple[bool, str]:
        value = field_value(character, name)
        # Missing values order before every present value.
        return (value is not None, value or "")

    return key


def sort_records(records: Sequence[Character], sort: SortState) -> list[Character]:
    # sorted() is stable in both directions, so equal keys keep input order.
    return sorted(records, key=_sort_key(sort.field), reverse=sort.direction is SortDirection.DESC)


def paginate(records: Sequence[Character], pagination: PaginationState) -> tuple[Character, ...]:
    start = pagination.page * pagination.page_size
    return tuple(records[start : start + pagination.page_size])


def derive_view(
    records: Sequence[Character],
    filters: FilterState,
    sort: SortState,
    pagination: PaginationState,
) -> TableView:
    """Run the filter, sort and page stages and keep the pre-page count."""
    filtered = filter_records(records, filters)
    ordered = sort_records(filtered, sort)
    return TableView(rows=paginate(ordered, pagination), count=len(filtered))


__all__ = [
    "FilterState",
    "PaginationState",
    "SortDirection",
    "SortState",
    "TableView",
    "derive_view",
    "filter_records",
    "matches",
    "paginate",
    "sort_records",
]
