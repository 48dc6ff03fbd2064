"""Internal dataclasses representing fetched characters and table columns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional


class CharacterField(str, Enum):
    IMAGE = "image"
    NAME = "name"
    GENDER = "gender"
    SPECIES = "species"
    STATUS = "status"
    TYPE = "type"


@dataclass(frozen=True, slots=True)
class Character:
    id: int
    name: str | None = None
    image: str | None = None
    gender: str | None = None
    species: str | None = None
    status: str | None = None
    type: str | None = None


@dataclass(frozen=True, slots=True)
class Column:
    field: CharacterField
    label: str
    sortable: bool
    filterable: bool


FieldGetter = Callable[[Character], Optional[str]]

FIELD_ACCESSORS: Mapping[CharacterField, FieldGetter] = {
    CharacterField.IMAGE: lambda character: character.image,
    CharacterField.NAME: lambda character: character.name,
    CharacterField.GENDER: lambda character: character.gender,
    CharacterField.SPECIES: lambda character: character.species,
    CharacterField.STATUS: lambda character: character.status,
    CharacterField.TYPE: lambda character: character.type,
}

COLUMNS: tuple[Column, ...] = (
    Column(CharacterField.IMAGE, "Image", sortable=False, filterable=False),
    Column(CharacterField.NAME, "Name", sortable=True, filterable=True),
    Column(CharacterField.GENDER, "Gender", sortable=True, filterable=False),
    Column(CharacterField.SPECIES, "Species", sortable=True, filterable=True),
    Column(CharacterField.STATUS, "Status", sortable=True, filterable=True),
    Column(CharacterField.TYPE, "Type", sortable=True, filterable=True),
)

SORTABLE_FIELDS: frozenset[CharacterField] = frozenset(col.field for col in COLUMNS if col.sortable)
FILTERABLE_FIELDS: tuple[CharacterField, ...] = tuple(col.field for col in COLUMNS if col.filterable)


def field_value(character: Character, field: CharacterField) -> str | None:
    """Read one displayed attribute through the accessor table."""
    return FIELD_ACCESSORS[field](character)


__all__ = [
    "Character",
    "CharacterField",
    "Column",
    "COLUMNS",
    "FIELD_ACCESSORS",
    "FILTERABLE_FIELDS",
    "SORTABLE_FIELDS",
    "field_value",
]
