"""Pydantic DTOs for the upstream API and the table endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from character_table.models.entities import Character, CharacterField


class CharacterPayload(BaseModel):
    """One entry of an upstream ``results`` array; unknown keys are ignored."""

    id: int
    name: str | None = None
    image: str | None = None
    gender: str | None = None
    species: str | None = None
    status: str | None = None
    type: str | None = None

    def to_entity(self) -> Character:
        return Character(
            id=self.id,
            name=self.name,
            image=self.image,
            gender=self.gender,
            species=self.species,
            status=self.status,
            type=self.type,
        )


class PageInfo(BaseModel):
    next: str | None = None
    count: int | None = None
    pages: int | None = None


class CharacterPage(BaseModel):
    info: PageInfo
    results: list[CharacterPayload]


class CharacterOut(BaseModel):
    id: int
    name: str | None = None
    image: str | None = None
    gender: str | None = None
    species: str | None = None
    status: str | None = None
    type: str | None = None


class SortOut(BaseModel):
    field: CharacterField
    direction: Literal["asc", "desc"]


class ColumnOut(BaseModel):
    id: CharacterField
    label: str
    sortable: bool
    filterable: bool


class TableResponse(BaseModel):
    status: Literal["idle", "loading", "ready", "error"]
    error: str | None = None
    rows: list[CharacterOut]
    count: int
    page: int
    page_size: int
    page_size_options: list[int]
    sort: SortOut
    filters: dict[str, str]


class FilterRequest(BaseModel):
    pattern: str = ""


class SortRequest(BaseModel):
    field: CharacterField


class PageRequest(BaseModel):
    page: int = Field(ge=0)


class PageSizeRequest(BaseModel):
    page_size: int = Field(gt=0)


__all__ = [
    "CharacterPayload",
    "PageInfo",
    "CharacterPage",
    "CharacterOut",
    "SortOut",
    "ColumnOut",
    "TableResponse",
    "FilterRequest",
    "SortRequest",
    "PageRequest",
    "PageSizeRequest",
]
