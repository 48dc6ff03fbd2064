"""Table view and user-action routes."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException

from character_table.api.dependencies import get_store
from character_table.catalog import TableState, TableStore, render
from character_table.catalog.state import change_page, change_page_size, request_sort, set_filter
from character_table.models.dto import (
    CharacterOut,
    ColumnOut,
    FilterRequest,
    PageRequest,
    PageSizeRequest,
    SortOut,
    SortRequest,
    TableResponse,
)
from character_table.models.entities import COLUMNS, CharacterField

router = APIRouter()


@router.get("", response_model=TableResponse, summary="Current table window")
async def get_table(store: TableStore = Depends(get_store)) -> TableResponse:
    return _to_response(store.state)


@router.get("/columns", response_model=list[ColumnOut], summary="Header cells")
async def list_columns() -> list[ColumnOut]:
    return [
        ColumnOut(id=col.field, label=col.label, sortable=col.sortable, filterable=col.filterable)
        for col in COLUMNS
    ]


@router.put("/filters/{field}", response_model=TableResponse, summary="Set a column filter")
async def update_filter(
    field: CharacterField,
    request: FilterRequest,
    store: TableStore = Depends(get_store),
) -> TableResponse:
    return _apply(store, set_filter, field, request.pattern)


@router.post("/sort", response_model=TableResponse, summary="Select or toggle the sort column")
async def update_sort(request: SortRequest, store: TableStore = Depends(get_store)) -> TableResponse:
    return _apply(store, request_sort, request.field)


@router.put("/page", response_model=TableResponse, summary="Move to a page")
async def update_page(request: PageRequest, store: TableStore = Depends(get_store)) -> TableResponse:
    return _apply(store, change_page, request.page)


@router.put("/page-size", response_model=TableResponse, summary="Change rows per page")
async def update_page_size(request: PageSizeRequest, store: TableStore = Depends(get_store)) -> TableResponse:
    return _apply(store, change_page_size, request.page_size)


def _apply(store: TableStore, transition: Callable[..., TableState], *args: Any) -> TableResponse:
    try:
        state = store.dispatch(transition, *args)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _to_response(state)


def _to_response(state: TableState) -> TableResponse:
    view = render(state)
    return TableResponse(
        status=state.status,
        error=state.error,
        rows=[_to_character_out(character) for character in view.rows],
        count=view.count,
        page=state.pagination.page,
        page_size=state.pagination.page_size,
        page_size_options=list(state.page_size_options),
        sort=SortOut(field=state.sort.field, direction=state.sort.direction.value),
        filters=state.filters.as_dict(),
    )


def _to_character_out(character) -> CharacterOut:
    return CharacterOut(
        id=character.id,
        name=character.name,
        image=character.image,
        gender=character.gender,
        species=character.species,
        status=character.status,
        type=character.type,
    )


__all__ = ["router"]
