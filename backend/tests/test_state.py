"""Tests for table snapshot transitions and the store/loader pair."""

from __future__ import annotations

import threading

import pytest

from character_table.catalog import CatalogLoader, CharacterAggregator, TableStore
from character_table.catalog.state import (
    FETCH_ERROR_MESSAGE,
    change_page,
    change_page_size,
    initial_state,
    load_failed,
    load_started,
    load_succeeded,
    render,
    request_sort,
    set_filter,
)
from character_table.models.entities import Character, CharacterField
from conftest import BASE_URL, FakeResponse, FakeSession, character, paged_responses


def _loaded(count: int = 12):
    records = [Character(id=i, name=f"name-{i:02d}", species="Human", status="Alive") for i in range(count)]
    return load_succeeded(load_started(initial_state()), records)


def test_initial_state_defaults() -> None:
    state = initial_state()

    assert state.status == "idle"
    assert state.sort.field is CharacterField.NAME
    assert state.pagination.page == 0
    assert state.pagination.page_size == 5
    assert state.filters.as_dict() == {"name": "", "species": "", "status": "", "type": ""}


def test_changing_filter_resets_page() -> None:
    state = change_page(_loaded(), 2)

    state = set_filter(state, CharacterField.NAME, "name-1")

    assert state.pagination.page == 0
    assert [r.id for r in render(state).rows] == [10, 11]


def test_changing_page_size_resets_page() -> None:
    state = change_page_size(change_page(_loaded(), 2), 10)

    assert state.pagination.page == 0
    assert state.pagination.page_size == 10


def test_sort_keeps_page() -> None:
    state = request_sort(change_page(_loaded(), 1), CharacterField.NAME)

    assert state.pagination.page == 1
    assert [r.id for r in render(state).rows] == [6, 5, 4, 3, 2]


def test_invalid_page_and_page_size_are_rejected() -> None:
    with pytest.raises(ValueError):
        change_page(_loaded(), -1)
    with pytest.raises(ValueError):
        change_page_size(_loaded(), 7)


def test_transitions_do_not_touch_records() -> None:
    state = _loaded()
    records = state.records

    set_filter(state, CharacterField.SPECIES, "alien")
    request_sort(state, CharacterField.STATUS)

    assert state.records is records
    assert len(records) == 12


def test_render_is_empty_while_loading_or_failed() -> None:
    assert render(load_started(_loaded())).rows == ()
    failed = load_failed(_loaded())
    assert failed.status == "error"
    assert failed.error == FETCH_ERROR_MESSAGE
    assert render(failed).count == 0


def test_loader_flips_loading_once_per_run() -> None:
    store = TableStore()
    flags: list[bool] = []
    store.subscribe(lambda state: flags.append(state.loading))
    session = FakeSession(paged_responses([[character(1), character(2)], [character(3), character(4)]]))
    loader = CatalogLoader(store, CharacterAggregator(BASE_URL, session=session))

    state = loader.run()

    assert flags == [True, False]
    assert state.status == "ready"
    assert len(state.records) == 4


def test_loader_failure_on_middle_page_shows_error() -> None:
    responses = paged_responses([[character(1)], [character(2)], [character(3)]])
    responses[f"{BASE_URL}?page=2"] = FakeResponse(status_code=502)
    store = TableStore()
    loader = CatalogLoader(store, CharacterAggregator(BASE_URL, session=FakeSession(responses)))

    state = loader.run()

    assert state.status == "error"
    assert state.error == FETCH_ERROR_MESSAGE
    assert state.records == ()
    assert not state.loading


def test_loader_runs_only_once() -> None:
    session = FakeSession(paged_responses([[character(1)]]))
    loader = CatalogLoader(TableStore(), CharacterAggregator(BASE_URL, session=session))

    loader.run()
    loader.run()

    assert session.calls == [BASE_URL]


def test_background_load_finishes() -> None:
    store = TableStore()
    session = FakeSession(paged_responses([[character(1)], [character(2)]]))
    loader = CatalogLoader(store, CharacterAggregator(BASE_URL, session=session))

    loader.start_background()

    assert loader.wait(timeout=5)
    assert store.state.status == "ready"


def test_user_action_during_load_survives_completion() -> None:
    store = TableStore()
    store.dispatch(load_started)
    store.dispatch(set_filter, CharacterField.NAME, "rick")

    state = store.dispatch(load_succeeded, [Character(id=1, name="Rick"), Character(id=2, name="Morty")])

    assert state.filters.pattern(CharacterField.NAME) == "rick"
    assert [r.id for r in render(state).rows] == [1]


class _NestedBodyResponse(FakeResponse):
    def json(self):
        raise RecursionError("maximum recursion depth exceeded while decoding a JSON array")


def test_unexpected_decode_error_ends_in_error_state() -> None:
    store = TableStore()
    session = FakeSession({BASE_URL: _NestedBodyResponse()})
    loader = CatalogLoader(store, CharacterAggregator(BASE_URL, session=session))

    state = loader.run()

    assert state.status == "error"
    assert state.error == FETCH_ERROR_MESSAGE
    assert state.loading is False


def test_unexpected_decode_error_in_background_load() -> None:
    store = TableStore()
    session = FakeSession({BASE_URL: _NestedBodyResponse()})
    loader = CatalogLoader(store, CharacterAggregator(BASE_URL, session=session))

    loader.start_background()

    assert loader.wait(timeout=5)
    assert store.state.status == "error"


def test_aggregator_crash_still_clears_loading() -> None:
    class _BrokenAggregator:
        def run(self):
            raise RuntimeError("boom")

    store = TableStore()
    flags: list[bool] = []
    store.subscribe(lambda state: flags.append(state.loading))

    state = CatalogLoader(store, _BrokenAggregator()).run()

    assert flags == [True, False]
    assert state.status == "error"


def test_listeners_see_snapshots_in_dispatch_order() -> None:
    store = TableStore()
    seen: list = []
    store.subscribe(seen.append)

    def worker(offset: int) -> None:
        for page in range(50):
            store.dispatch(change_page, offset * 100 + page)

    threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 400
    assert seen[-1] is store.state
