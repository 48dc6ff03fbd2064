"""Test fixtures for Character Table."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Iterable

import pytest
import requests

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

BASE_URL = "https://example.test/api/character"


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, body_error: bool = False) -> None:
        self.payload = payload
        self.status_code = status_code
        self.body_error = body_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=None)

    def json(self) -> Any:
        if self.body_error:
            raise requests.JSONDecodeError("Expecting value", "<html>", 0)
        return self.payload


class FakeSession:
    """Serves canned responses keyed by URL and records the request order."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.calls: list[str] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def character(
    id: int,
    name: str = "Rick Sanchez",
    species: str = "Human",
    status: str = "Alive",
    type: str = "",
    gender: str = "Male",
) -> dict[str, Any]:
    return {
        "id": id,
        "name": name,
        "status": status,
        "species": species,
        "type": type,
        "gender": gender,
        "image": f"https://example.test/api/character/avatar/{id}.jpeg",
        "origin": {"name": "Earth (C-137)", "url": ""},
        "episode": [],
    }


def paged_responses(pages: Iterable[list[dict[str, Any]]], base_url: str = BASE_URL) -> dict[str, Any]:
    """Chain pages through ``info.next`` the way the upstream API does."""
    pages = list(pages)
    responses: dict[str, Any] = {}
    for index, results in enumerate(pages):
        url = base_url if index == 0 else f"{base_url}?page={index + 1}"
        next_url = f"{base_url}?page={index + 2}" if index + 1 < len(pages) else None
        responses[url] = FakeResponse(
            {"info": {"count": 0, "pages": len(pages), "next": next_url, "prev": None}, "results": results}
        )
    return responses


@pytest.fixture(autouse=True)
def reset_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.delenv("CHTB_CONFIG", raising=False)
    monkeypatch.setenv("CHTB_BASE_URL", BASE_URL)

    from character_table.api import dependencies as deps
    from character_table.core.config import get_settings

    get_settings.cache_clear()
    deps.get_app_settings.cache_clear()
    deps._STORE = None
    deps._LOADER = None
    yield
    get_settings.cache_clear()
    deps.get_app_settings.cache_clear()
    deps._STORE = None
    deps._LOADER = None
