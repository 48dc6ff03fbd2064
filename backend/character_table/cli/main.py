"""CLI entrypoint for Character Table."""

from __future__ import annotations

import json
import os
from typing import Optional

import requests
import typer

from character_table.catalog import CharacterAggregator, FetchFailure, derive_view
from character_table.catalog.view import FilterState, PaginationState, SortDirection, SortState
from character_table.core.config import get_settings
from character_table.models.entities import CharacterField

app = typer.Typer(name="chtb", help="Character Table command-line interface")

DEFAULT_HOST = "http://127.0.0.1:8000"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    env_host = os.environ.get("CHTB_HOST")
    if env_host:
        return env_host.rstrip('/')
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    resp = requests.request(method, url, timeout=60, **kwargs)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _character_dict(character) -> dict[str, object]:
    return {
        "id": character.id,
        "name": character.name,
        "image": character.image,
        "gender": character.gender,
        "species": character.species,
        "status": character.status,
        "type": character.type,
    }


@app.command()
def show(
    name: str = typer.Option("", "--name", help="Name filter"),
    species: str = typer.Option("", "--species", help="Species filter"),
    status: str = typer.Option("", "--status", help="Status filter"),
    type_: str = typer.Option("", "--type", help="Type filter"),
    sort: CharacterField = typer.Option(CharacterField.NAME, "--sort", help="Sort column"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    page: int = typer.Option(0, "--page", min=0, help="Zero-based page index"),
    page_size: Optional[int] = typer.Option(None, "--page-size", help="Rows per page"),
    url: Optional[str] = typer.Option(None, "--url", help="Override the character endpoint"),
) -> None:
    """Fetch every character and print one window of the table."""
    settings = get_settings()
    size = settings.default_page_size if page_size is None else page_size
    if size not in settings.page_size_options:
        typer.echo(f"Page size must be one of {list(settings.page_size_options)}", err=True)
        raise typer.Exit(code=1)
    if sort is CharacterField.IMAGE:
        typer.echo("Image column is not sortable", err=True)
        raise typer.Exit(code=1)

    aggregator = CharacterAggregator(url or settings.base_url, timeout=settings.request_timeout)
    try:
        records = aggregator.run()
    except FetchFailure as exc:
        typer.echo(f"Error fetching data: {exc}", err=True)
        raise typer.Exit(code=1)

    filters = FilterState()
    for field, pattern in (
        (CharacterField.NAME, name),
        (CharacterField.SPECIES, species),
        (CharacterField.STATUS, status),
        (CharacterField.TYPE, type_),
    ):
        filters = filters.with_pattern(field, pattern)
    direction = SortDirection.DESC if desc else SortDirection.ASC
    view = derive_view(records, filters, SortState(sort, direction), PaginationState(page, size))
    payload = {
        "count": view.count,
        "page": page,
        "page_size": size,
        "rows": [_character_dict(character) for character in view.rows],
    }
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def table(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Print the current window of a running service."""
    resp = _request("GET", "/table", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def columns(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """List the header cells."""
    resp = _request("GET", "/table/columns", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command("filter")
def filter_(
    field: CharacterField = typer.Argument(..., help="Column to filter"),
    pattern: str = typer.Argument("", help="Substring to match; empty clears"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Set a column filter."""
    resp = _request("PUT", f"/table/filters/{field.value}", host=host, json={"pattern": pattern})
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command("sort")
def sort_(
    field: CharacterField = typer.Argument(..., help="Column to sort by"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Select a sort column, or flip direction if it is already active."""
    resp = _request("POST", "/table/sort", host=host, json={"field": field.value})
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command("page")
def page_(
    index: int = typer.Argument(..., min=0, help="Zero-based page index"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Move to a page."""
    resp = _request("PUT", "/table/page", host=host, json={"page": index})
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command("page-size")
def page_size_(
    size: int = typer.Argument(..., help="Rows per page"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Change rows per page."""
    resp = _request("PUT", "/table/page-size", host=host, json={"page_size": size})
    typer.echo(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    app()
