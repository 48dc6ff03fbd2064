"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, field_validator, model_validator

ENV_PREFIX = "CHTB_"
DEFAULT_CONFIG_PATH = Path("~/.config/character-table/config.yaml")
DEFAULT_BASE_URL = "https://rickandmortyapi.com/api/character"
DEFAULT_PAGE_SIZE_OPTIONS = (5, 10, 25, 50, 100, 200, 500, 826)

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("api", "base_url"): "base_url",
    ("api", "request_timeout"): "request_timeout",
    ("table", "page_size_options"): "page_size_options",
    ("table", "default_page_size"): "default_page_size",
    ("loader", "on_startup"): "load_on_startup",
    ("loader", "background"): "load_in_background",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    base_url: str = DEFAULT_BASE_URL
    request_timeout: float | None = None
    page_size_options: tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
    default_page_size: int = 5
    load_on_startup: bool = True
    load_in_background: bool = True

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("page_size_options", mode="before")
    @classmethod
    def _split_page_sizes(cls, value: Any) -> Any:
        # Env overrides arrive as "5,10,25".
        if isinstance(value, str):
            return tuple(int(part) for part in value.split(",") if part.strip())
        return value

    @field_validator("request_timeout", mode="before")
    @classmethod
    def _blank_timeout(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_page_sizes(self) -> "Settings":
        if not self.page_size_options or any(size <= 0 for size in self.page_size_options):
            raise ValueError("page_size_options must be positive integers")
        if self.default_page_size not in self.page_size_options:
            raise ValueError("default_page_size must be one of page_size_options")
        return self

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with CHTB_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings", "DEFAULT_BASE_URL", "DEFAULT_PAGE_SIZE_OPTIONS"]
