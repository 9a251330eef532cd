"""Configuration helpers for grepapp-cli."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .grepapp import DEFAULT_BASE_URL, ConfigurationError
from .search import DEFAULT_DELAY, DEFAULT_PAGE_CAP

CONFIG_ENV_VAR = "GREPAPP_CONFIG"
DEFAULT_CONFIG_PATH = Path(
    os.environ.get(CONFIG_ENV_VAR, "~/.config/grepapp/config.json")
).expanduser()

ENV_VARS = {
    "base_url": "GREPAPP_BASE_URL",
    "page_cap": "GREPAPP_PAGE_CAP",
    "delay": "GREPAPP_DELAY",
    "timeout": "GREPAPP_TIMEOUT",
}


@dataclass(slots=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    page_cap: int = DEFAULT_PAGE_CAP
    delay: float = DEFAULT_DELAY
    timeout: Optional[float] = None
    user_agent: str = "grepapp-cli/0.1"


def _read_config(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file at {path} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file at {path} must contain a JSON object")
    return data


def _coerce(name: str, value: object, convert: Callable[[object], object]) -> object:
    try:
        return convert(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from exc


def resolve_settings(
    *,
    base_url: Optional[str] = None,
    page_cap: Optional[int] = None,
    delay: Optional[float] = None,
    timeout: Optional[float] = None,
    config_path: Optional[Path] = None,
) -> Settings:
    """Return settings from explicit values, env vars, the config file, then defaults."""
    explicit = {
        "base_url": base_url,
        "page_cap": page_cap,
        "delay": delay,
        "timeout": timeout,
    }
    file_values = _read_config(config_path or DEFAULT_CONFIG_PATH)
    converters = {"base_url": str, "page_cap": int, "delay": float, "timeout": float}

    settings = Settings()
    for name, convert in converters.items():
        value = explicit[name]
        if value is None:
            value = os.getenv(ENV_VARS[name], "").strip() or None
        if value is None:
            value = file_values.get(name)
        if value is None:
            continue
        setattr(settings, name, _coerce(name, value, convert))

    if settings.page_cap < 1:
        raise ConfigurationError(f"page_cap must be at least 1, got {settings.page_cap}")
    if settings.delay < 0:
        raise ConfigurationError(f"delay cannot be negative, got {settings.delay}")
    return settings
