"""Load engine configuration from a JSON file."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from mark_clipper.core.content_engine.config import ContentEngineConfig
from mark_clipper.core.errors import ConfigError

CONFIG_FILENAME = ".mark-clipper.json"


def load_config(path: str | Path | None = None) -> ContentEngineConfig:
    """Read a ``ContentEngineConfig`` from *path*.

    With no path, looks for ``.mark-clipper.json`` in the working directory.
    A missing file yields the defaults.
    """
    config_path = Path(path) if path is not None else Path.cwd() / CONFIG_FILENAME
    if not config_path.is_file():
        return ContentEngineConfig()

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {config_path}: {exc}") from exc

    try:
        return ContentEngineConfig.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
