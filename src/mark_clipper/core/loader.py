"""Clip loader: reads clip records from JSON files."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from mark_clipper.core.errors import ContentEngineError
from mark_clipper.core.models import Clip


def load_clips(path: str | Path) -> list[Clip]:
    """Load one clip (JSON object) or many (JSON array) from *path*.

    Raises ContentEngineError if the file is missing, not JSON, or holds
    records that do not fit the clip shape.
    """
    file_path = Path(path)
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ContentEngineError(f"Cannot read {file_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ContentEngineError(f"{file_path} is not valid JSON: {exc}") from exc

    records = data if isinstance(data, list) else [data]
    try:
        return [Clip.model_validate(r) for r in records]
    except ValidationError as exc:
        raise ContentEngineError(f"Invalid clip record in {file_path}: {exc}") from exc
