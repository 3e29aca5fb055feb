"""General-purpose helpers shared by the materialisation and CLI modules."""

from __future__ import annotations

import json
from pathlib import Path

from .logging import get_logger

_LOGGER = get_logger(module=__name__)


def ensure_directory(path: Path | str) -> Path:
    """Ensure that a directory exists and return the resolved Path."""

    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()


def serialize_json(
    data: object,
    destination: Path | str,
    *,
    indent: int = 2,
    sort_keys: bool = True,
) -> Path:
    """Serialize data to JSON, by default with deterministic key ordering."""

    dest_path = Path(destination)
    ensure_directory(dest_path.parent)
    dest_path.write_text(
        json.dumps(data, indent=indent, sort_keys=sort_keys, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    _LOGGER.debug("Serialized JSON", path=str(dest_path), size=dest_path.stat().st_size)
    return dest_path


__all__ = ["ensure_directory", "serialize_json"]
