"""Packaged JSON schemas for node files and network configuration."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict


@lru_cache(maxsize=None)
def load_packaged_schema(name: str) -> Dict[str, Any]:
    """Load ``netpath/schemas/<name>.json``.

    Raises:
        RuntimeError: If the schema file is not packaged.
    """
    try:
        with (
            resources.files("netpath.schemas")
            .joinpath(f"{name}.json")
            .open("r", encoding="utf-8")
        ) as f:
            return json.load(f)
    except FileNotFoundError as exc:  # pragma: no cover
        raise RuntimeError(
            f"Failed to locate packaged schema 'netpath/schemas/{name}.json'."
        ) from exc
