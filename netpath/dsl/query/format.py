"""Rendering of query results for terminal output."""

from __future__ import annotations

import json
from typing import Any

import yaml

OUTPUT_FORMATS = ("json", "yaml")


def format_query_result(value: Any, output_format: str = "json") -> str:
    """Render a structured value as pretty JSON or block-style YAML.

    Raises:
        ValueError: If ``output_format`` is not supported.
    """
    if output_format == "json":
        return json.dumps(value, indent=2, ensure_ascii=False)
    if output_format == "yaml":
        return yaml.safe_dump(
            value, sort_keys=False, default_flow_style=False, allow_unicode=True
        ).rstrip("\n")
    raise ValueError(
        f"Unknown output format '{output_format}'. Expected one of: {list(OUTPUT_FORMATS)}"
    )
