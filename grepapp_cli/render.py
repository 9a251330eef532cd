"""Output helpers for CLI rendering."""

from __future__ import annotations

import json
import sys
from typing import TextIO

from .grepapp import MARK_BEGIN, RESET, SerializationError
from .types import Hit, ResultSet


def serialize_results(results: ResultSet, *, monochrome: bool = False) -> dict:
    return {"hits": [_hit_to_dict(hit, monochrome) for hit in results]}


def write_results(
    results: ResultSet,
    *,
    monochrome: bool = False,
    stream: TextIO = sys.stdout,
) -> None:
    """Encode the whole result set first, then write it in one go."""
    try:
        document = json.dumps(
            serialize_results(results, monochrome=monochrome),
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Could not encode results: {exc}") from exc
    stream.write(document)
    stream.write("\n")


def _hit_to_dict(hit: Hit, monochrome: bool) -> dict:
    lines = hit.lines
    if monochrome:
        # lines that differ only in highlighting collapse into one entry
        lines = {_strip_colors(key): _strip_colors(text) for key, text in lines.items()}
    return {
        "repo": hit.repo,
        "path": hit.path,
        "lines": {key: lines[key] for key in sorted(lines)},
    }


def _strip_colors(text: str) -> str:
    return text.replace(RESET, "").replace(MARK_BEGIN, "")
