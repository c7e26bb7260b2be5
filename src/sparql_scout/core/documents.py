"""Input and output documents.

The input is a JSON document holding an array of portal records, either
at the root or under a well-known key. Some exports are bare object
members (``"openDataPortals": [...]`` without the enclosing braces); those
are accepted too.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Sequence

from pydantic import BaseModel

from sparql_scout.core.exceptions import (
    InputError,
    InputParseError,
    InputShapeError,
    OutputError,
)


RECORD_ARRAY_KEYS: tuple[str, ...] = ("openDataPortals", "portals", "items")
FRAGMENT_PREFIX = '"openDataPortals"'


def parse_document(text: str) -> Any:
    """Parse the input text, tolerating a bare ``"openDataPortals"`` member."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        trimmed = text.strip()
        if trimmed.startswith(FRAGMENT_PREFIX):
            try:
                return json.loads("{" + trimmed + "}")
            except json.JSONDecodeError as inner:
                raise InputParseError(f"Input is not valid JSON: {inner}") from inner
        raise InputParseError(
            "Input is not valid JSON; the root must be an object or an array"
        ) from e


def extract_records(document: Any) -> list[Any]:
    """Locate the record array in a parsed document."""
    if isinstance(document, list):
        return document
    
    if isinstance(document, dict):
        for key in RECORD_ARRAY_KEYS:
            value = document.get(key)
            if isinstance(value, list):
                return value
    
    raise InputShapeError(
        "Input JSON must be an array or an object with an array under "
        "'openDataPortals' (or 'portals'/'items')"
    )


def load_records(path: Path) -> list[Any]:
    """Read and parse the input file, returning its record array."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputError(f"Cannot read input file {path}: {e}") from e
    
    return extract_records(parse_document(text))


def _equals_ignore_case(a: Any, b: Any) -> bool:
    if not isinstance(a, str) or not isinstance(b, str):
        return False
    return a.strip().lower() == b.strip().lower()


def filter_by_country(records: Sequence[Any], country: str | None) -> list[Any]:
    """Keep records whose ``inCountryEn`` matches ``country``."""
    country = (country or "").strip()
    if not country:
        return list(records)
    
    return [
        r for r in records
        if isinstance(r, dict) and _equals_ignore_case(r.get("inCountryEn"), country)
    ]


def write_results(rows: Iterable[Any], path: Path) -> None:
    """Write result rows as a pretty-printed JSON array."""
    payload = [
        row.model_dump(mode="json", by_alias=True) if isinstance(row, BaseModel) else row
        for row in rows
    ]
    
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise OutputError(f"Cannot write results to {path}: {e}") from e
