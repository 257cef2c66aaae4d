"""
Tagged union for JSON-valued columns.

Rows written by older clients may hold the raw JSON text of a keyword list
or vocabulary payload, newer rows hold the already-decoded structure. Every
reader goes through ``read_json_column`` and gets one of two variants:

- ``RawJson``: text that still needs a parse step.
- ``StructuredJson``: a decoded list/dict (or None).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class RawJson:
    text: str

    def resolve(self) -> Any:
        stripped = self.text.strip()
        if not stripped:
            return None
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            # Legacy rows stored plain comma separated keywords
            return [part.strip() for part in stripped.split(',') if part.strip()]


@dataclass(frozen=True)
class StructuredJson:
    value: Any

    def resolve(self) -> Any:
        return self.value


JsonColumnValue = Union[RawJson, StructuredJson]


def read_json_column(value: Any) -> JsonColumnValue:
    """Wrap a column value in its tagged variant."""
    if isinstance(value, (bytes, bytearray)):
        value = value.decode('utf-8')
    if isinstance(value, str):
        return RawJson(value)
    return StructuredJson(value)


def count_entries(payload: Any) -> int:
    """Count vocabulary entries in an imported or extracted payload.

    Accepts a plain list, ``{"words": [...]}`` (saved extractions) and the
    nested ``{level: {topic: [...]}}`` import format.
    """
    if payload is None:
        return 0
    if isinstance(payload, list):
        return len(payload)
    if isinstance(payload, dict):
        if isinstance(payload.get('words'), list):
            return len(payload['words'])
        total = 0
        for value in payload.values():
            if isinstance(value, (list, dict)):
                total += count_entries(value)
        return total
    return 0
