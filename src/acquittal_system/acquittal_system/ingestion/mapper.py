from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from ..common.datetime_utils import coerce_date
from ..records.forms import DATE, NUMBER, FormSchema


@dataclass
class MappingStats:
    """Counts cells that were present but could not be read as numbers."""

    coerced_cells: int = 0


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def coerce_number(value: Any, stats: MappingStats | None = None) -> float:
    """Numeric cell -> float. Blank is 0; anything unreadable is also 0."""

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return 0.0 if math.isnan(number) or math.isinf(number) else number

    text = str(value).strip().replace(",", "")
    if text.startswith("$"):
        text = text[1:]
    if not text:
        return 0.0
    try:
        number = float(text)
    except ValueError:
        if stats is not None:
            stats.coerced_cells += 1
        return 0.0
    return 0.0 if math.isnan(number) or math.isinf(number) else number


def map_row(schema: FormSchema, row: Mapping[str, Any], *, file_name: str, stats: MappingStats | None = None):
    """Build one record from a sheet row by exact header match.

    Missing headers fall back to "" for text, 0 for numbers and None for dates.
    """

    values: dict[str, Any] = {}
    for col in schema.columns:
        raw = row.get(col.header)
        if col.kind == NUMBER:
            values[col.field] = coerce_number(raw, stats)
        elif col.kind == DATE:
            values[col.field] = coerce_date(raw)
        else:
            values[col.field] = coerce_text(raw)
    return schema.record_cls(**values, file_name=file_name)
