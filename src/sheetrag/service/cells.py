"""Typed cell values produced once at spreadsheet ingestion.

Every cell of an ingested sheet is stored as one of five tagged values.
Downstream code (document building, table rendering, persistence) dispatches
on the tag instead of re-inspecting the runtime type of the raw cell.
"""

import json
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar

from sheetrag.service.formatting import format_date, format_number


class ColumnType(str, Enum):
    """Semantic type inferred for a spreadsheet column."""

    DATE = "date"
    CURRENCY = "currency"
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True)
class DateValue:
    """A calendar date (with optional time of day)."""

    value: datetime
    tag: ClassVar[str] = ColumnType.DATE.value


@dataclass(frozen=True)
class CurrencyValue:
    """A monetary amount stored as a plain number."""

    value: int | float
    tag: ClassVar[str] = ColumnType.CURRENCY.value


@dataclass(frozen=True)
class NumberValue:
    """A plain number."""

    value: int | float
    tag: ClassVar[str] = ColumnType.NUMBER.value


@dataclass(frozen=True)
class TextValue:
    """Text, or any raw value that could not be converted to its column type."""

    value: Any
    tag: ClassVar[str] = ColumnType.TEXT.value


@dataclass(frozen=True)
class Absent:
    """An empty cell."""

    tag: ClassVar[str] = "absent"


ABSENT = Absent()

CellValue = DateValue | CurrencyValue | NumberValue | TextValue | Absent


def format_cell(cell: CellValue) -> str:
    """Render a cell for inclusion in a text document.

    Numbers and currency use id-ID numerals, dates use d/m/yyyy, structured
    values are serialized as indented JSON and text is stripped.

    Args:
        cell: The cell to render

    Returns:
        str: The rendered value ("" for an absent cell)
    """
    if isinstance(cell, Absent):
        return ""
    if isinstance(cell, DateValue):
        return format_date(cell.value)
    if isinstance(cell, (CurrencyValue, NumberValue)):
        return format_number(cell.value)

    raw = cell.value
    if isinstance(raw, (dict, list)):
        return json.dumps(raw, indent=2, default=str)
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, float)):
        return format_number(raw)
    if isinstance(raw, (datetime, date)):
        return format_date(raw)
    return str(raw).strip()


def cell_to_json(cell: CellValue) -> dict[str, Any]:
    """Serialize a cell to a JSON-compatible ``{"type", "value"}`` dict.

    Dates held by text cells also get a ``"raw"`` marker so they load back as
    dates.
    """
    if isinstance(cell, Absent):
        return {"type": cell.tag, "value": None}
    if isinstance(cell, DateValue):
        return {"type": cell.tag, "value": cell.value.isoformat()}

    value = cell.value
    if isinstance(value, datetime):
        return {"type": cell.tag, "value": value.isoformat(), "raw": "datetime"}
    if isinstance(value, date):
        return {"type": cell.tag, "value": value.isoformat(), "raw": "date"}
    if not isinstance(value, (str, int, float, bool, dict, list)) and value is not None:
        value = str(value)
    return {"type": cell.tag, "value": value}


def cell_from_json(data: dict[str, Any]) -> CellValue:
    """Rebuild a cell from the dict produced by :func:`cell_to_json`.

    Raises:
        ValueError: If the type tag is unknown
    """
    tag = data.get("type")
    value = data.get("value")

    if tag == Absent.tag:
        return ABSENT
    if tag == DateValue.tag:
        return DateValue(datetime.fromisoformat(value))
    if tag == CurrencyValue.tag:
        return CurrencyValue(value)
    if tag == NumberValue.tag:
        return NumberValue(value)
    if tag == TextValue.tag:
        raw = data.get("raw")
        if raw == "datetime":
            return TextValue(datetime.fromisoformat(value))
        if raw == "date":
            return TextValue(date.fromisoformat(value))
        return TextValue(value)

    raise ValueError(f"Unknown cell type: {tag}")
