"""Spreadsheet ingestion: first-sheet parsing and column type inference.

Workbooks are read with openpyxl (.xlsx) or xlrd (legacy .xls). The first row
of the first sheet holds the headers; every following non-blank row becomes a
RowRecord whose cells are tagged once, according to the inferred type of their
column.
"""

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

import openpyxl
import xlrd

from sheetrag.constants import (
    EMPTY_CELL_PLACEHOLDER,
    EXCEL_DATE_SERIAL_MAX,
    EXCEL_EPOCH_OFFSET_DAYS,
    SECONDS_PER_DAY,
    SPREADSHEET_MIME_TYPES,
    TYPE_SAMPLE_SIZE,
)
from sheetrag.errors import EmptySpreadsheetError, InvalidSpreadsheetError
from sheetrag.service.cells import (
    ABSENT,
    Absent,
    CellValue,
    ColumnType,
    CurrencyValue,
    DateValue,
    NumberValue,
    TextValue,
)
from sheetrag.service.formatting import format_currency, format_date

logger = logging.getLogger(__name__)

# Header keywords that decide a column type outright. Indonesian stems match
# anywhere in the header, English words only as whole words.
CURRENCY_KEYWORDS = ("harga",)
CURRENCY_WORDS = ("price",)
DATE_KEYWORDS = ("tanggal",)
DATE_WORDS = ("date",)
NUMBER_EXACT_NAMES = ("tinggi", "berat", "height", "weight")
NUMBER_KEYWORDS = ("jumlah",)
NUMBER_WORDS = ("count",)

_HEADER_WORD_SPLIT = re.compile(r"[\W_]+")

# Compound document files (legacy .xls) start with this signature
_OLE_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_NON_NUMERIC = re.compile(r"[^\d.-]")

_DATE_FORMATS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)

RowRecord = dict[str, CellValue]


@dataclass(frozen=True)
class ColumnSpec:
    """A column name and the type inferred for it."""

    name: str
    inferred_type: ColumnType


@dataclass
class SpreadsheetData:
    """Rows and column specs of the first sheet of a workbook."""

    rows: list[RowRecord] = field(default_factory=list)
    columns: list[ColumnSpec] = field(default_factory=list)


# =============================================================================
# Reading
# =============================================================================


def _unique_headers(raw_headers: list[Any]) -> list[str]:
    """Name blank headers __EMPTY, __EMPTY_1, ... and suffix duplicates."""
    headers: list[str] = []
    seen: dict[str, int] = {}
    for raw in raw_headers:
        name = "__EMPTY" if raw is None or str(raw).strip() == "" else str(raw).strip()
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        headers.append(name)
    return headers


def _read_xlsx(content: bytes) -> list[list[Any]]:
    workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _read_xls(content: bytes) -> list[list[Any]]:
    book = xlrd.open_workbook(file_contents=content)
    sheet = book.sheet_by_index(0)
    grid: list[list[Any]] = []

    for row_idx in range(sheet.nrows):
        values: list[Any] = []
        for cell in sheet.row(row_idx):
            if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
                values.append(None)
            elif cell.ctype == xlrd.XL_CELL_DATE:
                values.append(xlrd.xldate_as_datetime(cell.value, book.datemode))
            elif cell.ctype == xlrd.XL_CELL_BOOLEAN:
                values.append(bool(cell.value))
            elif cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
                values.append(int(cell.value))
            else:
                values.append(cell.value)
        grid.append(values)

    return grid


def read_first_sheet(content: bytes) -> tuple[list[str], list[list[Any]]]:
    """Read the header row and data rows of the first sheet.

    Blank rows are skipped, and columns with neither a header nor any value
    are dropped.

    Args:
        content: Raw workbook bytes (.xlsx or .xls)

    Returns:
        Tuple of (headers, rows) where each row is aligned with the headers

    Raises:
        InvalidSpreadsheetError: If the bytes are not a readable workbook
    """
    reader = _read_xls if content.startswith(_OLE_SIGNATURE) else _read_xlsx
    try:
        grid = reader(content)
    except Exception as e:
        logger.warning(f"⚠️ Unreadable workbook: {e}")
        raise InvalidSpreadsheetError("The Excel file could not be read") from e
    grid = [row for row in grid if any(value is not None for value in row)]
    if not grid:
        return [], []

    width = max(len(row) for row in grid)
    grid = [row + [None] * (width - len(row)) for row in grid]
    raw_headers, data_rows = grid[0], grid[1:]

    keep = [
        idx
        for idx in range(width)
        if raw_headers[idx] is not None or any(row[idx] is not None for row in data_rows)
    ]
    headers = _unique_headers([raw_headers[idx] for idx in keep])
    rows = [[row[idx] for idx in keep] for row in data_rows]
    return headers, rows


# =============================================================================
# Type inference
# =============================================================================


def _parse_date_string(text: str) -> datetime | None:
    text = text.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def is_date_value(value: Any) -> bool:
    """Check whether a raw cell looks like a date.

    Date objects, Excel serials between 1970 and 2099, and strings that parse
    as calendar dates all count.
    """
    if isinstance(value, (datetime, date)):
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return EXCEL_EPOCH_OFFSET_DAYS < value < EXCEL_DATE_SERIAL_MAX
    if isinstance(value, str):
        return _parse_date_string(value) is not None
    return False


def is_number_value(value: Any) -> bool:
    """Check whether a raw cell is a number or a string starting with one."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return _LEADING_NUMBER.match(value) is not None
    return False


def _keyword_type(column_name: str) -> ColumnType | None:
    name = column_name.lower()
    words = set(_HEADER_WORD_SPLIT.split(name))

    def matches(keywords: tuple[str, ...], whole_words: tuple[str, ...]) -> bool:
        return any(keyword in name for keyword in keywords) or not words.isdisjoint(whole_words)

    if matches(CURRENCY_KEYWORDS, CURRENCY_WORDS):
        return ColumnType.CURRENCY
    if matches(DATE_KEYWORDS, DATE_WORDS):
        return ColumnType.DATE
    if name in NUMBER_EXACT_NAMES or matches(NUMBER_KEYWORDS, NUMBER_WORDS):
        return ColumnType.NUMBER
    return None


def infer_column_type(column_name: str, values: list[Any]) -> ColumnType:
    """Infer a column's type from its header and a sample of its values.

    Header keywords win outright. Otherwise up to the first 10 non-null values
    are sampled: more than half date-like gives "date", else more than half
    number-like gives "number", else "text".

    Args:
        column_name: The header of the column
        values: Raw values of the column in row order

    Returns:
        ColumnType: The inferred type
    """
    keyword_type = _keyword_type(column_name)
    if keyword_type is not None:
        return keyword_type

    sample = [value for value in values if value is not None][:TYPE_SAMPLE_SIZE]
    if not sample:
        return ColumnType.TEXT

    date_count = 0
    number_count = 0
    for value in sample:
        if is_date_value(value):
            date_count += 1
        elif is_number_value(value):
            number_count += 1

    if date_count / len(sample) > 0.5:
        return ColumnType.DATE
    if number_count / len(sample) > 0.5:
        return ColumnType.NUMBER
    return ColumnType.TEXT


# =============================================================================
# Normalization
# =============================================================================


def serial_to_datetime(serial: float) -> datetime:
    """Convert an Excel date serial to a datetime (25569 is 1970-01-01)."""
    seconds = (serial - EXCEL_EPOCH_OFFSET_DAYS) * SECONDS_PER_DAY
    return datetime(1970, 1, 1) + timedelta(seconds=seconds)


def _to_date(value: Any) -> CellValue:
    if isinstance(value, datetime):
        return DateValue(value)
    if isinstance(value, date):
        return DateValue(datetime(value.year, value.month, value.day))

    serial = value
    if isinstance(value, str):
        try:
            serial = float(value.strip())
        except ValueError:
            return TextValue(value)
    if isinstance(serial, bool) or not isinstance(serial, (int, float)):
        return TextValue(value)

    try:
        return DateValue(serial_to_datetime(serial))
    except (OverflowError, ValueError):
        return TextValue(value)


def _to_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(_NON_NUMERIC.sub("", value))
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    return None


def normalize_value(value: Any, column_type: ColumnType) -> CellValue:
    """Tag a raw cell according to its column's type.

    Conversion failures fall back to the raw value as text instead of raising.
    """
    if value is None:
        return ABSENT

    if column_type == ColumnType.DATE:
        return _to_date(value)

    if column_type in (ColumnType.CURRENCY, ColumnType.NUMBER):
        number = _to_number(value)
        if number is None:
            return TextValue(value)
        if column_type == ColumnType.CURRENCY:
            return CurrencyValue(number)
        return NumberValue(number)

    return TextValue(value)


# =============================================================================
# Public API
# =============================================================================


def load_spreadsheet(content: bytes) -> SpreadsheetData:
    """Parse the first sheet of a workbook into typed rows.

    Args:
        content: Raw workbook bytes

    Returns:
        SpreadsheetData: Rows and column specs, both empty if the sheet has no data rows
    """
    headers, raw_rows = read_first_sheet(content)
    if not raw_rows:
        logger.info("ℹ️ Spreadsheet has no data rows")
        return SpreadsheetData()

    columns = [
        ColumnSpec(name=name, inferred_type=infer_column_type(name, [row[i] for row in raw_rows]))
        for i, name in enumerate(headers)
    ]
    logger.debug(
        "Column types: " + ", ".join(f"{c.name}={c.inferred_type.value}" for c in columns)
    )

    rows = [
        {spec.name: normalize_value(row[i], spec.inferred_type) for i, spec in enumerate(columns)}
        for row in raw_rows
    ]
    logger.info(f"📊 Parsed {len(rows)} rows across {len(columns)} columns")
    return SpreadsheetData(rows=rows, columns=columns)


def validate_upload(mimetype: str | None) -> None:
    """Reject uploads that are not Excel workbooks.

    Raises:
        InvalidSpreadsheetError: If the MIME type is not .xlsx or .xls
    """
    if mimetype not in SPREADSHEET_MIME_TYPES:
        raise InvalidSpreadsheetError("Please upload an Excel file (.xlsx or .xls)")


def parse_upload(content: bytes, mimetype: str | None) -> SpreadsheetData:
    """Validate and parse an uploaded workbook.

    Raises:
        InvalidSpreadsheetError: If the MIME type is not accepted
        EmptySpreadsheetError: If the first sheet holds no data rows
    """
    validate_upload(mimetype)
    data = load_spreadsheet(content)
    if not data.rows:
        raise EmptySpreadsheetError("The Excel file appears to be empty")
    return data


def render_cell(cell: CellValue) -> str:
    """Render a cell for the table view ("-" for empty cells)."""
    if isinstance(cell, Absent):
        return EMPTY_CELL_PLACEHOLDER
    if isinstance(cell, CurrencyValue):
        return format_currency(cell.value)
    if isinstance(cell, DateValue):
        return format_date(cell.value)
    if isinstance(cell, NumberValue):
        return str(cell.value)

    raw = cell.value
    if isinstance(raw, bool):
        return "Yes" if raw else "No"
    if isinstance(raw, (datetime, date)):
        return format_date(raw)
    return str(raw)


def render_rows(rows: list[RowRecord]) -> list[dict[str, str]]:
    """Render every cell of every row for the table view."""
    return [{name: render_cell(cell) for name, cell in row.items()} for row in rows]
