"""Row-to-document transformation.

Each spreadsheet row becomes one text document listing its non-empty fields,
which is the unit handed to the chunker.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sheetrag.service.cells import Absent, format_cell
from sheetrag.service.spreadsheet import RowRecord

logger = logging.getLogger(__name__)

DOCUMENT_SOURCE = "excel_data"


@dataclass(frozen=True)
class TextDocument:
    """Text describing one spreadsheet row, with row-position metadata.

    Attributes:
        content: "Row <n>:" followed by one "<key> (<type>): <value>" line per field
        metadata: row_index (1-based), total_rows, source_fields, timestamp, source
    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


def row_to_text(row_number: int, row: RowRecord) -> str:
    """Describe a row as text, skipping empty cells.

    Args:
        row_number: 1-based position of the row
        row: The row to describe

    Returns:
        str: The document body
    """
    lines = [f"Row {row_number}:"]
    for key, cell in row.items():
        if isinstance(cell, Absent):
            continue
        lines.append(f"{key} ({cell.tag}): {format_cell(cell)}")
    return "\n".join(lines)


def rows_to_documents(rows: list[RowRecord], timestamp: str | None = None) -> list[TextDocument]:
    """Convert rows into documents, one per row, in row order.

    Args:
        rows: Ingested rows
        timestamp: ISO-8601 ingestion time (default: now, UTC)

    Returns:
        list[TextDocument]: The documents
    """
    if timestamp is None:
        timestamp = datetime.now(timezone.utc).isoformat()

    total_rows = len(rows)
    documents = [
        TextDocument(
            content=row_to_text(index, row),
            metadata={
                "row_index": index,
                "source": DOCUMENT_SOURCE,
                "total_rows": total_rows,
                "source_fields": ", ".join(row.keys()),
                "timestamp": timestamp,
            },
        )
        for index, row in enumerate(rows, start=1)
    ]
    logger.debug(f"Built {len(documents)} documents from {total_rows} rows")
    return documents
