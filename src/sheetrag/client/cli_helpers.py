"""Helper functions for CLI commands."""

import mimetypes
from pathlib import Path

import click

from sheetrag.constants import CONTENT_PREVIEW_LENGTH
from sheetrag.service.sessions import DocumentRepository, DocumentSession, JsonSessionStore
from sheetrag.service.spreadsheet import render_rows

# Some platforms do not register the legacy .xls type
_EXTENSION_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}


def open_repository(session_file: Path | None = None) -> DocumentRepository:
    """Open the document repository backed by the session file.

    Args:
        session_file: JSON file location (default: SHEETRAG_SESSION_FILE env or
                      ~/.sheetrag/sessions.json)
    """
    return DocumentRepository(JsonSessionStore(session_file))


def guess_mimetype(path: Path) -> str | None:
    """Guess the MIME type of a file from its extension."""
    mimetype, _ = mimetypes.guess_type(path.name)
    return mimetype or _EXTENSION_TYPES.get(path.suffix.lower())


def require_document(repository: DocumentRepository, document_id: str) -> DocumentSession:
    """Look up a document, aborting with an error message if it is missing.

    Raises:
        click.Abort: If no document has this id
    """
    session = repository.get(document_id)
    if session is None:
        click.echo(f"✗ Document not found: {document_id}", err=True)
        raise click.Abort()
    return session


def format_document_summary(index: int, session: DocumentSession) -> str:
    """Format a document for the documents listing.

    Args:
        index: Position in the listing (1-based)
        session: The document

    Returns:
        Formatted string for display
    """
    columns = ", ".join(
        f"{column.name} ({column.inferred_type.value})" for column in session.columns
    )
    if len(columns) > CONTENT_PREVIEW_LENGTH:
        columns = columns[:CONTENT_PREVIEW_LENGTH] + "..."

    lines = [
        f"{index}. {session.name} [{session.id}]",
        f"   {session.total_rows} rows, uploaded {session.timestamp}",
        f"   Provider: {session.parameters.provider}",
        f"   Columns: {columns}",
        "",
    ]
    return "\n".join(lines)


def format_table(session: DocumentSession, limit: int | None = None) -> str:
    """Render a document's rows as a plain-text table.

    Args:
        session: The document
        limit: Maximum number of rows to show (default: all)

    Returns:
        The table, one line per row, preceded by a "#" row-number column
    """
    headers = ["#"] + [column.name for column in session.columns]
    rendered = render_rows(session.rows[:limit] if limit else session.rows)
    body = [
        [str(number)] + [row.get(name, "-") for name in headers[1:]]
        for number, row in enumerate(rendered, start=1)
    ]

    widths = [
        max(len(headers[i]), *(len(line[i]) for line in body)) if body else len(headers[i])
        for i in range(len(headers))
    ]

    def format_line(cells: list[str]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    lines = [format_line(headers), "-+-".join("-" * width for width in widths)]
    lines.extend(format_line(line) for line in body)
    return "\n".join(lines)
