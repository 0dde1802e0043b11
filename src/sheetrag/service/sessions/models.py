"""Data models for persisted document sessions."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sheetrag.llm.parameters import ModelParameters, resolve_parameters
from sheetrag.service.cells import ColumnType, cell_from_json, cell_to_json
from sheetrag.service.spreadsheet import ColumnSpec, RowRecord, SpreadsheetData


@dataclass
class DocumentSession:
    """An uploaded spreadsheet together with the settings used to question it.

    The vector store is not part of the session; it is rebuilt from the rows
    on every question.

    Attributes:
        id: Unique session identifier
        name: Original filename of the upload
        rows: Typed rows of the first sheet
        columns: Inferred column specs, one per column
        timestamp: ISO-8601 upload time
        embedding_model: Embedding model chosen at upload
        parameters: Provider family and sampling parameters
    """

    id: str
    name: str
    rows: list[RowRecord] = field(default_factory=list)
    columns: list[ColumnSpec] = field(default_factory=list)
    timestamp: str = ""
    embedding_model: str | None = None
    parameters: ModelParameters = field(default_factory=ModelParameters)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def summary(self) -> dict[str, Any]:
        """Describe the session without its rows, for document listings."""
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp,
            "total_rows": self.total_rows,
            "columns": [
                {"name": column.name, "type": column.inferred_type.value}
                for column in self.columns
            ],
            "embedding_model": self.embedding_model,
            "provider": self.parameters.provider,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the session to a JSON-compatible dict."""
        return {
            "id": self.id,
            "name": self.name,
            "data": [
                {key: cell_to_json(cell) for key, cell in row.items()} for row in self.rows
            ],
            "columns": [
                {"name": column.name, "type": column.inferred_type.value}
                for column in self.columns
            ],
            "timestamp": self.timestamp,
            "embeddingModel": self.embedding_model,
            "modelParameters": self.parameters.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentSession":
        """Rebuild a session from the dict produced by :meth:`to_dict`."""
        parameters = data.get("modelParameters") or {}
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            rows=[
                {key: cell_from_json(cell) for key, cell in row.items()}
                for row in data.get("data", [])
            ],
            columns=[
                ColumnSpec(name=column["name"], inferred_type=ColumnType(column["type"]))
                for column in data.get("columns", [])
            ],
            timestamp=data.get("timestamp", ""),
            embedding_model=data.get("embeddingModel"),
            parameters=resolve_parameters(parameters.get("provider"), parameters),
        )


def create_session(
    name: str,
    data: SpreadsheetData,
    embedding_model: str | None = None,
    parameters: ModelParameters | None = None,
) -> DocumentSession:
    """Create a new session for a parsed upload.

    Args:
        name: Original filename
        data: Parsed spreadsheet
        embedding_model: Embedding model chosen for the document
        parameters: Resolved parameters (default: local family defaults)

    Returns:
        DocumentSession: A session with a fresh UUID and the current UTC time
    """
    return DocumentSession(
        id=str(uuid.uuid4()),
        name=name,
        rows=data.rows,
        columns=data.columns,
        timestamp=datetime.now(timezone.utc).isoformat(),
        embedding_model=embedding_model,
        parameters=parameters or resolve_parameters(),
    )
