"""Pytest configuration and shared fixtures for the test suite."""

import io
from datetime import datetime
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import openpyxl
import pytest
import requests

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# A vector every fake embedding points along, so all chunks score 1.0
UNIT_VECTOR = [1.0, 0.5, 0.25]


# Service availability checks
def ollama_available() -> bool:
    """Check if Ollama server is running and accessible.

    Returns:
        True if Ollama is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:11434/api/tags", timeout=2)
        return response.status_code == 200
    except (requests.RequestException, Exception):
        return False


# Spreadsheet fixtures
def build_workbook(rows: list[list[Any]]) -> bytes:
    """Write rows (first row = headers) to an in-memory .xlsx workbook.

    Returns:
        The workbook bytes
    """
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def sales_rows() -> list[list[Any]]:
    """Header row plus three rows of a small sales sheet."""
    return [
        ["Nama", "Harga", "Tanggal", "Status", "Jumlah"],
        ["Budi", 1000000, 45000, "Lunas", 3],
        ["Siti", "Rp 250000", datetime(2024, 1, 5), "Belum", 1],
        ["Andi", 75000.5, 45100, "Lunas", None],
    ]


@pytest.fixture
def sales_workbook(sales_rows) -> bytes:
    """Provide the sales sheet as .xlsx bytes."""
    return build_workbook(sales_rows)


@pytest.fixture
def sales_workbook_path(tmp_path, sales_workbook) -> Path:
    """Write the sales sheet to a .xlsx file in tmp_path."""
    path = tmp_path / "sales.xlsx"
    path.write_bytes(sales_workbook)
    return path


@pytest.fixture
def session_file(tmp_path, monkeypatch) -> Path:
    """Point SHEETRAG_SESSION_FILE at a temporary JSON file."""
    path = tmp_path / "sessions.json"
    monkeypatch.setenv("SHEETRAG_SESSION_FILE", str(path))
    return path


# Provider fixtures
@pytest.fixture
def fake_llm():
    """Provide a mock LLM service whose embeddings all point the same way.

    Returns:
        MagicMock with model names, a deterministic embed and an async complete
    """
    llm = MagicMock()
    llm.model = "fake-model"
    llm.embedding_model = "fake-embed"
    llm.embed.side_effect = lambda texts: [list(UNIT_VECTOR) for _ in texts]
    llm.complete = AsyncMock(return_value="Ada 2 baris dengan status Lunas.")
    return llm


@pytest.fixture
def ollama_service():
    """Provide OllamaService instance, skip if Ollama not available.

    Raises:
        pytest.skip: If Ollama server is not running
    """
    if not ollama_available():
        pytest.skip("Ollama server not running on localhost:11434")

    from sheetrag.llm import OllamaService

    return OllamaService(host="http://localhost:11434", model="llama3.2")
