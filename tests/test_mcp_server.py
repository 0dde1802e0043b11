"""Tests for the MCP server module."""

from unittest.mock import patch

import pytest

from sheetrag.service.mcp_server import (
    ask_document_impl,
    get_repository,
    list_documents_impl,
    preview_document_impl,
)
from sheetrag.service.sessions import DocumentRepository, MemorySessionStore, create_session
from sheetrag.service.spreadsheet import load_spreadsheet


@pytest.fixture
def repository(sales_workbook):
    session = create_session("sales.xlsx", load_spreadsheet(sales_workbook))
    return DocumentRepository(MemorySessionStore([session]))


class TestListDocuments:
    """Tests for the list_documents tool."""

    @pytest.mark.asyncio
    @patch("sheetrag.service.mcp_server.get_repository")
    async def test_lists_summaries(self, mock_get_repository, repository):
        mock_get_repository.return_value = repository

        results = await list_documents_impl()

        assert len(results) == 1
        assert results[0]["name"] == "sales.xlsx"
        assert results[0]["total_rows"] == 3
        assert "rows" not in results[0]

    @pytest.mark.asyncio
    async def test_reads_session_file(self, session_file):
        assert await list_documents_impl() == []
        assert get_repository().store.path == session_file


class TestPreviewDocument:
    """Tests for the preview_document tool."""

    @pytest.mark.asyncio
    @patch("sheetrag.service.mcp_server.get_repository")
    async def test_preview_rows(self, mock_get_repository, repository):
        mock_get_repository.return_value = repository
        document_id = repository.list()[0].id

        preview = await preview_document_impl(document_id, limit=2)

        assert len(preview["rows"]) == 2
        assert preview["rows"][0]["Harga"] == "Rp 1.000.000"

    @pytest.mark.asyncio
    @patch("sheetrag.service.mcp_server.get_repository")
    async def test_preview_unknown(self, mock_get_repository, repository):
        mock_get_repository.return_value = repository

        with pytest.raises(ValueError, match="Document not found"):
            await preview_document_impl("missing")


class TestAskDocument:
    """Tests for the ask_document tool."""

    @pytest.mark.asyncio
    @patch("sheetrag.service.mcp_server.get_llm_service")
    @patch("sheetrag.service.mcp_server.get_repository")
    async def test_ask_answers(self, mock_get_repository, mock_factory, repository, fake_llm):
        mock_get_repository.return_value = repository
        mock_factory.return_value = fake_llm
        document_id = repository.list()[0].id

        answer = await ask_document_impl(document_id, "Berapa yang Lunas?")

        assert answer == "Ada 2 baris dengan status Lunas."
        assert mock_factory.call_args.args[0]["provider"] == "local"

    @pytest.mark.asyncio
    @patch("sheetrag.service.mcp_server.get_repository")
    async def test_ask_without_document(self, mock_get_repository, repository):
        mock_get_repository.return_value = repository

        assert await ask_document_impl("", "Berapa?") == "Please select a document first."


@patch("sheetrag.service.mcp_server.mcp")
def test_main_runs_sse(mock_mcp, monkeypatch):
    from sheetrag.service.mcp_server import main

    monkeypatch.delenv("MCP_HOST", raising=False)
    monkeypatch.setenv("MCP_PORT", "9001")
    main()

    mock_mcp.run.assert_called_once_with(transport="sse", host="0.0.0.0", port=9001)
