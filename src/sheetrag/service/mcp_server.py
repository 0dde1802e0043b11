"""FastMCP server exposing uploaded spreadsheets as MCP tools."""

import logging
import os
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from sheetrag.constants import CONTENT_PREVIEW_LENGTH, DEFAULT_MCP_HOST, DEFAULT_MCP_PORT
from sheetrag.llm import get_llm_service
from sheetrag.service.chat import ChatService
from sheetrag.service.sessions import DocumentRepository, JsonSessionStore
from sheetrag.service.spreadsheet import render_rows

# Configure logging
log_level = os.getenv("LOG_LEVEL", "DEBUG")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded for MCP server")

# Create FastMCP instance
mcp = FastMCP("SheetRAG Document Chat")


def get_repository() -> DocumentRepository:
    """Open the document repository, re-reading the session file."""
    return DocumentRepository(JsonSessionStore())


async def list_documents_impl() -> list[dict[str, Any]]:
    logger.info("📂 MCP Tool list_documents: Fetching uploaded documents")
    documents = [session.summary() for session in get_repository().list()]
    logger.info(f"✅ MCP Tool: Found {len(documents)} documents")
    return documents


async def preview_document_impl(document_id: str, limit: int = 10) -> dict[str, Any]:
    logger.info(f"📄 MCP Tool preview_document: {document_id} (limit={limit})")
    session = get_repository().get(document_id)
    if session is None:
        raise ValueError(f"Document not found: {document_id}")

    preview = session.summary()
    preview["rows"] = render_rows(session.rows[:limit])
    return preview


async def ask_document_impl(
    document_id: str,
    question: str,
    model: str | None = None,
    parameters: dict[str, Any] | None = None,
) -> str:
    logger.debug(
        f"MCP Tool: Parameters - document_id={document_id}, "
        f"question='{question[:CONTENT_PREVIEW_LENGTH]}', model={model}"
    )
    chat_service = ChatService(get_repository(), llm_factory=get_llm_service)
    answer = await chat_service.ask(document_id, question, model, parameters)
    logger.info(f"✅ MCP Tool: Answer has {len(answer)} characters")
    return answer


@mcp.tool()
async def list_documents() -> list[dict[str, Any]]:
    """
    Lists the uploaded spreadsheets with their ids, row counts and column types.

    Use this tool to discover which documents exist before asking about one.
    """
    return await list_documents_impl()


@mcp.tool()
async def preview_document(document_id: str, limit: int = 10) -> dict[str, Any]:
    """
    Shows the first rows of an uploaded spreadsheet as rendered table cells.

    Args:
        document_id: Id of the document (see list_documents)
        limit: Number of rows to return (default: 10)
    """
    return await preview_document_impl(document_id, limit)


@mcp.tool()
async def ask_document(
    document_id: str,
    question: str,
    model: str | None = None,
    parameters: dict[str, Any] | None = None,
) -> str:
    """
    Answers a natural-language question about an uploaded spreadsheet using
    retrieval over its rows. Good for counts, totals and lookups.

    Args:
        document_id: Id of the document (see list_documents)
        question: The question to answer
        model: Optional chat model id (default: the provider family's default)
        parameters: Optional sampling overrides such as temperature or provider
    """
    return await ask_document_impl(document_id, question, model, parameters)


def main() -> None:
    """Entry point for the MCP server command-line interface."""
    host = os.getenv("MCP_HOST", DEFAULT_MCP_HOST)
    port = int(os.getenv("MCP_PORT", str(DEFAULT_MCP_PORT)))
    logger.info(f"🚀 Starting SheetRAG MCP Server on {host}:{port}...")
    mcp.run(transport="sse", host=host, port=port)


if __name__ == "__main__":
    main()
