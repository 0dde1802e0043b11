"""Command-line interface for SheetRAG using Click."""

import asyncio
from pathlib import Path

import click
from dotenv import load_dotenv

from sheetrag.client.cli_helpers import (
    format_document_summary,
    format_table,
    guess_mimetype,
    open_repository,
    require_document,
)
from sheetrag.constants import PROVIDERS, get_embedding_model
from sheetrag.errors import SheetRAGError
from sheetrag.llm import get_llm_service, resolve_parameters
from sheetrag.service.chat import ChatService, stream_words
from sheetrag.service.sessions import create_session
from sheetrag.service.spreadsheet import parse_upload

# Load environment variables
load_dotenv()


async def _reveal(text: str) -> None:
    shown = ""
    async for partial in stream_words(text):
        click.echo(partial[len(shown) :], nl=False)
        shown = partial
    click.echo()


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS),
    default=None,
    help="Provider family used to answer questions (default: 'local')",
)
@click.option(
    "--embedding-model",
    type=str,
    default=None,
    help="Embedding model to use (default: from EMBEDDING_MODEL env or the provider default)",
)
@click.option("--temperature", type=float, default=None, help="Sampling temperature override")
def ingest(
    file: Path,
    provider: str | None,
    embedding_model: str | None,
    temperature: float | None,
) -> None:
    """Upload the spreadsheet FILE (.xlsx or .xls) as a new document.

    Example:
        sheetrag-ingest sales.xlsx
        sheetrag-ingest sales.xlsx --provider cloud
    """
    try:
        data = parse_upload(file.read_bytes(), guess_mimetype(file))
    except SheetRAGError as e:
        click.echo(f"✗ {e}", err=True)
        raise click.Abort()
    except Exception as e:
        click.echo(f"✗ Error reading {file.name}: {e}", err=True)
        raise click.Abort()

    parameters = resolve_parameters(provider, {"temperature": temperature})
    model = embedding_model or get_embedding_model(parameters.provider)
    session = create_session(file.name, data, embedding_model=model, parameters=parameters)
    open_repository().add(session)

    click.echo(f"✓ Ingested {file.name}: {session.total_rows} rows, {len(session.columns)} columns")
    click.echo(f"  Document id: {session.id}")
    click.echo(f"  Embedding model: {model}")


@click.command()
def documents() -> None:
    """List uploaded documents.

    Example:
        sheetrag-documents
    """
    sessions = open_repository().list()
    if not sessions:
        click.echo("No documents uploaded yet.")
        return

    click.echo(f"📊 {len(sessions)} document(s):\n")
    for i, session in enumerate(sessions, 1):
        click.echo(format_document_summary(i, session))


@click.command()
@click.argument("document_id", type=str)
@click.option("--limit", type=int, default=20, help="Number of rows to show (default: 20, 0 for all)")
def show(document_id: str, limit: int) -> None:
    """Show the rows of the document DOCUMENT_ID as a table.

    Example:
        sheetrag-show 3f2b... --limit 5
    """
    session = require_document(open_repository(), document_id)
    click.echo(f"{session.name} ({session.total_rows} rows)\n")
    click.echo(format_table(session, limit=limit or None))
    if limit and session.total_rows > limit:
        click.echo(f"\n... {session.total_rows - limit} more row(s)")


@click.command()
@click.argument("document_id", type=str)
@click.argument("question", type=str)
@click.option("--model", type=str, default=None, help="Chat model id (default: provider default)")
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS),
    default=None,
    help="Override the document's provider family",
)
@click.option("--temperature", type=float, default=None, help="Sampling temperature override")
@click.option("--no-stream", is_flag=True, default=False, help="Print the answer at once")
def ask(
    document_id: str,
    question: str,
    model: str | None,
    provider: str | None,
    temperature: float | None,
    no_stream: bool,
) -> None:
    """Ask QUESTION about the document DOCUMENT_ID.

    Example:
        sheetrag-ask 3f2b... "How many rows have status Lunas?"
    """
    repository = open_repository()
    require_document(repository, document_id)

    overrides = {
        key: value
        for key, value in {"provider": provider, "temperature": temperature}.items()
        if value is not None
    }
    chat_service = ChatService(repository, llm_factory=get_llm_service)

    click.echo(f"🔍 Asking: '{question}'\n")
    answer = asyncio.run(chat_service.ask(document_id, question, model, overrides))

    if no_stream:
        click.echo(answer)
    else:
        asyncio.run(_reveal(answer))


@click.command()
@click.argument("document_id", type=str)
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt")
def delete(document_id: str, yes: bool) -> None:
    """Delete the document DOCUMENT_ID.

    Example:
        sheetrag-delete 3f2b...          # Will prompt for confirmation
        sheetrag-delete 3f2b... --yes    # Skip confirmation
    """
    repository = open_repository()
    session = require_document(repository, document_id)

    if not yes:
        click.echo(f"⚠️  You are about to delete '{session.name}' ({session.total_rows} rows)")
        if not click.confirm("Are you sure you want to proceed?", default=False):
            click.echo("Deletion cancelled.")
            return

    repository.remove(document_id)
    click.echo(f"✓ Document '{session.name}' deleted.")


if __name__ == "__main__":
    ingest()
