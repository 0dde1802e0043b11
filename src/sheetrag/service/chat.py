"""Chat over an uploaded spreadsheet.

``ChatService.ask`` is the single entry point used by the Flask routes, the
CLI and the MCP server. Every question rebuilds the document's chunks and
vector store from its stored rows; nothing is cached between questions.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field
from typing import Any

from sheetrag.constants import DEFAULT_CHAT_MODELS, STREAM_WORD_DELAY, get_embedding_model
from sheetrag.llm.base import LLMService
from sheetrag.llm.factory import get_llm_service
from sheetrag.llm.parameters import ModelParameters, resolve_parameters
from sheetrag.service.chunking import RecursiveTextSplitter
from sheetrag.service.documents import rows_to_documents
from sheetrag.service.rag import RAGOrchestrator
from sheetrag.service.sessions import DocumentRepository, DocumentSession
from sheetrag.service.vectorstore import InMemoryVectorStore

logger = logging.getLogger(__name__)

NO_DOCUMENT_SELECTED = "Please select a document first."
DOCUMENT_NOT_FOUND = "Document not found."
DOCUMENT_PROCESSING_FAILED = (
    "Failed to process document data. Please try re-uploading the document."
)
CHAT_ERROR = "Sorry, I encountered an error processing your request."


@dataclass
class ChatMessage:
    """One message of a chat transcript."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatTranscript:
    """Ordered messages of one document's chat view (process memory only)."""

    document_id: str | None = None
    messages: list[ChatMessage] = field(default_factory=list)

    def add(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.messages.append(message)
        return message

    def to_list(self) -> list[dict[str, str]]:
        return [message.to_dict() for message in self.messages]


def build_vector_store(session: DocumentSession, llm: LLMService) -> InMemoryVectorStore:
    """Turn a session's rows into an embedded vector store.

    Args:
        session: The document to index
        llm: Provider used to embed the chunks

    Returns:
        InMemoryVectorStore: One entry per chunk of every row document
    """
    documents = rows_to_documents(session.rows)
    chunks = RecursiveTextSplitter().split_documents(documents)
    return InMemoryVectorStore.from_chunks(chunks, llm)


class ChatService:
    """Answers questions about stored documents."""

    def __init__(
        self,
        repository: DocumentRepository,
        llm_factory: Callable[[dict | None], LLMService] = get_llm_service,
        llm_host: str | None = None,
    ) -> None:
        """Initialize the chat service.

        Args:
            repository: Where uploaded documents live
            llm_factory: Builds a provider from a config dict (see get_llm_service)
            llm_host: Ollama host URL passed to the factory for local providers
        """
        self.repository = repository
        self.llm_factory = llm_factory
        self.llm_host = llm_host

    def _resolve(
        self,
        session: DocumentSession,
        model_id: str | None,
        parameters: dict[str, Any] | None,
    ) -> tuple[str, ModelParameters]:
        parameters = parameters or {}
        provider = parameters.get("provider") or session.parameters.provider
        # Switching family starts from that family's defaults
        stored = session.parameters.to_dict() if provider == session.parameters.provider else {}
        resolved = resolve_parameters(provider, {**stored, **parameters})
        return model_id or DEFAULT_CHAT_MODELS[resolved.provider], resolved

    async def answer(
        self,
        document_id: str | None,
        message: str,
        model_id: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> str:
        """Answer a question about one document.

        Args:
            document_id: Id of the selected document
            message: The user's question
            model_id: Chat model (default: the provider family's default model)
            parameters: Parameter overrides on top of the document's stored ones

        Returns:
            str: The answer, or a fixed message when no answer can be produced
        """
        if not document_id:
            return NO_DOCUMENT_SELECTED

        session = self.repository.get(document_id)
        if session is None:
            logger.warning(f"⚠️ Document not found: {document_id}")
            return DOCUMENT_NOT_FOUND

        model, resolved = self._resolve(session, model_id, parameters)
        embedding_model = session.embedding_model
        if resolved.provider != session.parameters.provider:
            # Stored embedding model belongs to the other family
            embedding_model = get_embedding_model(resolved.provider)
        config: dict[str, Any] = {
            "provider": resolved.provider,
            "model": model,
            "embedding_model": embedding_model,
        }
        if self.llm_host:
            config["host"] = self.llm_host
        llm = self.llm_factory(config)

        try:
            store = build_vector_store(session, llm)
        except Exception as e:
            logger.error(f"❌ Failed to index document {session.name}: {e}", exc_info=True)
            return DOCUMENT_PROCESSING_FAILED

        orchestrator = RAGOrchestrator(store, llm, resolved)
        return await orchestrator.answer(message)

    async def ask(
        self,
        document_id: str | None,
        message: str,
        model_id: str | None = None,
        parameters: dict[str, Any] | None = None,
        transcript: ChatTranscript | None = None,
    ) -> str:
        """Answer a question and record the exchange in a transcript.

        The user message is appended before asking. The answer, or a fixed
        error message if anything unexpected fails, is appended after.

        Returns:
            str: The text appended as the assistant message
        """
        if transcript is not None:
            transcript.add("user", message)

        try:
            reply = await self.answer(document_id, message, model_id, parameters)
        except Exception as e:
            logger.error(f"❌ Chat request failed: {e}", exc_info=True)
            reply = CHAT_ERROR

        if transcript is not None:
            transcript.add("assistant", reply)
        return reply


async def stream_words(text: str, delay: float = STREAM_WORD_DELAY) -> AsyncIterator[str]:
    """Reveal a finished answer word by word.

    Yields the text accumulated so far after each word, pausing between words.
    """
    words = text.split(" ")
    for index in range(len(words)):
        yield " ".join(words[: index + 1])
        if index < len(words) - 1:
            await asyncio.sleep(delay)
