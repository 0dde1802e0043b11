"""Shared configuration for route modules."""

from dataclasses import dataclass, field
from typing import Any

from sheetrag.constants import SPREADSHEET_MIME_TYPES
from sheetrag.service.chat import ChatTranscript


@dataclass
class RouteConfig:
    """Configuration container for Flask route dependencies.

    Transcripts are kept per document id, in process memory only.
    """

    repository: Any = None
    chat_service: Any = None
    llm_host: str | None = None
    transcripts: dict[str, ChatTranscript] = field(default_factory=dict)
    allowed_mime_types: set[str] = field(default_factory=lambda: set(SPREADSHEET_MIME_TYPES))

    def transcript_for(self, document_id: str) -> ChatTranscript:
        """Get (or start) the chat transcript of a document."""
        if document_id not in self.transcripts:
            self.transcripts[document_id] = ChatTranscript(document_id=document_id)
        return self.transcripts[document_id]


# Single shared config instance
_config = RouteConfig()


def get_config() -> RouteConfig:
    """Get the shared route configuration.

    Returns:
        RouteConfig instance with current settings
    """
    return _config


def init_config(
    repository: Any = None,
    chat_service: Any = None,
    llm_host: str | None = None,
) -> None:
    """Initialize the shared route configuration.

    Args:
        repository: DocumentRepository holding uploaded documents
        chat_service: ChatService answering questions
        llm_host: Ollama host URL used for model listing
    """
    if repository is not None:
        _config.repository = repository
    if chat_service is not None:
        _config.chat_service = chat_service
    if llm_host is not None:
        _config.llm_host = llm_host
    _config.transcripts.clear()
