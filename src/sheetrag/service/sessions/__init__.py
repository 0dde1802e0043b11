"""Persistence of uploaded spreadsheets.

This package provides:
- DocumentSession model and create_session
- SessionStore protocol with JSON-file and in-memory backends
- DocumentRepository, which flushes to its store on every mutation

Usage:
    from sheetrag.service.sessions import DocumentRepository, JsonSessionStore

    repository = DocumentRepository(JsonSessionStore())
    session = repository.get(document_id)
"""

from sheetrag.service.sessions.models import DocumentSession, create_session
from sheetrag.service.sessions.repository import DocumentRepository
from sheetrag.service.sessions.storage import JsonSessionStore, MemorySessionStore, SessionStore

__all__ = [
    # Models
    "DocumentSession",
    "create_session",
    # Storage
    "SessionStore",
    "JsonSessionStore",
    "MemorySessionStore",
    # Repository
    "DocumentRepository",
]
