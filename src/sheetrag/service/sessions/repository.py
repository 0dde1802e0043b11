"""Document repository backed by a session store."""

import logging

from sheetrag.service.sessions.models import DocumentSession
from sheetrag.service.sessions.storage import SessionStore

logger = logging.getLogger(__name__)


class DocumentRepository:
    """The list of uploaded documents, flushed to its store on every change."""

    def __init__(self, store: SessionStore) -> None:
        self.store = store
        self._sessions: list[DocumentSession] = store.load()
        logger.info(f"📂 Loaded {len(self._sessions)} documents")

    def list(self) -> list[DocumentSession]:
        """Return all sessions in upload order."""
        return list(self._sessions)

    def get(self, document_id: str) -> DocumentSession | None:
        """Find a session by id, or None if there is no such document."""
        for session in self._sessions:
            if session.id == document_id:
                return session
        return None

    def add(self, session: DocumentSession) -> DocumentSession:
        """Append a session and persist."""
        self._sessions.append(session)
        self._flush()
        logger.info(f"✅ Stored document '{session.name}' ({session.total_rows} rows)")
        return session

    def update(self, session: DocumentSession) -> bool:
        """Replace the session with the same id and persist.

        Returns:
            bool: False if no session with that id exists
        """
        for index, existing in enumerate(self._sessions):
            if existing.id == session.id:
                self._sessions[index] = session
                self._flush()
                return True
        return False

    def remove(self, document_id: str) -> bool:
        """Delete a session by id and persist.

        Returns:
            bool: False if no session with that id exists
        """
        remaining = [session for session in self._sessions if session.id != document_id]
        if len(remaining) == len(self._sessions):
            logger.warning(f"⚠️ Document not found: {document_id}")
            return False

        self._sessions = remaining
        self._flush()
        logger.info(f"🗑️ Removed document {document_id}")
        return True

    def _flush(self) -> None:
        self.store.save(self._sessions)
