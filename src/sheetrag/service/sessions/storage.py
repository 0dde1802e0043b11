"""Session persistence backends."""

import json
import logging
from pathlib import Path
from typing import Protocol

from sheetrag.constants import SESSION_STORE_KEY, get_session_file
from sheetrag.service.sessions.models import DocumentSession

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Loads and saves the full list of document sessions."""

    def load(self) -> list[DocumentSession]: ...

    def save(self, sessions: list[DocumentSession]) -> None: ...


class JsonSessionStore:
    """Keeps every session in one JSON file under the "excel_documents" key."""

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize the store.

        Args:
            path: JSON file location (default: SHEETRAG_SESSION_FILE env or
                  ~/.sheetrag/sessions.json)
        """
        self.path = Path(path) if path is not None else get_session_file()

    def load(self) -> list[DocumentSession]:
        """Read all sessions from disk.

        Returns:
            list[DocumentSession]: Stored sessions, or an empty list if the
            file does not exist yet
        """
        if not self.path.exists():
            return []

        with self.path.open(encoding="utf-8") as f:
            payload = json.load(f)

        sessions = [DocumentSession.from_dict(item) for item in payload.get(SESSION_STORE_KEY, [])]
        logger.debug(f"Loaded {len(sessions)} sessions from {self.path}")
        return sessions

    def save(self, sessions: list[DocumentSession]) -> None:
        """Write all sessions to disk, replacing the previous contents."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {SESSION_STORE_KEY: [session.to_dict() for session in sessions]}

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)
        logger.debug(f"Saved {len(sessions)} sessions to {self.path}")


class MemorySessionStore:
    """Session store that keeps sessions in process memory only."""

    def __init__(self, sessions: list[DocumentSession] | None = None) -> None:
        self.sessions = list(sessions or [])

    def load(self) -> list[DocumentSession]:
        return list(self.sessions)

    def save(self, sessions: list[DocumentSession]) -> None:
        self.sessions = list(sessions)
