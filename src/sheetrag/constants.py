"""Application-wide constants and defaults for SheetRAG.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import os
from pathlib import Path

# =============================================================================
# File Upload Limits
# =============================================================================
MAX_UPLOAD_SIZE_BYTES = 50 * 1024 * 1024  # 50MB

SPREADSHEET_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
}

# =============================================================================
# Spreadsheet Parsing
# =============================================================================
TYPE_SAMPLE_SIZE = 10  # Non-null values sampled per column for type inference
EXCEL_EPOCH_OFFSET_DAYS = 25569  # Serial of 1970-01-01 in the 1900 date system
SECONDS_PER_DAY = 86400
EXCEL_DATE_SERIAL_MAX = 47483  # Serials above this are not treated as dates (2099)

# =============================================================================
# Chunking
# =============================================================================
CHUNK_SIZE = 2000
CHUNK_OVERLAP = 500
CHUNK_SEPARATORS = [
    "\n\n\n",
    "\n\n",
    "\n",
    "。",
    ".",
    "！",
    "!",
    "？",
    "?",
    "；",
    ";",
    ":",
    "，",
    ",",
    " ",
    "",
]

# =============================================================================
# Retrieval Settings
# =============================================================================
RETRIEVAL_FRACTION = 0.2  # Share of all chunks retrieved per question
MIN_TOP_K = 20
MAX_TOP_K = 100
DEFAULT_MIN_RELEVANCE_SCORE = 0.7
DEFAULT_MAX_CONCURRENCY = 5

# =============================================================================
# Display Settings
# =============================================================================
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in content previews
STREAM_WORD_DELAY = 0.05  # Seconds between revealed words
EMPTY_CELL_PLACEHOLDER = "-"

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_MCP_HOST = "0.0.0.0"
DEFAULT_MCP_PORT = 8001

# =============================================================================
# Session Persistence
# =============================================================================
SESSION_STORE_KEY = "excel_documents"
DEFAULT_SESSION_FILE = Path.home() / ".sheetrag" / "sessions.json"

# =============================================================================
# Provider Families
# =============================================================================
LOCAL_PROVIDER = "local"
CLOUD_PROVIDER = "cloud"
PROVIDERS = (LOCAL_PROVIDER, CLOUD_PROVIDER)

DEFAULT_CHAT_MODELS = {
    LOCAL_PROVIDER: "llama3.2",
    CLOUD_PROVIDER: "gemini-2.5-flash",
}

CLOUD_CHAT_MODELS = ["gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.0-flash"]

# =============================================================================
# Embedding Model Defaults
# =============================================================================
EMBEDDING_DEFAULTS = {
    LOCAL_PROVIDER: "nomic-embed-text",
    CLOUD_PROVIDER: "text-embedding-004",
}

LOCAL_CONTEXT_WINDOW = 16384

LOCAL_EMBEDDING_OPTIONS = {
    "num_gpu": 1,
    "num_thread": 8,
    "num_ctx": LOCAL_CONTEXT_WINDOW,
}


def get_embedding_model(provider: str | None = None) -> str:
    """Get the default embedding model for a given provider family.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to provider-specific defaults.

    Args:
        provider: The provider family ("local" or "cloud").
                  If None, uses LLM_SERVICE env var or defaults to "local".

    Returns:
        str: The embedding model name to use.
    """
    # Environment variable takes precedence
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    if provider is None:
        provider = os.getenv("LLM_SERVICE", LOCAL_PROVIDER)

    return EMBEDDING_DEFAULTS.get(provider, EMBEDDING_DEFAULTS[LOCAL_PROVIDER])


def get_min_relevance_score() -> float:
    """Get the similarity floor applied to retrieved chunks.

    Returns:
        float: RELEVANCE_SCORE_FLOOR from the environment, or 0.7
    """
    return float(os.getenv("RELEVANCE_SCORE_FLOOR", str(DEFAULT_MIN_RELEVANCE_SCORE)))


def get_session_file() -> Path:
    """Get the path of the JSON file holding persisted document sessions.

    Returns:
        Path: SHEETRAG_SESSION_FILE from the environment, or ~/.sheetrag/sessions.json
    """
    env_path = os.getenv("SHEETRAG_SESSION_FILE")
    if env_path:
        return Path(env_path)
    return DEFAULT_SESSION_FILE
