"""Flask web application for spreadsheet question answering.

This module provides the REST API for uploading spreadsheets, viewing them
as tables and asking questions answered by Retrieval-Augmented Generation
(RAG) over their rows.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask

from sheetrag.client.routes import (
    chat_bp,
    documents_bp,
    health_bp,
    init_config,
    upload_bp,
)
from sheetrag.constants import DEFAULT_OLLAMA_HOST, MAX_UPLOAD_SIZE_BYTES
from sheetrag.llm import get_llm_service
from sheetrag.service.chat import ChatService
from sheetrag.service.sessions import DocumentRepository, JsonSessionStore

# Configure logging
log_level = os.getenv("LOG_LEVEL", "DEBUG")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded")

# Create Flask app
app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_SIZE_BYTES
logger.debug("Flask app created")

# Register blueprints
app.register_blueprint(upload_bp)
app.register_blueprint(documents_bp)
app.register_blueprint(chat_bp)
app.register_blueprint(health_bp)


def initialize_services():
    """Open the document repository and build the chat service on startup."""
    logger.info("🔧 Initializing services...")

    llm_host = os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST)
    store = JsonSessionStore()
    logger.info(f"✅ Session file: {store.path}")

    repository = DocumentRepository(store)
    chat_service = ChatService(repository, llm_factory=get_llm_service, llm_host=llm_host)
    logger.info("✅ Chat service initialized successfully")

    init_config(repository=repository, chat_service=chat_service, llm_host=llm_host)


def create_app():
    """Factory function for creating the Flask application.

    This function is used by WSGI servers like gunicorn to create the app.
    It initializes services before returning the app instance.

    Returns:
        Flask: The configured Flask application instance
    """
    initialize_services()
    return app


def main() -> None:
    """Entry point for the Flask application command-line interface."""
    print("🚀 Starting SheetRAG Flask application...")

    print("📦 Initializing services...")
    initialize_services()
    print("✅ Services initialized successfully")

    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_ENV", "development") == "development"

    print(f"🌐 Starting Flask server on http://{host}:{port}")
    print(f"🔧 Debug mode: {debug}")
    print("📝 Press CTRL+C to quit")

    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
