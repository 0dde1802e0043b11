"""Flask route blueprints for the sheetrag client application."""

from sheetrag.client.routes.chat import chat_bp
from sheetrag.client.routes.config import get_config, init_config
from sheetrag.client.routes.documents import documents_bp
from sheetrag.client.routes.health import health_bp
from sheetrag.client.routes.upload import upload_bp

__all__ = [
    "chat_bp",
    "documents_bp",
    "health_bp",
    "upload_bp",
    "init_config",
    "get_config",
]
