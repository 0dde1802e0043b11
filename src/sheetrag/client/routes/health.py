"""Health check and model listing API routes."""

import logging

from flask import Blueprint, jsonify

from sheetrag.client.routes.config import get_config
from sheetrag.llm.factory import list_chat_models

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint.

    Returns:
        JSON with service status
    """
    config = get_config()
    return jsonify(
        {
            "status": "healthy",
            "chat_service": "initialized" if config.chat_service else "not initialized",
            "documents": len(config.repository.list()) if config.repository else 0,
        }
    )


@health_bp.route("/api/models", methods=["GET"])
def models():
    """List selectable chat models.

    Returns:
        JSON with local Ollama models (embedding models excluded) and the cloud catalogue
    """
    config = get_config()
    logger.info("🔌 Listing chat models...")
    available = list_chat_models(config.llm_host)
    logger.info(f"✅ Found {len(available)} models")
    return jsonify({"models": available})
