"""Chat API routes backed by the RAG pipeline."""

import logging

from flask import Blueprint, jsonify, request

from sheetrag.client.routes.config import get_config
from sheetrag.service.chat import NO_DOCUMENT_SELECTED
from sheetrag.service.runtime import run_async

logger = logging.getLogger(__name__)

chat_bp = Blueprint("chat", __name__)


@chat_bp.route("/api/chat", methods=["POST"])
def chat():
    """Answer a question about an uploaded document.

    Request:
        {
            "message": "How many rows have status Lunas?",
            "document_id": "uuid",
            "model": "llama3.2",  # Optional
            "parameters": {"temperature": 0.3}  # Optional overrides
        }

    Response:
        {
            "response": "There are 12 rows with status Lunas...",
            "messages": [{"role": "user", "content": "..."}, ...]
        }

    Returns:
        JSON response with the answer and the document's transcript
    """
    config = get_config()
    logger.info("📨 Received chat request")

    data = request.get_json(silent=True)
    if not data or not str(data.get("message", "")).strip():
        logger.warning("❌ Missing 'message' field in request")
        return jsonify({"error": "Missing 'message' field in request"}), 400

    message = data["message"]
    document_id = data.get("document_id")
    if not document_id:
        return jsonify({"response": NO_DOCUMENT_SELECTED, "messages": []})

    transcript = config.transcript_for(document_id)
    response = run_async(
        config.chat_service.ask(
            document_id,
            message,
            data.get("model"),
            data.get("parameters"),
            transcript=transcript,
        )
    )
    logger.info("✅ Chat request completed")
    return jsonify({"response": response, "messages": transcript.to_list()})


@chat_bp.route("/api/chat/<document_id>/messages", methods=["GET"])
def chat_messages(document_id: str):
    """Return the chat transcript of a document.

    Returns:
        JSON response with the ordered messages
    """
    config = get_config()
    transcript = config.transcripts.get(document_id)
    return jsonify({"messages": transcript.to_list() if transcript else []})
