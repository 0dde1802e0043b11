"""Document listing, table view and deletion routes."""

import logging

from flask import Blueprint, jsonify

from sheetrag.client.routes.config import get_config
from sheetrag.service.spreadsheet import render_rows

logger = logging.getLogger(__name__)

documents_bp = Blueprint("documents", __name__)


@documents_bp.route("/api/documents", methods=["GET"])
def list_documents():
    """List uploaded documents, newest last.

    Returns:
        JSON response with document summaries
    """
    config = get_config()
    documents = [session.summary() for session in config.repository.list()]
    logger.info(f"📂 Listing {len(documents)} documents")
    return jsonify({"documents": documents})


@documents_bp.route("/api/documents/<document_id>", methods=["GET"])
def show_document(document_id: str):
    """Return a document's rows rendered for a table view.

    Returns:
        JSON response with the summary and rendered rows, or 404
    """
    config = get_config()
    session = config.repository.get(document_id)
    if session is None:
        return jsonify({"error": "Document not found."}), 404

    document = session.summary()
    document["rows"] = render_rows(session.rows)
    return jsonify(document)


@documents_bp.route("/api/documents/<document_id>", methods=["DELETE"])
def delete_document(document_id: str):
    """Delete a document and its chat transcript.

    Returns:
        JSON response with success status, or 404
    """
    config = get_config()
    if not config.repository.remove(document_id):
        return jsonify({"success": False, "error": "Document not found."}), 404

    config.transcripts.pop(document_id, None)
    return jsonify({"success": True})
