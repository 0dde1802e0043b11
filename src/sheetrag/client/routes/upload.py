"""Upload API route for spreadsheet ingestion."""

import json
import logging

from flask import Blueprint, jsonify, request
from werkzeug.utils import secure_filename

from sheetrag.client.routes.config import get_config
from sheetrag.errors import SheetRAGError
from sheetrag.llm.parameters import resolve_parameters
from sheetrag.service.sessions import create_session
from sheetrag.service.spreadsheet import parse_upload

logger = logging.getLogger(__name__)

upload_bp = Blueprint("upload", __name__)


def _form_parameters() -> dict:
    """Read optional JSON-encoded model parameters from the upload form."""
    raw = request.form.get("parameters")
    if not raw:
        return {}
    parameters = json.loads(raw)
    if not isinstance(parameters, dict):
        raise ValueError("parameters must be a JSON object")
    return parameters


@upload_bp.route("/api/upload", methods=["POST"])
def upload_document():
    """Handle a spreadsheet upload.

    Expects multipart form data with:
        - file: One .xlsx or .xls workbook
        - embedding_model: Optional embedding model name
        - provider: Optional provider family ("local" or "cloud")
        - parameters: Optional JSON object of sampling parameters

    Returns:
        JSON response with the stored document summary
    """
    config = get_config()
    logger.info("📤 Received spreadsheet upload request")

    if "file" not in request.files or request.files["file"].filename == "":
        logger.warning("❌ No file in request")
        return jsonify({"success": False, "error": "No file provided"}), 400

    file = request.files["file"]
    filename = secure_filename(file.filename) or "upload"

    try:
        if file.mimetype not in config.allowed_mime_types:
            logger.warning(f"❌ Rejected upload {filename} ({file.mimetype})")
            return (
                jsonify({"success": False, "error": "Please upload an Excel file (.xlsx or .xls)"}),
                400,
            )

        data = parse_upload(file.read(), file.mimetype)
        overrides = _form_parameters()
        parameters = resolve_parameters(request.form.get("provider"), overrides)
        session = create_session(
            name=filename,
            data=data,
            embedding_model=request.form.get("embedding_model") or None,
            parameters=parameters,
        )
        config.repository.add(session)

        logger.info(f"✅ Uploaded {filename}: {session.total_rows} rows")
        return jsonify({"success": True, "document": session.summary()})

    except (SheetRAGError, ValueError) as e:
        logger.warning(f"❌ Upload rejected: {e}")
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        logger.error(f"❌ Error in upload handler: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Internal server error: {str(e)}"}), 500
