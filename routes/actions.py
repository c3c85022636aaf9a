"""
Download and send routes.

Handles:
- /download - Compose the image and return it as a PNG attachment
- /send - Compose the image and post it to the configured webhook

Both actions record a submission (download only on success, send always).
The outcome's error, if any, replaces the previous one shown on the page.
"""

from io import BytesIO

from flask import Blueprint, jsonify, redirect, send_file, url_for

from core import constants
from routes.context import (
    build_workflow,
    load_store,
    request_data,
    set_last_error,
    wants_json,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

actions_bp = Blueprint("actions", __name__)


@actions_bp.route("/download", methods=["POST"])
def download():
    """Return the composed image for local save."""
    store = load_store()
    workflow = build_workflow()

    result = workflow.download(store)
    set_last_error(workflow.error)

    if not result.success:
        if not wants_json():
            return redirect(url_for("main.index"))
        return jsonify({"error": result.error}), 500

    logger.info(f"Download ready: {result.filename} ({result.size} bytes)")
    return send_file(
        BytesIO(result.image),
        mimetype=constants.IMAGE_MIME_TYPE,
        as_attachment=True,
        download_name=result.filename,
    )


@actions_bp.route("/send", methods=["POST"])
def send():
    """
    Post the composed image to the webhook.

    Returns the upload result as JSON; 502 when the upload (or the image
    composition before it) failed.
    """
    data = request_data()
    message = (data.get("message") or "").strip() or None

    store = load_store()
    workflow = build_workflow()

    result = workflow.send(store, message)
    set_last_error(workflow.error or result.error)

    if not wants_json():
        return redirect(url_for("main.index"))

    status = 200 if result.success else 502
    return jsonify(result.to_dict()), status
