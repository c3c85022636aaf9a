"""
API routes (service status and client configuration).

Handles:
- /health - Health check endpoint
- /api/config - Settings the counter page needs
- /api/catalog - Predefined items and their template positions
"""

from flask import Blueprint, current_app

from core import constants
from core.catalog import CATALOG, catalog_to_dict
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "version": current_app.config.get("APP_VERSION"),
        "checks": {}
    }

    # Check analytics database
    database = current_app.config.get("ANALYTICS_DB")
    if database and database.is_initialized and current_app.config.get("SUBMISSION_RECORDER"):
        health_status["checks"]["database"] = "initialized"
    else:
        health_status["checks"]["database"] = "not_initialized"
        health_status["status"] = "degraded"

    # Check upload client configuration
    upload_client = current_app.config.get("UPLOAD_CLIENT")
    if upload_client is None:
        health_status["checks"]["upload"] = "not_available"
        health_status["status"] = "degraded"
    else:
        problems = upload_client.validate_configuration()
        health_status["checks"]["upload"] = "ok" if not problems else "; ".join(problems)
        if problems:
            health_status["status"] = "degraded"

    # Check image generator configuration
    image_generator = current_app.config.get("IMAGE_GENERATOR")
    if image_generator is None:
        health_status["checks"]["image"] = "not_available"
        health_status["status"] = "degraded"
    else:
        problems = image_generator.validate_configuration()
        health_status["checks"]["image"] = "ok" if not problems else "; ".join(problems)
        if problems:
            health_status["status"] = "degraded"

    if health_status["status"] != "ok":
        logger.warning(f"Health check degraded: {health_status['checks']}")

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


@api_bp.route("/api/config", methods=["GET"])
def client_config():
    """Whether sending is available, upload limits and the app version."""
    upload_client = current_app.config.get("UPLOAD_CLIENT")
    discord_enabled = upload_client is not None and not upload_client.validate_configuration()

    return {
        "discordEnabled": discord_enabled,
        "maxFileSize": constants.MAX_FILE_SIZE_BYTES,
        "allowedFileTypes": [constants.IMAGE_MIME_TYPE],
        "version": current_app.config.get("APP_VERSION"),
    }


@api_bp.route("/api/catalog", methods=["GET"])
def catalog():
    """Predefined items per category with their template coordinates."""
    return catalog_to_dict(CATALOG)
