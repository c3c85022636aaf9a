"""
Laundry Counter - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env + config classes)
2. Opens the analytics database (explicit lifecycle, closed at exit)
3. Builds the image generator, upload client and submission recorder
4. Registers route blueprints
5. Sets up error handlers

ARCHITECTURE:
    Flask request
    ├── CountStore        - rebuilt from the user's session, saved back after the action
    ├── SubmissionWorkflow - built per request around the CountStore
    └── Shared services   - app.config["IMAGE_GENERATOR" / "UPLOAD_CLIENT" / "SUBMISSION_RECORDER"]

Each session owns its own counts; only the services and the analytics
database are shared.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from logging_config import setup_logging, get_logger
from core.analytics_db import AnalyticsDatabase
from routes import register_blueprints
from services.image_generator import ImageGenerationOptions, create_image_generator
from services.submission_recorder import SubmissionRecorder
from services.upload_client import UploadConfig, create_upload_client


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_object: str | type = "config.Config") -> Flask:
    """
    Application factory - creates and configures Flask app.

    A missing webhook URL does not stop the app; sending reports the
    configuration error instead. An analytics database that cannot be
    opened disables recording but not downloading or sending.

    Args:
        config_object: Import path or class passed to app.config.from_object

    Returns:
        Configured Flask application
    """
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting Laundry Counter in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # ANALYTICS DATABASE
    # =========================================================================

    database = AnalyticsDatabase(app.config["ANALYTICS_DB_PATH"])
    recorder = None
    try:
        database.initialize()
        recorder = SubmissionRecorder(database)
    except Exception as e:
        logger.error(f"Analytics database unavailable, recording disabled: {e}")

    app.config["ANALYTICS_DB"] = database
    app.config["SUBMISSION_RECORDER"] = recorder

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    image_generator = create_image_generator(ImageGenerationOptions(
        template_path=app.config["TEMPLATE_IMAGE_PATH"],
        signature_path=app.config["SIGNATURE_IMAGE_PATH"],
        font_size=app.config["FONT_SIZE"],
        font_family=app.config["FONT_FAMILY"],
        font_path=app.config.get("FONT_PATH"),
    ))
    for problem in image_generator.validate_configuration():
        logger.warning(f"Image configuration: {problem}")
    app.config["IMAGE_GENERATOR"] = image_generator

    upload_client = create_upload_client(
        UploadConfig(
            webhook_url=app.config["DISCORD_WEBHOOK_URL"],
            max_retries=app.config["UPLOAD_MAX_RETRIES"],
            retry_delay_ms=app.config["UPLOAD_RETRY_DELAY_MS"],
            timeout_ms=app.config["UPLOAD_TIMEOUT_MS"],
        ),
        backend=app.config["UPLOAD_BACKEND"],
    )
    for problem in upload_client.validate_configuration():
        logger.warning(f"Upload configuration: {problem}")
    app.config["UPLOAD_CLIENT"] = upload_client

    # =========================================================================
    # CLEANUP REGISTRATION
    # =========================================================================

    def cleanup():
        """Cleanup on application shutdown; a no-op once the database is closed."""
        if not database.is_initialized:
            return
        logger.info("Shutting down...")
        database.close()
        logger.info("Shutdown complete")

    atexit.register(cleanup)
    # Tests unregister this when they tear an app down
    app.config["SHUTDOWN_HOOK"] = cleanup

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return jsonify({"error": "An unexpected error occurred. Please reload and try again."}), 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
