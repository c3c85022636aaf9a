"""
Configuration for the laundry counter.

The webhook URL must be supplied externally (environment or .env). When it
is missing the app still starts; sending reports the configuration error.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "laundry_counter_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    TESTING = False
    APP_VERSION = "1.0.0"

    # ==========================================================================
    # Webhook upload
    # ==========================================================================
    # UPLOAD_BACKEND selects the client: "http" posts to DISCORD_WEBHOOK_URL,
    # "mock" keeps uploads in memory (demos, tests).
    DISCORD_WEBHOOK_URL = os.environ.get("DISCORD_WEBHOOK_URL", "")
    UPLOAD_BACKEND = os.environ.get("UPLOAD_BACKEND", "http")
    UPLOAD_MAX_RETRIES = int(os.environ.get("UPLOAD_MAX_RETRIES", "3"))
    UPLOAD_RETRY_DELAY_MS = int(os.environ.get("UPLOAD_RETRY_DELAY_MS", "1000"))
    UPLOAD_TIMEOUT_MS = int(os.environ.get("UPLOAD_TIMEOUT_MS", "30000"))

    # ==========================================================================
    # Image composition
    # ==========================================================================
    TEMPLATE_IMAGE_PATH = os.environ.get(
        "TEMPLATE_IMAGE_PATH", str(BASE_DIR / "static" / "template.jpg")
    )
    SIGNATURE_IMAGE_PATH = os.environ.get(
        "SIGNATURE_IMAGE_PATH", str(BASE_DIR / "static" / "signature_bo.png")
    )
    FONT_PATH = os.environ.get("FONT_PATH") or None
    FONT_FAMILY = os.environ.get("FONT_FAMILY", "Arial")
    FONT_SIZE = int(os.environ.get("FONT_SIZE", "32"))

    # ==========================================================================
    # Analytics log
    # ==========================================================================
    ANALYTICS_DB_PATH = os.environ.get(
        "ANALYTICS_DB_PATH", str(BASE_DIR / "data" / "analytics.db")
    )


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret-key"
    ENVIRONMENT = "testing"
    UPLOAD_BACKEND = "mock"
    DISCORD_WEBHOOK_URL = ""
    ANALYTICS_DB_PATH = ":memory:"
