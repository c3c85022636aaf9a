"""
Flask route blueprints for the laundry counter.

This module contains all route handlers organized by functionality:
- main: Counter page
- counter: Count Store endpoints (items, custom items, reset)
- actions: Download and send
- submissions: Submission log and analytics queries
- api: Health check and client configuration

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .counter import counter_bp
from .actions import actions_bp
from .submissions import submissions_bp
from .api import api_bp

__all__ = [
    "main_bp",
    "counter_bp",
    "actions_bp",
    "submissions_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(counter_bp)
    app.register_blueprint(actions_bp)
    app.register_blueprint(submissions_bp)
    app.register_blueprint(api_bp)
