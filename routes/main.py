"""
Main routes (counter page).
"""

from flask import Blueprint, render_template

from core.catalog import CATALOG
from core.constants import RESET_CONFIRMATION_MESSAGE
from routes.context import get_last_error, load_store

main_bp = Blueprint("main", __name__)


@main_bp.route("/", methods=["GET"])
def index():
    """
    Counter page.

    Renders every catalog category with its current counts, the custom
    items, the action buttons and the latest error (if any).
    """
    store = load_store()
    return render_template(
        "counter.html",
        catalog=CATALOG,
        items=store.items,
        custom_items=store.custom_items,
        error=get_last_error(),
        reset_message=RESET_CONFIRMATION_MESSAGE,
    )
