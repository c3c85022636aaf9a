"""
Count Store routes.

Handles:
- /api/items/update - Add a delta to an item's count
- /api/items/set - Set an item's count directly
- /api/custom-items - Add a custom item
- /api/custom-items/remove - Remove a custom item
- /api/reset - Reset every count (confirm=yes|no)

Every endpoint accepts a JSON or form body. JSON clients get the updated
counts back; form posts from the counter page are redirected to it.
"""

import bleach
from flask import Blueprint, jsonify, redirect, url_for

from core.exceptions import InvalidItemNameError, UnknownItemError, WorkflowBusyError
from routes.context import (
    build_workflow,
    counts_payload,
    load_store,
    parse_flag,
    request_data,
    save_store,
    set_last_error,
    wants_json,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

counter_bp = Blueprint("counter", __name__)

# Constants
MAX_CUSTOM_NAME_LENGTH = 100


def _sanitize_name(text) -> str:
    """
    Sanitize a user-supplied item name (strip markup and whitespace).

    Args:
        text: Raw input text

    Returns:
        Sanitized name, possibly empty
    """
    if not text:
        return ""

    text = bleach.clean(str(text).strip(), tags=[], strip=True).strip()

    if len(text) > MAX_CUSTOM_NAME_LENGTH:
        text = text[:MAX_CUSTOM_NAME_LENGTH]

    return text


def _item_target(data):
    """Item name and custom flag from a request body; custom names are sanitized."""
    is_custom = parse_flag(data.get("custom"))
    name = data.get("name")
    if is_custom:
        name = _sanitize_name(name)
    return name, is_custom


def _respond(store, status: int = 200, **extra):
    save_store(store)
    if not wants_json():
        return redirect(url_for("main.index"))
    payload = counts_payload(store)
    payload.update(extra)
    return jsonify(payload), status


def _error(message: str, status: int):
    set_last_error(message)
    if not wants_json():
        return redirect(url_for("main.index"))
    return jsonify({"error": message}), status


@counter_bp.route("/api/items/update", methods=["POST"])
def update_item():
    """Add delta (may be negative) to an item; the result never drops below 0."""
    data = request_data()
    name, is_custom = _item_target(data)
    if not name:
        return _error("Missing 'name' field", 400)

    try:
        delta = int(data.get("delta", 0))
    except (TypeError, ValueError):
        return _error("'delta' must be a whole number", 400)

    store = load_store()
    try:
        value = store.update_count(name, delta, is_custom=is_custom)
    except UnknownItemError as e:
        return _error(e.message, 404)
    except InvalidItemNameError as e:
        return _error(e.message, 400)

    return _respond(store, name=name, value=value)


@counter_bp.route("/api/items/set", methods=["POST"])
def set_item():
    """Set an item's count; the value is sanitized (non-numeric -> 0)."""
    data = request_data()
    name, is_custom = _item_target(data)
    if not name:
        return _error("Missing 'name' field", 400)

    store = load_store()
    try:
        value = store.set_count(name, data.get("value"), is_custom=is_custom)
    except UnknownItemError as e:
        return _error(e.message, 404)
    except InvalidItemNameError as e:
        return _error(e.message, 400)

    return _respond(store, name=name, value=value)


@counter_bp.route("/api/custom-items", methods=["POST"])
def add_custom_item():
    """Add a custom item at 0; empty names are ignored."""
    data = request_data()
    store = load_store()

    added = store.add_custom_item(_sanitize_name(data.get("name")))
    if added:
        logger.info(f"Custom item added: {added}")

    return _respond(store, added=added)


@counter_bp.route("/api/custom-items/remove", methods=["POST"])
def remove_custom_item():
    data = request_data()
    store = load_store()
    store.remove_custom_item(data.get("name") or "")
    return _respond(store)


@counter_bp.route("/api/reset", methods=["POST"])
def reset():
    """
    Reset every count.

    The counter page asks the user to confirm and posts confirm=yes or
    confirm=no; anything but an explicit yes leaves the counts untouched.
    """
    data = request_data()
    confirmed = parse_flag(data.get("confirm"))

    def confirm(message: str) -> bool:
        logger.debug(f"Reset confirmation '{message}': {confirmed}")
        return confirmed

    store = load_store()
    try:
        was_reset = build_workflow().reset(store, confirm)
    except WorkflowBusyError as e:
        return _error(e.message, 409)

    if was_reset:
        set_last_error(None)
    return _respond(store, reset=was_reset)
