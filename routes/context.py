"""
Per-request helpers shared by the blueprints.

The CountStore lives in the Flask session between requests; every action
loads it, mutates it and saves it back. The latest user-visible error is
kept in the session too, replacing any previous one.
"""

from typing import Any, Dict, Optional

from flask import current_app, request, session

from core.catalog import CATALOG
from models.counts import CountStore
from services.workflow import SubmissionWorkflow


COUNTS_KEY = "counts"
ERROR_KEY = "last_error"


def load_store() -> CountStore:
    """Rebuild the current user's CountStore from the session."""
    return CountStore.from_dict(session.get(COUNTS_KEY), CATALOG)


def save_store(store: CountStore) -> None:
    session[COUNTS_KEY] = store.to_dict()
    session.modified = True


def set_last_error(error: Optional[str]) -> None:
    if error:
        session[ERROR_KEY] = error
    else:
        session.pop(ERROR_KEY, None)
    session.modified = True


def get_last_error() -> Optional[str]:
    return session.get(ERROR_KEY)


def build_workflow() -> SubmissionWorkflow:
    """Workflow around the app-wide services."""
    return SubmissionWorkflow(
        image_generator=current_app.config["IMAGE_GENERATOR"],
        upload_client=current_app.config["UPLOAD_CLIENT"],
        recorder=current_app.config.get("SUBMISSION_RECORDER"),
        catalog=CATALOG,
    )


def request_data() -> Dict[str, Any]:
    """JSON body or form fields, whichever the client sent."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def wants_json() -> bool:
    return request.is_json or request.accept_mimetypes.best == "application/json"


def parse_flag(value: Any) -> bool:
    """Interpret checkbox / JSON / query-string booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def counts_payload(store: CountStore) -> Dict[str, Any]:
    return {
        "items": store.items,
        "customItems": store.custom_items,
    }
