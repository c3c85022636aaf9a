"""
Core module for the laundry counter.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- catalog: Static item catalog with template coordinates
- constants: Rendering, upload and message constants
- analytics_db: SQLite lifecycle for the submission log
"""

from .exceptions import (
    LaundryCounterError,
    ConfigurationError,
    UnknownItemError,
    InvalidItemNameError,
    InvalidChannelError,
    DatabaseNotReadyError,
    RecordingError,
    WorkflowBusyError,
)
from .catalog import CATALOG, CatalogItem, iter_items, item_names
from .analytics_db import AnalyticsDatabase

__all__ = [
    "LaundryCounterError",
    "ConfigurationError",
    "UnknownItemError",
    "InvalidItemNameError",
    "InvalidChannelError",
    "DatabaseNotReadyError",
    "RecordingError",
    "WorkflowBusyError",
    "CATALOG",
    "CatalogItem",
    "iter_items",
    "item_names",
    "AnalyticsDatabase",
]
