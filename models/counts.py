"""
Count store data model.

Holds the per-session tally of predefined (catalog) items and custom
(user-named) items. Every value is a whole number >= 0.

Session Storage:
    - CountStore.to_dict() is written into the Flask session after each action
    - CountStore.from_dict() rebuilds the store on the next request
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Callable, Dict, Optional, Tuple

from core.catalog import CATALOG, Catalog, item_names
from core.constants import RESET_CONFIRMATION_MESSAGE
from core.exceptions import InvalidItemNameError, UnknownItemError


ItemCounts = Dict[str, int]
ConfirmCallback = Callable[[str], bool]


def sanitize_count(value: Any) -> int:
    """
    Coerce external input into a valid count.

    Non-numeric and non-finite input becomes 0. Numbers are truncated
    toward zero (5.7 -> 5, not 6) and clamped at 0. Strings are parsed as
    numbers first, so form values can be passed straight through.

    Args:
        value: Raw value from a form, JSON body or session

    Returns:
        Non-negative integer count
    """
    if isinstance(value, bool):
        return 0

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0

    if not isinstance(value, Real):
        return 0

    number = float(value)
    if not math.isfinite(number):
        return 0

    return max(0, math.trunc(number))


def _initial_counts(catalog: Catalog) -> ItemCounts:
    return {name: 0 for name in item_names(catalog)}


class CountStore:
    """
    Counts for predefined and custom items.

    Predefined counts are keyed by catalog item name and always contain every
    catalog item. Custom counts are keyed by trimmed, user-supplied names.
    """

    def __init__(self, catalog: Catalog = CATALOG):
        self._catalog = catalog
        self._items: ItemCounts = _initial_counts(catalog)
        self._custom_items: ItemCounts = {}

    @property
    def items(self) -> ItemCounts:
        """Copy of the predefined item counts."""
        return dict(self._items)

    @property
    def custom_items(self) -> ItemCounts:
        """Copy of the custom item counts."""
        return dict(self._custom_items)

    def _target(self, name: str, is_custom: bool) -> Tuple[ItemCounts, str]:
        if is_custom:
            key = str(name or "").strip()
            if not key:
                raise InvalidItemNameError(name)
            return self._custom_items, key
        if name not in self._items:
            raise UnknownItemError(name)
        return self._items, name

    def update_count(self, name: str, delta: int, is_custom: bool = False) -> int:
        """
        Add delta to an item's count, clamping the result at 0.

        Custom names are trimmed and created implicitly. Predefined names
        must exist.

        Returns:
            The new count

        Raises:
            UnknownItemError: If a predefined name is not in the catalog
            InvalidItemNameError: If a custom name is empty after trimming
        """
        target, key = self._target(name, is_custom)
        new_value = max(0, target.get(key, 0) + int(delta))
        target[key] = new_value
        return new_value

    def set_count(self, name: str, value: Any, is_custom: bool = False) -> int:
        """
        Set an item's count directly (value is sanitized first).

        Returns:
            The stored count

        Raises:
            UnknownItemError: If a predefined name is not in the catalog
            InvalidItemNameError: If a custom name is empty after trimming
        """
        target, key = self._target(name, is_custom)
        sanitized = sanitize_count(value)
        target[key] = sanitized
        return sanitized

    def reset_counts(self, confirm: ConfirmCallback) -> bool:
        """
        Reset every count after interactive confirmation.

        Args:
            confirm: Called with the confirmation message; returns True to proceed

        Returns:
            True if the counts were reset, False if the user declined
        """
        if not confirm(RESET_CONFIRMATION_MESSAGE):
            return False

        self._items = _initial_counts(self._catalog)
        self._custom_items = {}
        return True

    def add_custom_item(self, name: str) -> Optional[str]:
        """
        Add a custom item at count 0.

        Re-adding an existing name keeps its count.

        Returns:
            The trimmed name, or None if it was empty
        """
        trimmed = (name or "").strip()
        if not trimmed:
            return None

        self._custom_items.setdefault(trimmed, 0)
        return trimmed

    def remove_custom_item(self, name: str) -> None:
        """Remove a custom item; unknown names are ignored."""
        self._custom_items.pop(name, None)

    def all_counts(self) -> ItemCounts:
        """Predefined and custom counts merged into one snapshot."""
        merged = dict(self._items)
        merged.update(self._custom_items)
        return merged

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "items": dict(self._items),
            "custom_items": dict(self._custom_items),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], catalog: Catalog = CATALOG) -> "CountStore":
        """
        Create from dictionary (e.g., from session).

        Stored values are sanitized again; names no longer in the catalog
        are dropped and missing catalog items start at 0.
        """
        store = cls(catalog)
        if not data:
            return store

        for name, value in (data.get("items") or {}).items():
            if name in store._items:
                store._items[name] = sanitize_count(value)

        for name, value in (data.get("custom_items") or {}).items():
            trimmed = str(name).strip()
            if trimmed:
                store._custom_items[trimmed] = sanitize_count(value)

        return store
