"""
Unit tests for the Count Store.

Covers sanitization, predefined and custom counts, reset confirmation and
the session round trip.
"""

import pytest
from unittest.mock import Mock

from core.catalog import CATALOG, item_names
from core.constants import RESET_CONFIRMATION_MESSAGE
from core.exceptions import InvalidItemNameError, UnknownItemError
from models.counts import CountStore, sanitize_count


# Fixtures

@pytest.fixture
def store():
    """A fresh store over the default catalog."""
    return CountStore()


# Tests for sanitize_count

class TestSanitizeCount:
    """Test coercion of external input into counts."""

    @pytest.mark.parametrize("value, expected", [
        (5, 5),
        (5.7, 5),
        (0, 0),
        (-3, 0),
        (-0.5, 0),
        ("7", 7),
        (" 12 ", 12),
        ("3.9", 3),
        ("abc", 0),
        ("", 0),
        (None, 0),
        (True, 0),
        ([1], 0),
        (float("nan"), 0),
        (float("inf"), 0),
    ])
    def test_sanitize(self, value, expected):
        assert sanitize_count(value) == expected

    def test_result_is_int(self):
        assert type(sanitize_count(4.2)) is int


# Tests for predefined items

class TestPredefinedCounts:
    """Test counts keyed by catalog items."""

    def test_initialized_to_zero(self, store):
        assert set(store.items) == set(item_names(CATALOG))
        assert all(value == 0 for value in store.items.values())
        assert store.custom_items == {}

    def test_update_count_adds_delta(self, store):
        assert store.update_count("Barongs", 3) == 3
        assert store.update_count("Barongs", 2) == 5
        assert store.items["Barongs"] == 5

    def test_update_count_clamps_at_zero(self, store):
        store.set_count("Pants", 2)
        assert store.update_count("Pants", -5) == 0
        assert store.update_count("Pants", -1) == 0

    def test_set_count_sanitizes(self, store):
        assert store.set_count("Towels / Face Towels", 5.7) == 5
        assert store.set_count("Towels / Face Towels", "garbage") == 0
        assert store.set_count("Towels / Face Towels", -4) == 0

    def test_unknown_predefined_name_raises(self, store):
        with pytest.raises(UnknownItemError) as exc_info:
            store.update_count("Not An Item", 1)
        assert exc_info.value.name == "Not An Item"
        assert str(exc_info.value) == "Unknown item: Not An Item"

        with pytest.raises(UnknownItemError):
            store.set_count("Not An Item", 1)

    def test_items_property_is_a_copy(self, store):
        snapshot = store.items
        snapshot["Barongs"] = 99
        assert store.items["Barongs"] == 0


# Tests for custom items

class TestCustomItems:
    """Test user-named items."""

    def test_add_custom_item_trims(self, store):
        assert store.add_custom_item("  Pet bed  ") == "Pet bed"
        assert store.custom_items == {"Pet bed": 0}

    def test_add_empty_name_is_noop(self, store):
        assert store.add_custom_item("   ") is None
        assert store.add_custom_item("") is None
        assert store.custom_items == {}

    def test_re_adding_keeps_count(self, store):
        store.add_custom_item("Rug")
        store.update_count("Rug", 4, is_custom=True)
        store.add_custom_item("Rug")
        assert store.custom_items["Rug"] == 4

    def test_update_custom_creates_implicitly(self, store):
        assert store.update_count("Quilt", 2, is_custom=True) == 2
        assert store.custom_items == {"Quilt": 2}

    def test_custom_names_are_trimmed_on_update_and_set(self, store):
        store.update_count("  Quilt  ", 2, is_custom=True)
        store.update_count("Quilt", 1, is_custom=True)
        store.set_count(" Rug ", 5, is_custom=True)
        assert store.custom_items == {"Quilt": 3, "Rug": 5}

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_custom_name_raises(self, store, name):
        with pytest.raises(InvalidItemNameError):
            store.update_count(name, 1, is_custom=True)
        with pytest.raises(InvalidItemNameError):
            store.set_count(name, 1, is_custom=True)
        assert store.custom_items == {}

    def test_remove_custom_item(self, store):
        store.add_custom_item("Rug")
        store.remove_custom_item("Rug")
        assert store.custom_items == {}

    def test_remove_missing_is_noop(self, store):
        store.remove_custom_item("Nothing here")
        assert store.custom_items == {}

    def test_all_counts_merges(self, store):
        store.set_count("Shoes", 2)
        store.update_count("Rug", 1, is_custom=True)
        merged = store.all_counts()
        assert merged["Shoes"] == 2
        assert merged["Rug"] == 1
        assert len(merged) == len(item_names(CATALOG)) + 1


# Tests for reset

class TestResetCounts:
    """Test the confirmed reset."""

    def test_declined_reset_leaves_state(self, store):
        store.set_count("Bags", 3)
        store.add_custom_item("Rug")
        confirm = Mock(return_value=False)

        assert store.reset_counts(confirm) is False
        confirm.assert_called_once_with(RESET_CONFIRMATION_MESSAGE)
        assert store.items["Bags"] == 3
        assert store.custom_items == {"Rug": 0}

    def test_confirmed_reset_clears(self, store):
        store.set_count("Bags", 3)
        store.update_count("Rug", 2, is_custom=True)

        assert store.reset_counts(lambda message: True) is True
        assert all(value == 0 for value in store.items.values())
        assert set(store.items) == set(item_names(CATALOG))
        assert store.custom_items == {}


# Tests for session round trip

class TestSessionRoundTrip:
    """Test to_dict / from_dict."""

    def test_round_trip_preserves_counts(self, store):
        store.set_count("Blouses", 4)
        store.update_count("Rug", 2, is_custom=True)

        restored = CountStore.from_dict(store.to_dict())
        assert restored.items == store.items
        assert restored.custom_items == store.custom_items

    def test_from_empty(self):
        restored = CountStore.from_dict(None)
        assert restored.items == CountStore().items

    def test_garbage_values_are_sanitized(self):
        restored = CountStore.from_dict({
            "items": {"Blouses": "oops", "Pants": -2, "Shorts": 3.9, "Retired Item": 5},
            "custom_items": {"  Rug ": 2, "   ": 7},
        })
        assert restored.items["Blouses"] == 0
        assert restored.items["Pants"] == 0
        assert restored.items["Shorts"] == 3
        assert "Retired Item" not in restored.items
        assert restored.custom_items == {"Rug": 2}
