"""
Static item catalog.

Maps each category to its items and the pixel position on the template
where the item's count is written. Loaded once at import; never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class CatalogItem:
    """A predefined laundry item and where its count is drawn."""

    name: str
    x: float
    y: float
    group: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"name": self.name, "x": self.x, "y": self.y}
        if self.group:
            data["group"] = self.group
        return data


Catalog = Mapping[str, Tuple[CatalogItem, ...]]


# Template layout
_LEFT_X = 150
_RIGHT_X = 800
_RIGHT_START_Y = 305
_GROUP_SPACE = 92
_BOX_SPACE = 43.5
_DOUBLE_SPACE = 40
_DRESSES_BASE_Y = 1049


def _regular_laundry() -> Tuple[CatalogItem, ...]:
    base = _DRESSES_BASE_Y
    return (
        CatalogItem("Barongs", _LEFT_X, 540, "uppers"),
        CatalogItem("Blouses", _LEFT_X, 588, "uppers"),
        CatalogItem("Caps / Bonnets / Headgear", _LEFT_X, 652.5, "uppers"),
        CatalogItem("Coats / Jackets", _LEFT_X, 696, "uppers"),
        CatalogItem("Polo shirts", _LEFT_X, 739.5),
        CatalogItem("Polos", _LEFT_X, 783),
        CatalogItem("Sandos", _LEFT_X, 826.5),
        CatalogItem("T-shirts", _LEFT_X, 870),
        CatalogItem("Pants", _LEFT_X, 962),
        CatalogItem("Shorts", _LEFT_X, 1005.5),
        CatalogItem("Skirts", _LEFT_X, base),
        CatalogItem("Dresses", _LEFT_X, base + _GROUP_SPACE),
        CatalogItem("Dusters", _LEFT_X, base + _BOX_SPACE + _GROUP_SPACE),
        CatalogItem("Gowns", _LEFT_X, base + _BOX_SPACE * 2 + _GROUP_SPACE),
        CatalogItem("Jumpers", _LEFT_X, base + _BOX_SPACE * 3 + _GROUP_SPACE),
        CatalogItem("Overalls", _LEFT_X, base + _BOX_SPACE * 4 + _GROUP_SPACE),
        CatalogItem("Bras", _LEFT_X, base + _BOX_SPACE * 4 + _GROUP_SPACE * 2),
        CatalogItem("Briefs / Boxers", _LEFT_X, base + _BOX_SPACE * 5 + _GROUP_SPACE * 2),
        CatalogItem("Chemise / Half-slips", _LEFT_X, base + _BOX_SPACE * 6 + _GROUP_SPACE * 2),
        CatalogItem(
            "Panties", _LEFT_X,
            base + _BOX_SPACE * 7 + _DOUBLE_SPACE + _GROUP_SPACE * 2,
        ),
        CatalogItem(
            "Panty Hose", _LEFT_X,
            base + _BOX_SPACE * 8 + _DOUBLE_SPACE + _GROUP_SPACE * 2,
        ),
        CatalogItem(
            "Socks (per pc. not pair)", _LEFT_X,
            base + _BOX_SPACE * 9 + _DOUBLE_SPACE * 2 + _GROUP_SPACE * 2,
        ),
        CatalogItem(
            "Stockings", _LEFT_X,
            base + _BOX_SPACE * 10 + _DOUBLE_SPACE * 2 + _GROUP_SPACE * 2,
        ),
    )


def _home_items() -> Tuple[CatalogItem, ...]:
    names = [
        "Bath Robes",
        "Bathmats",
        "Bed Sheets",
        "Blankets",
        "Comforters",
        "Curtains",
        "Place mats",
        "Pillowcases",
        "Table runners",
        "Tablecloths",
        "Towels / Face Towels",
    ]
    return tuple(
        CatalogItem(name, _RIGHT_X, _RIGHT_START_Y + _BOX_SPACE * row)
        for row, name in enumerate(names)
    )


def _other_items() -> Tuple[CatalogItem, ...]:
    return (
        CatalogItem("Bags", _RIGHT_X, _RIGHT_START_Y + _BOX_SPACE * 11 + _GROUP_SPACE),
        CatalogItem("Shoes", _RIGHT_X, _RIGHT_START_Y + _BOX_SPACE * 12 + _GROUP_SPACE),
    )


REGULAR_LAUNDRY = "Regular Laundry"
HOME_ITEMS = "Home Items"
OTHER_ITEMS = "Other Items"

CATALOG: Catalog = MappingProxyType({
    REGULAR_LAUNDRY: _regular_laundry(),
    HOME_ITEMS: _home_items(),
    OTHER_ITEMS: _other_items(),
})


def iter_items(catalog: Catalog = CATALOG) -> Iterator[CatalogItem]:
    """Yield every item across every category, in catalog order."""
    for items in catalog.values():
        yield from items


def item_names(catalog: Catalog = CATALOG) -> List[str]:
    """Names of every item in the catalog, in catalog order."""
    return [item.name for item in iter_items(catalog)]


def catalog_to_dict(catalog: Catalog = CATALOG) -> Dict[str, List[Dict[str, object]]]:
    """JSON-friendly representation for templates and API responses."""
    return {
        category: [item.to_dict() for item in items]
        for category, items in catalog.items()
    }
