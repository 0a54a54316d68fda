"""Planet dataset shared by the pagination tests."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from bson import ObjectId

PLANETS: list[tuple[str, bool, str, float, int]] = [
    ("Mercury", False, "terrestrial", 2439.7, 0),
    ("Venus", False, "terrestrial", 6051.8, 0),
    ("Earth", False, "terrestrial", 6371.0, 1),
    ("Mars", False, "terrestrial", 3389.5, 2),
    ("Jupiter", True, "gas giant", 69911.0, 95),
    ("Saturn", True, "gas giant", 58232.0, 146),
    ("Uranus", True, "ice giant", 25362.0, 28),
    ("Neptune", True, "ice giant", 24622.0, 16),
]


def oid(number: int) -> ObjectId:
    """Deterministic ObjectId whose hex form ends in ``number``."""
    return ObjectId(f"{number:024x}")


def planet_documents() -> list[dict[str, Any]]:
    """The eight planets, ``_id`` following distance from the sun."""
    return [
        {
            "_id": oid(position),
            "name": name,
            "order": position,
            "has_rings": has_rings,
            "category": category,
            "radius": radius,
            "discovered": datetime(1600 + position * 10, 1, 1),
            "meta": {"moons": moons},
            "tags": [category],
        }
        for position, (name, has_rings, category, radius, moons) in enumerate(PLANETS, start=1)
    ]


def names(page: Any) -> list[str]:
    """Planet names of a page in edge order."""
    return [node["name"] for node in page.nodes]
