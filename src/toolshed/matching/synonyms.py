"""Static synonym table used when scoring tool requirements."""

from __future__ import annotations

from typing import Mapping, Tuple

KEYWORD_SYNONYMS: Mapping[str, Tuple[str, ...]] = {
    "drill": ("driver", "drill driver", "power drill", "cordless drill"),
    "screwdriver": ("driver", "philips", "flathead", "screw driver"),
    "wrench": ("spanner", "socket wrench", "adjustable wrench"),
    "hammer": ("mallet", "claw hammer"),
    "level": ("spirit level", "laser level"),
    "saw": ("handsaw", "circular saw", "jigsaw"),
    "pliers": ("needle nose", "slip joint", "locking pliers"),
    "tape": ("measuring tape", "tape measure"),
}

__all__ = ["KEYWORD_SYNONYMS"]
