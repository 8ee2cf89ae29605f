"""Shared protocols and enums for rating seeding."""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable


class GameMode(str, Enum):
    """Competitive playlist a player record belongs to."""

    ONES = "ones"
    TWOS = "twos"
    THREES = "threes"

    @property
    def playlist(self) -> str:
        """Rank-distribution table key for this mode."""
        return _PLAYLIST_BY_MODE[self]


_PLAYLIST_BY_MODE = {
    GameMode.ONES: "soloDuel",
    GameMode.TWOS: "doubles",
    GameMode.THREES: "standard",
}


class SkillTransform(str, Enum):
    """How a percentile is mapped onto the 0-100 normalized skill scale."""

    POWER = "power"
    EXPANSION = "expansion"


@runtime_checkable
class RatingSeeder(Protocol):
    """Contract for anything that turns a player record into a seed rating."""

    def compute_rating(self, player: Any) -> Any: ...


__all__ = [
    "GameMode",
    "RatingSeeder",
    "SkillTransform",
]
