"""MMR to percentile to normalized skill to mu conversions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from skillseed.protocol import GameMode, SkillTransform
from skillseed.ranks import RANK_DISTRIBUTIONS, RankTable, build_rank_table

logger = logging.getLogger(__name__)

PERCENTILE_FLOOR = 0.00001
PERCENTILE_CEILING = 99.99999
NEUTRAL_SKILL = 50.0

POWER_SKILL_FLOOR = 0.001
POWER_SKILL_CEILING = 99.999

EXPANSION_KNEE = 85.0
EXPANSION_COMPRESSION = 0.85
EXPANSION_BASE = EXPANSION_KNEE * EXPANSION_COMPRESSION
EXPANSION_HEADROOM = 100.0 - EXPANSION_BASE


@dataclass(frozen=True)
class PercentileParameters:
    power_factor: float = 1.5
    mu_min: float = 800.0
    mu_max: float = 2200.0
    transform: SkillTransform = SkillTransform.POWER
    default_playlist: str = GameMode.TWOS.playlist
    skill_range: float = 100.0


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class PercentileConverter:
    """Stateless converter over rank tables built once at construction."""

    def __init__(self, params: PercentileParameters) -> None:
        self.params = params
        self._tables: Mapping[str, RankTable] = MappingProxyType(
            {playlist: build_rank_table(playlist) for playlist in RANK_DISTRIBUTIONS}
        )
        if self.params.default_playlist not in self._tables:
            raise ValueError(f"Unknown default playlist: {self.params.default_playlist}")

    def table(self, playlist: str | GameMode) -> RankTable:
        """Rank table for a playlist key or game mode, falling back to the default playlist."""
        if isinstance(playlist, GameMode):
            return self._tables[playlist.playlist]
        existing = self._tables.get(playlist)
        if existing is not None:
            return existing
        try:
            return self._tables[GameMode(playlist).playlist]
        except ValueError:
            logger.debug(
                "Unknown playlist %r, using %s", playlist, self.params.default_playlist
            )
            return self._tables[self.params.default_playlist]

    def mmr_to_percentile(self, mmr: float, playlist: str | GameMode) -> float:
        """Population percentile (0-100) for an MMR, interpolated within its tier."""
        mmr = max(0.0, float(mmr))
        table = self.table(playlist)

        if mmr < table.lowest_mmr:
            return PERCENTILE_FLOOR
        if mmr > table.highest_mmr:
            return PERCENTILE_CEILING

        rank_range = table.find_tier(mmr)
        tier_info = table.tiers.get(rank_range.tier) if rank_range is not None else None
        if rank_range is None or tier_info is None:
            return NEUTRAL_SKILL

        percentile = tier_info.cumulative_below
        if rank_range.span > 0:
            position = _clamp((mmr - rank_range.min_mmr) / rank_range.span, 0.0, 1.0)
            percentile += position * tier_info.percentage

        return _clamp(percentile, PERCENTILE_FLOOR, PERCENTILE_CEILING)

    def percentile_to_normalized_skill(self, percentile: float) -> float:
        percentile = _clamp(percentile, PERCENTILE_FLOOR, PERCENTILE_CEILING)
        if self.params.transform is SkillTransform.EXPANSION:
            return self._expansion_transform(percentile)
        skill = (percentile / 100.0) ** (1.0 / self.params.power_factor) * 100.0
        return _clamp(skill, POWER_SKILL_FLOOR, POWER_SKILL_CEILING)

    def _expansion_transform(self, percentile: float) -> float:
        # Linear compression below the knee, power expansion of the elite tail above it.
        if percentile < EXPANSION_KNEE:
            skill = percentile * EXPANSION_COMPRESSION
        else:
            excess = (percentile - EXPANSION_KNEE) / (100.0 - EXPANSION_KNEE)
            skill = EXPANSION_BASE + excess ** self.params.power_factor * EXPANSION_HEADROOM
        return _clamp(skill, PERCENTILE_FLOOR, PERCENTILE_CEILING)

    def mmr_to_normalized_skill(self, mmr: float, playlist: str | GameMode) -> float:
        return self.percentile_to_normalized_skill(self.mmr_to_percentile(mmr, playlist))

    def normalized_skill_to_mu(self, normalized_skill: float) -> float:
        """Linear map of skill onto ``[mu_min, mu_max]``; ``skill_range`` is the divisor."""
        mu_min = self.params.mu_min
        mu_max = self.params.mu_max
        skill = _clamp(normalized_skill, 0.0, 100.0)
        mu = mu_min + (mu_max - mu_min) * skill / self.params.skill_range
        return _clamp(mu, mu_min, mu_max)

    def aggregate_playlist_skills(
        self,
        playlist_skills: Mapping[str, float | None],
        weights: Mapping[str, float],
    ) -> float:
        """Weighted mean over modes with a skill and a positive weight; 50.0 if none qualify."""
        total_weighted_skill = 0.0
        total_weight = 0.0
        for mode, skill in playlist_skills.items():
            weight = weights.get(mode, 0.0)
            if skill is None or weight <= 0:
                continue
            total_weighted_skill += skill * weight
            total_weight += weight

        if total_weight == 0:
            return NEUTRAL_SKILL
        return total_weighted_skill / total_weight


__all__ = [
    "NEUTRAL_SKILL",
    "PERCENTILE_CEILING",
    "PERCENTILE_FLOOR",
    "PercentileConverter",
    "PercentileParameters",
]
