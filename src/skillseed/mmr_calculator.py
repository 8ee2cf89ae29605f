"""Percentile-based skill from per-mode MMR: season pooling, game gating, weighted aggregation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from skillseed.common import (
    ModeRecord,
    PlayerInputValidationError,
    PlayerSkillInput,
    round_half_away,
    validate_player_input,
)
from skillseed.percentile import NEUTRAL_SKILL, PercentileConverter
from skillseed.protocol import GameMode

FALLBACK_MU = 1000.0
FALLBACK_MARKER = "default_values"
AGGREGATION_METHOD = "percentile-based"


@dataclass(frozen=True)
class MMRParameters:
    min_games_threshold: int = 10
    ones_weight: float = 1.0
    twos_weight: float = 1.5
    threes_weight: float = 1.2

    def weights(self) -> dict[str, float]:
        return {
            GameMode.ONES.value: self.ones_weight,
            GameMode.TWOS.value: self.twos_weight,
            GameMode.THREES.value: self.threes_weight,
        }


@dataclass(frozen=True)
class ModeBreakdown:
    effective_mmr: float
    normalized_skill: float | None
    games: int

    @property
    def qualified(self) -> bool:
        return self.normalized_skill is not None


@dataclass(frozen=True)
class SkillResult:
    """Aggregated skill for one player, with the per-mode diagnostics behind it.

    ``fallback`` is set (and ``error`` explains why) when the input failed
    validation and the neutral defaults were substituted.
    """

    normalized_skill: float
    mu: float
    total_games: int
    breakdown: Mapping[str, ModeBreakdown] = field(default_factory=dict)
    weights: Mapping[str, float] = field(default_factory=dict)
    aggregation_method: str = AGGREGATION_METHOD
    error: str | None = None
    fallback: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback is not None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "normalized_skill": self.normalized_skill,
            "mu": self.mu,
            "total_games": self.total_games,
            "breakdown": {
                mode: {
                    "effective_mmr": item.effective_mmr,
                    "normalized_skill": item.normalized_skill,
                    "games": item.games,
                }
                for mode, item in self.breakdown.items()
            },
            "weights": dict(self.weights),
            "aggregation_method": self.aggregation_method,
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.fallback is not None:
            payload["fallback"] = self.fallback
        return payload


def effective_mmr(record: ModeRecord) -> float:
    """Games-weighted mean of the current and previous season MMR (0 without games)."""
    total_games = record.total_games
    if total_games <= 0:
        return 0.0
    weighted = record.current.mmr * record.current.games + record.previous.mmr * record.previous.games
    return weighted / total_games


class MMRCalculator:
    """Stateless player-to-skill calculator."""

    def __init__(self, params: MMRParameters, converter: PercentileConverter) -> None:
        self.params = params
        self.converter = converter

    def calculate(self, player: PlayerSkillInput | None) -> SkillResult:
        """Compute the aggregated skill and mu; invalid input yields the flagged fallback."""
        try:
            validate_player_input(player)
        except PlayerInputValidationError as exc:
            return self.fallback_result(str(exc))

        weights = self.params.weights()
        breakdown: dict[str, ModeBreakdown] = {}
        for mode, record in player.records():
            mode_mmr = effective_mmr(record)
            games = record.total_games
            normalized_skill: float | None = None
            if games >= self.params.min_games_threshold and mode_mmr > 0:
                normalized_skill = self.converter.mmr_to_normalized_skill(mode_mmr, mode)
            breakdown[mode.value] = ModeBreakdown(
                effective_mmr=mode_mmr,
                normalized_skill=normalized_skill,
                games=games,
            )

        aggregated_skill = self.converter.aggregate_playlist_skills(
            {mode: item.normalized_skill for mode, item in breakdown.items()},
            weights,
        )
        mu = self.converter.normalized_skill_to_mu(aggregated_skill)

        return SkillResult(
            normalized_skill=round_half_away(aggregated_skill, 2),
            mu=round_half_away(mu, 2),
            total_games=player.total_games,
            breakdown=breakdown,
            weights=weights,
        )

    def fallback_result(self, error: str) -> SkillResult:
        return SkillResult(
            normalized_skill=NEUTRAL_SKILL,
            mu=FALLBACK_MU,
            total_games=0,
            weights=self.params.weights(),
            error=error,
            fallback=FALLBACK_MARKER,
        )


__all__ = [
    "AGGREGATION_METHOD",
    "FALLBACK_MARKER",
    "FALLBACK_MU",
    "MMRCalculator",
    "MMRParameters",
    "ModeBreakdown",
    "SkillResult",
    "effective_mmr",
]
