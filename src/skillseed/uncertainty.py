"""Six-factor confidence model mapped onto a bounded sigma.

Each factor estimates how much the raw record can be trusted:

- experience: total games against ``games_for_max_certainty``
- diversity: share of modes over the game threshold, penalized when the game
  counts of those modes are lopsided
- consistency: step function on total games
- recency: share of games played this season
- peak performance: highest raw peak across modes and seasons
- data quality: share of the twelve raw fields that are non-zero

The factors are multiplied, so one weak factor is enough to keep sigma high.
"""

from __future__ import annotations

from dataclasses import dataclass
from statistics import pvariance
from typing import Any

from skillseed.common import PlayerSkillInput, round_half_away

MIN_FACTOR = 0.3
MAX_FACTOR = 1.0
DEFAULT_FACTOR = 0.5

VARIANCE_PENALTY_DIVISOR = 10_000.0
MAX_DISTRIBUTION_PENALTY = 0.2

ESTABLISHED_CONSISTENCY = 0.8

PEAK_LOW_MMR = 600
PEAK_HIGH_MMR = 1200
PEAK_LOW_FACTOR = 0.5
PEAK_HIGH_FACTOR = 0.9

DATA_QUALITY_FLOOR = 0.5


@dataclass(frozen=True)
class UncertaintyParameters:
    sigma_min: float = 2.5
    sigma_max: float = 8.333
    min_games_threshold: int = 10
    games_for_max_certainty: int = 1000
    low_activity_games: int = 50


@dataclass(frozen=True)
class UncertaintyBreakdown:
    experience: float
    diversity: float
    consistency: float
    recency: float
    peak_performance: float
    data_quality: float
    combined: float
    sigma: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "experience": self.experience,
            "diversity": self.diversity,
            "consistency": self.consistency,
            "recency": self.recency,
            "peak_performance": self.peak_performance,
            "data_quality": self.data_quality,
            "combined": self.combined,
            "sigma": self.sigma,
        }


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class UncertaintyEstimator:
    """Stateless sigma estimator."""

    def __init__(self, params: UncertaintyParameters) -> None:
        self.params = params

    def calculate_sigma(self, player: PlayerSkillInput) -> float:
        return self.estimate(player).sigma

    def estimate(self, player: PlayerSkillInput) -> UncertaintyBreakdown:
        sigma_min = self.params.sigma_min
        sigma_max = self.params.sigma_max

        experience = self.experience_factor(player)
        diversity = self.diversity_factor(player)
        consistency = self.consistency_factor(player)
        recency = self.recency_factor(player)
        peak_performance = self.peak_performance_factor(player)
        data_quality = self.data_quality_factor(player)

        combined = experience * diversity * consistency * recency * peak_performance * data_quality
        sigma = _clamp(sigma_max - combined * (sigma_max - sigma_min), sigma_min, sigma_max)

        return UncertaintyBreakdown(
            experience=experience,
            diversity=diversity,
            consistency=consistency,
            recency=recency,
            peak_performance=peak_performance,
            data_quality=data_quality,
            combined=combined,
            sigma=round_half_away(sigma, 3),
        )

    def experience_factor(self, player: PlayerSkillInput) -> float:
        return min(player.total_games / self.params.games_for_max_certainty, MAX_FACTOR)

    def diversity_factor(self, player: PlayerSkillInput) -> float:
        active_games = [
            record.total_games
            for _, record in player.records()
            if record.total_games >= self.params.min_games_threshold
        ]
        if not active_games:
            return MIN_FACTOR

        diversity = len(active_games) / len(player.records())
        if len(active_games) > 1:
            penalty = min(pvariance(active_games) / VARIANCE_PENALTY_DIVISOR, MAX_DISTRIBUTION_PENALTY)
            diversity *= 1.0 - penalty

        return _clamp(diversity, MIN_FACTOR, MAX_FACTOR)

    def consistency_factor(self, player: PlayerSkillInput) -> float:
        # Step function on total games: low-activity records get the neutral factor.
        if player.total_games < self.params.low_activity_games:
            return DEFAULT_FACTOR
        return ESTABLISHED_CONSISTENCY

    def recency_factor(self, player: PlayerSkillInput) -> float:
        current_games = player.current_games
        total_games = current_games + player.previous_games
        if total_games == 0:
            return MIN_FACTOR
        return _clamp(0.5 + 0.5 * current_games / total_games, MIN_FACTOR, MAX_FACTOR)

    def peak_performance_factor(self, player: PlayerSkillInput) -> float:
        max_peak = max(
            max(record.current.mmr, record.previous.mmr) for _, record in player.records()
        )
        if max_peak < PEAK_LOW_MMR:
            return PEAK_LOW_FACTOR
        if max_peak > PEAK_HIGH_MMR:
            return PEAK_HIGH_FACTOR
        span = PEAK_HIGH_MMR - PEAK_LOW_MMR
        return PEAK_LOW_FACTOR + (max_peak - PEAK_LOW_MMR) / span * (PEAK_HIGH_FACTOR - PEAK_LOW_FACTOR)

    def data_quality_factor(self, player: PlayerSkillInput) -> float:
        raw_fields = player.raw_fields()
        valid_fields = sum(1 for value in raw_fields if value > 0)
        return max(DATA_QUALITY_FLOOR, valid_fields / len(raw_fields))


__all__ = [
    "UncertaintyBreakdown",
    "UncertaintyEstimator",
    "UncertaintyParameters",
]
