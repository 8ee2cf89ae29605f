"""Seed rating orchestration: skill (mu) plus uncertainty (sigma) for one player."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from skillseed.common import PlayerInputValidationError, PlayerSkillInput, validate_player_input
from skillseed.mmr_calculator import MMRCalculator, MMRParameters, SkillResult
from skillseed.percentile import PercentileConverter, PercentileParameters
from skillseed.uncertainty import UncertaintyBreakdown, UncertaintyEstimator, UncertaintyParameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedingParameters:
    percentile: PercentileParameters = field(default_factory=PercentileParameters)
    mmr: MMRParameters = field(default_factory=MMRParameters)
    uncertainty: UncertaintyParameters = field(default_factory=UncertaintyParameters)


@dataclass(frozen=True)
class RatingResult:
    """Seed rating for one player. ``computed_at`` does not take part in equality."""

    mu: float
    sigma: float
    skill_result: SkillResult
    uncertainty: UncertaintyBreakdown | None = None
    computed_at: datetime = field(default_factory=lambda: datetime.now(UTC), compare=False)

    @property
    def is_fallback(self) -> bool:
        return self.skill_result.is_fallback

    @property
    def is_degenerate(self) -> bool:
        """True when the record carried no games at all (neutral skill, maximum sigma)."""
        return not self.is_fallback and self.skill_result.total_games == 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "mu": self.mu,
            "sigma": self.sigma,
            "skill_result": self.skill_result.as_dict(),
            "uncertainty": None if self.uncertainty is None else self.uncertainty.as_dict(),
            "computed_at": self.computed_at.isoformat(),
        }


class RatingEngine:
    """Pure seed-rating computation; safe to share across threads."""

    def __init__(self, params: SeedingParameters) -> None:
        self.params = params
        self.converter = PercentileConverter(params.percentile)
        self.mmr_calculator = MMRCalculator(params.mmr, self.converter)
        self.uncertainty_estimator = UncertaintyEstimator(params.uncertainty)

    def compute_rating(self, player: PlayerSkillInput | None) -> RatingResult:
        """Compute (mu, sigma) for a player record.

        Raises PlayerInputValidationError for missing or negative values; the
        error's ``fallback`` attribute holds the flagged default RatingResult.
        """
        try:
            validate_player_input(player)
        except PlayerInputValidationError as exc:
            raise PlayerInputValidationError(str(exc), fallback=self.fallback_rating(str(exc))) from exc

        skill_result = self.mmr_calculator.calculate(player)
        uncertainty = self.uncertainty_estimator.estimate(player)

        result = RatingResult(
            mu=skill_result.mu,
            sigma=uncertainty.sigma,
            skill_result=skill_result,
            uncertainty=uncertainty,
        )
        if result.is_degenerate:
            logger.info("No games on record, seeding neutral skill mu=%.2f sigma=%.3f", result.mu, result.sigma)
        logger.debug(
            "Seed rating mu=%.2f sigma=%.3f total_games=%d",
            result.mu,
            result.sigma,
            skill_result.total_games,
        )
        return result

    def compute_rating_or_fallback(self, player: PlayerSkillInput | None) -> RatingResult:
        """Like compute_rating, but returns the flagged fallback instead of raising."""
        try:
            return self.compute_rating(player)
        except PlayerInputValidationError as exc:
            logger.warning("Invalid player record, using fallback rating: %s", exc)
            return exc.fallback

    def fallback_rating(self, error: str) -> RatingResult:
        skill_result = self.mmr_calculator.fallback_result(error)
        return RatingResult(
            mu=skill_result.mu,
            sigma=self.params.uncertainty.sigma_max,
            skill_result=skill_result,
        )


__all__ = [
    "RatingEngine",
    "RatingResult",
    "SeedingParameters",
]
