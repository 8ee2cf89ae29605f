"""Hand a seed rating to an OpenSkill (Plackett-Luce) model."""

from __future__ import annotations

from typing import Any

from openskill.models import PlackettLuce

from skillseed.engine import RatingResult


def seed_openskill_rating(
    result: RatingResult,
    *,
    model: Any | None = None,
    name: str | None = None,
):
    """Create an OpenSkill rating object carrying the seed mu/sigma.

    Without a model, a Plackett-Luce model centred on the seed is used.
    """
    if model is None:
        model = PlackettLuce(mu=result.mu, sigma=result.sigma)
    return model.rating(mu=result.mu, sigma=result.sigma, name=name)


def seed_ordinal(result: RatingResult, *, z: float = 3.0) -> float:
    """Conservative skill estimate ``mu - z * sigma`` of a seed."""
    return float(seed_openskill_rating(result).ordinal(z))


__all__ = ["seed_openskill_rating", "seed_ordinal"]
