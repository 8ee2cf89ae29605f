"""Percentile-based skill seeding for TrueSkill-style ranking systems."""

from skillseed.common import (
    ModeRecord,
    PlayerInputValidationError,
    PlayerSkillInput,
    SeasonSnapshot,
)
from skillseed.engine import RatingEngine, RatingResult, SeedingParameters
from skillseed.mmr_calculator import MMRParameters, SkillResult
from skillseed.percentile import PercentileParameters
from skillseed.protocol import GameMode, SkillTransform
from skillseed.uncertainty import UncertaintyParameters

__all__ = [
    "GameMode",
    "MMRParameters",
    "ModeRecord",
    "PercentileParameters",
    "PlayerInputValidationError",
    "PlayerSkillInput",
    "RatingEngine",
    "RatingResult",
    "SeasonSnapshot",
    "SeedingParameters",
    "SkillResult",
    "SkillTransform",
    "UncertaintyParameters",
]
