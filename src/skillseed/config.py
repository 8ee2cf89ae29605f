"""Load seeding system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from skillseed.config_base import BaseSystemConfig, load_system_configs, parse_system_metadata
from skillseed.engine import SeedingParameters
from skillseed.mmr_calculator import MMRParameters
from skillseed.percentile import PercentileParameters
from skillseed.protocol import GameMode, SkillTransform
from skillseed.ranks import RANK_DISTRIBUTIONS
from skillseed.uncertainty import UncertaintyParameters

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "seeding"


@dataclass(frozen=True)
class SeedingSystemConfig(BaseSystemConfig):
    """Configuration for one named seeding system."""

    parameters: SeedingParameters

    def as_config_json(self) -> dict[str, Any]:
        percentile = self.parameters.percentile
        mmr = self.parameters.mmr
        uncertainty = self.parameters.uncertainty
        return {
            "power_factor": percentile.power_factor,
            "mu_min": percentile.mu_min,
            "mu_max": percentile.mu_max,
            "transform": percentile.transform.value,
            "default_playlist": percentile.default_playlist,
            "skill_range": percentile.skill_range,
            "min_games_threshold": mmr.min_games_threshold,
            "ones_weight": mmr.ones_weight,
            "twos_weight": mmr.twos_weight,
            "threes_weight": mmr.threes_weight,
            "sigma_min": uncertainty.sigma_min,
            "sigma_max": uncertainty.sigma_max,
            "uncertainty_min_games_threshold": uncertainty.min_games_threshold,
            "games_for_max_certainty": uncertainty.games_for_max_certainty,
            "low_activity_games": uncertainty.low_activity_games,
        }


def load_seeding_system_configs(config_dir: Path = DEFAULT_CONFIG_DIR) -> list[SeedingSystemConfig]:
    """Load and validate all seeding system TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_seeding_system_config,
        duplicate_name_label="seeding",
    )


def find_system_config(configs: list[SeedingSystemConfig], name: str) -> SeedingSystemConfig:
    for config in configs:
        if config.name == name:
            return config
    available = ", ".join(config.name for config in configs)
    raise KeyError(f"No seeding system named '{name}'. Available: {available}")


def _parse_transform(value: Any, *, file_path: Path) -> SkillTransform:
    normalized = str(value).strip().lower()
    try:
        return SkillTransform(normalized)
    except ValueError:
        allowed = ", ".join(transform.value for transform in SkillTransform)
        raise ValueError(f"{file_path}: [percentile].transform must be one of: {allowed}") from None


def _parse_playlist(value: Any, *, file_path: Path) -> str:
    normalized = str(value).strip()
    if normalized in RANK_DISTRIBUTIONS:
        return normalized
    try:
        return GameMode(normalized.lower()).playlist
    except ValueError:
        allowed = ", ".join(RANK_DISTRIBUTIONS)
        raise ValueError(
            f"{file_path}: [percentile].default_playlist must be one of: {allowed}"
        ) from None


def _parse_seeding_system_config(raw: dict[str, Any], file_path: Path) -> SeedingSystemConfig:
    name, description = parse_system_metadata(raw, file_path)

    percentile_raw = raw.get("percentile", {})
    mmr_raw = raw.get("mmr", {})
    uncertainty_raw = raw.get("uncertainty", {})

    percentile = PercentileParameters(
        power_factor=float(percentile_raw.get("power_factor", 1.5)),
        mu_min=float(percentile_raw.get("mu_min", 800.0)),
        mu_max=float(percentile_raw.get("mu_max", 2200.0)),
        transform=_parse_transform(percentile_raw.get("transform", "power"), file_path=file_path),
        default_playlist=_parse_playlist(
            percentile_raw.get("default_playlist", GameMode.TWOS.playlist),
            file_path=file_path,
        ),
        skill_range=float(percentile_raw.get("skill_range", 100.0)),
    )
    mmr = MMRParameters(
        min_games_threshold=int(mmr_raw.get("min_games_threshold", 10)),
        ones_weight=float(mmr_raw.get("ones_weight", 1.0)),
        twos_weight=float(mmr_raw.get("twos_weight", 1.5)),
        threes_weight=float(mmr_raw.get("threes_weight", 1.2)),
    )
    uncertainty = UncertaintyParameters(
        sigma_min=float(uncertainty_raw.get("sigma_min", 2.5)),
        sigma_max=float(uncertainty_raw.get("sigma_max", 8.333)),
        min_games_threshold=int(
            uncertainty_raw.get("min_games_threshold", mmr.min_games_threshold)
        ),
        games_for_max_certainty=int(uncertainty_raw.get("games_for_max_certainty", 1000)),
        low_activity_games=int(uncertainty_raw.get("low_activity_games", 50)),
    )
    _validate_percentile(file_path=file_path, parameters=percentile)
    _validate_mmr(file_path=file_path, parameters=mmr)
    _validate_uncertainty(file_path=file_path, parameters=uncertainty)

    return SeedingSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=SeedingParameters(percentile=percentile, mmr=mmr, uncertainty=uncertainty),
    )


def _validate_percentile(*, file_path: Path, parameters: PercentileParameters) -> None:
    if parameters.power_factor <= 0.0:
        raise ValueError(f"{file_path}: [percentile].power_factor must be > 0")
    if parameters.mu_min < 0.0:
        raise ValueError(f"{file_path}: [percentile].mu_min must be >= 0")
    if parameters.mu_max <= parameters.mu_min:
        raise ValueError(f"{file_path}: [percentile].mu_max must be > mu_min")
    if parameters.skill_range <= 0.0:
        raise ValueError(f"{file_path}: [percentile].skill_range must be > 0")


def _validate_mmr(*, file_path: Path, parameters: MMRParameters) -> None:
    if parameters.min_games_threshold < 0:
        raise ValueError(f"{file_path}: [mmr].min_games_threshold must be >= 0")
    for mode, weight in parameters.weights().items():
        if weight < 0.0:
            raise ValueError(f"{file_path}: [mmr].{mode}_weight must be >= 0")
    if not any(weight > 0.0 for weight in parameters.weights().values()):
        raise ValueError(f"{file_path}: [mmr] needs at least one weight > 0")


def _validate_uncertainty(*, file_path: Path, parameters: UncertaintyParameters) -> None:
    if parameters.sigma_min <= 0.0:
        raise ValueError(f"{file_path}: [uncertainty].sigma_min must be > 0")
    if parameters.sigma_max <= parameters.sigma_min:
        raise ValueError(f"{file_path}: [uncertainty].sigma_max must be > sigma_min")
    if parameters.min_games_threshold < 0:
        raise ValueError(f"{file_path}: [uncertainty].min_games_threshold must be >= 0")
    if parameters.games_for_max_certainty <= 0:
        raise ValueError(f"{file_path}: [uncertainty].games_for_max_certainty must be > 0")
    if parameters.low_activity_games < 0:
        raise ValueError(f"{file_path}: [uncertainty].low_activity_games must be >= 0")


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "SeedingSystemConfig",
    "find_system_config",
    "load_seeding_system_configs",
]
