"""Shared input types for rating seeding."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from math import copysign, floor, isfinite
from typing import Any

from skillseed.protocol import GameMode

SEASONS = ("current", "previous")


class PlayerInputValidationError(ValueError):
    """Raised when a player record cannot be rated (negative or missing values).

    ``fallback`` holds the flagged default result a caller may use instead.
    """

    def __init__(self, message: str, *, fallback: Any = None) -> None:
        super().__init__(message)
        self.fallback = fallback


@dataclass(frozen=True)
class SeasonSnapshot:
    """Peak MMR and games played in one season of one mode."""

    mmr: int = 0
    games: int = 0


@dataclass(frozen=True)
class ModeRecord:
    """Two-season snapshot of one game mode."""

    current: SeasonSnapshot = field(default_factory=SeasonSnapshot)
    previous: SeasonSnapshot = field(default_factory=SeasonSnapshot)

    @property
    def total_games(self) -> int:
        return self.current.games + self.previous.games


@dataclass(frozen=True)
class InputSummary:
    total_games: int
    max_current_peak: int
    active_mode_count: int
    has_data: bool


@dataclass(frozen=True)
class PlayerSkillInput:
    """Per-mode MMR and game counts for one player, as supplied by the caller."""

    ones: ModeRecord = field(default_factory=ModeRecord)
    twos: ModeRecord = field(default_factory=ModeRecord)
    threes: ModeRecord = field(default_factory=ModeRecord)

    def record(self, mode: GameMode) -> ModeRecord:
        return getattr(self, GameMode(mode).value)

    def records(self) -> tuple[tuple[GameMode, ModeRecord], ...]:
        return tuple((mode, self.record(mode)) for mode in GameMode)

    @property
    def total_games(self) -> int:
        return sum(record.total_games for _, record in self.records())

    @property
    def current_games(self) -> int:
        return sum(record.current.games for _, record in self.records())

    @property
    def previous_games(self) -> int:
        return sum(record.previous.games for _, record in self.records())

    def raw_fields(self) -> tuple[int, ...]:
        """The twelve raw values in tracker order (peak, games per season per mode)."""
        values: list[int] = []
        for _, record in self.records():
            for season in (record.current, record.previous):
                values.append(season.mmr)
                values.append(season.games)
        return tuple(values)

    def summary(self) -> InputSummary:
        total_games = self.total_games
        return InputSummary(
            total_games=total_games,
            max_current_peak=max(record.current.mmr for _, record in self.records()),
            active_mode_count=sum(1 for _, record in self.records() if record.total_games > 0),
            has_data=total_games > 0,
        )

    @classmethod
    def from_tracker_fields(
        cls,
        *,
        ones_current_peak: int = 0,
        ones_current_games: int = 0,
        ones_previous_peak: int = 0,
        ones_previous_games: int = 0,
        twos_current_peak: int = 0,
        twos_current_games: int = 0,
        twos_previous_peak: int = 0,
        twos_previous_games: int = 0,
        threes_current_peak: int = 0,
        threes_current_games: int = 0,
        threes_previous_peak: int = 0,
        threes_previous_games: int = 0,
    ) -> PlayerSkillInput:
        """Build an input from the flat twelve-field tracker layout."""
        return cls(
            ones=ModeRecord(
                current=SeasonSnapshot(mmr=ones_current_peak, games=ones_current_games),
                previous=SeasonSnapshot(mmr=ones_previous_peak, games=ones_previous_games),
            ),
            twos=ModeRecord(
                current=SeasonSnapshot(mmr=twos_current_peak, games=twos_current_games),
                previous=SeasonSnapshot(mmr=twos_previous_peak, games=twos_previous_games),
            ),
            threes=ModeRecord(
                current=SeasonSnapshot(mmr=threes_current_peak, games=threes_current_games),
                previous=SeasonSnapshot(mmr=threes_previous_peak, games=threes_previous_games),
            ),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> PlayerSkillInput:
        """Build an input from nested ``{mode: {season: {"mmr", "games"}}}`` data.

        Numeric strings and floats are coerced to int and missing numbers
        default to 0. Negative values are kept so validation can report them.
        """
        if data is None:
            raise PlayerInputValidationError("player record is required")
        if not isinstance(data, Mapping):
            raise PlayerInputValidationError(
                f"player record must be a mapping, got {type(data).__name__}"
            )

        records: dict[str, ModeRecord] = {}
        for mode in GameMode:
            mode_raw = data.get(mode.value) or {}
            if not isinstance(mode_raw, Mapping):
                raise PlayerInputValidationError(f"{mode.value} must be a mapping")
            seasons: dict[str, SeasonSnapshot] = {}
            for season in SEASONS:
                season_raw = mode_raw.get(season) or {}
                if not isinstance(season_raw, Mapping):
                    raise PlayerInputValidationError(f"{mode.value}.{season} must be a mapping")
                mmr_value = season_raw.get("mmr", season_raw.get("peak"))
                seasons[season] = SeasonSnapshot(
                    mmr=_coerce_int(mmr_value, path=f"{mode.value}.{season}.mmr"),
                    games=_coerce_int(season_raw.get("games"), path=f"{mode.value}.{season}.games"),
                )
            records[mode.value] = ModeRecord(**seasons)
        return cls(**records)


def validate_player_input(player: PlayerSkillInput | None) -> None:
    """Reject missing records and non-integer or negative game counts and MMR values."""
    if player is None:
        raise PlayerInputValidationError("player record is required")
    if not isinstance(player, PlayerSkillInput):
        raise PlayerInputValidationError(
            f"player record must be a PlayerSkillInput, got {type(player).__name__}"
        )

    for attribute in ("games", "mmr"):
        for mode, record in player.records():
            for season in SEASONS:
                value = getattr(getattr(record, season), attribute)
                if value is None:
                    raise PlayerInputValidationError(
                        f"{mode.value}.{season}.{attribute} is required"
                    )
                if isinstance(value, bool) or not isinstance(value, int):
                    raise PlayerInputValidationError(
                        f"{mode.value}.{season}.{attribute} must be an integer, got {value!r}"
                    )
                if value < 0:
                    raise PlayerInputValidationError(
                        f"{mode.value}.{season}.{attribute} cannot be negative: {value}"
                    )


def round_half_away(value: float, digits: int) -> float:
    """Round half away from zero at ``digits`` decimals (not banker's rounding)."""
    scale = 10 ** digits
    return copysign(floor(abs(value) * scale + 0.5), value) / scale


def _coerce_int(value: Any, *, path: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise PlayerInputValidationError(f"{path} must be a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not isfinite(value):
            raise PlayerInputValidationError(f"{path} must be finite, got {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            parsed = None
        if parsed is not None and isfinite(parsed):
            return int(parsed)
    raise PlayerInputValidationError(f"{path} must be a number, got {value!r}")


__all__ = [
    "InputSummary",
    "ModeRecord",
    "PlayerInputValidationError",
    "PlayerSkillInput",
    "SEASONS",
    "SeasonSnapshot",
    "round_half_away",
    "validate_player_input",
]
