"""Tests for end-to-end seed rating computation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging

import pytest

from skillseed.common import (
    ModeRecord,
    PlayerInputValidationError,
    PlayerSkillInput,
    SeasonSnapshot,
)
from skillseed.config import DEFAULT_CONFIG_DIR, find_system_config, load_seeding_system_configs
from skillseed.engine import RatingEngine, SeedingParameters
from skillseed.protocol import RatingSeeder


def _legacy_engine() -> RatingEngine:
    config = find_system_config(
        load_seeding_system_configs(DEFAULT_CONFIG_DIR),
        "legacy_production",
    )
    return RatingEngine(config.parameters)


def _sample_players() -> list[PlayerSkillInput]:
    players = [PlayerSkillInput()]
    for mmr in (0, 150, 420, 800, 1100, 1450, 1900, 2600):
        for games in (0, 9, 10, 250, 3000):
            players.append(
                PlayerSkillInput.from_tracker_fields(
                    ones_current_peak=mmr,
                    ones_current_games=games,
                    twos_current_peak=mmr,
                    twos_previous_peak=max(mmr - 100, 0),
                    twos_previous_games=games,
                    threes_previous_peak=mmr,
                    threes_previous_games=games // 2,
                )
            )
    return players


def test_engine_satisfies_rating_seeder_protocol() -> None:
    assert isinstance(RatingEngine(SeedingParameters()), RatingSeeder)


def test_rating_stays_within_mu_and_sigma_bounds() -> None:
    engine = RatingEngine(SeedingParameters())

    for player in _sample_players():
        result = engine.compute_rating(player)
        assert 800.0 <= result.mu <= 2200.0
        assert 2.5 <= result.sigma <= 8.333
        assert 0.0 <= result.skill_result.normalized_skill <= 100.0


def test_mu_never_decreases_when_mmr_increases() -> None:
    engine = RatingEngine(SeedingParameters())

    previous_mu = 0.0
    for mmr in range(25, 2500, 25):
        result = engine.compute_rating(
            PlayerSkillInput.from_tracker_fields(twos_current_peak=mmr, twos_current_games=100)
        )
        assert result.mu >= previous_mu
        previous_mu = result.mu


def test_rating_is_idempotent() -> None:
    engine = RatingEngine(SeedingParameters())
    player = PlayerSkillInput.from_tracker_fields(
        ones_current_peak=880,
        ones_current_games=60,
        threes_current_peak=1040,
        threes_current_games=210,
        threes_previous_peak=990,
        threes_previous_games=180,
    )

    first = engine.compute_rating(player)
    second = engine.compute_rating(player)

    assert first == second
    assert first.as_dict()["mu"] == second.as_dict()["mu"]


def test_concurrent_ratings_match_sequential_ratings() -> None:
    engine = RatingEngine(SeedingParameters())
    players = _sample_players()

    sequential = [engine.compute_rating(player) for player in players]
    with ThreadPoolExecutor(max_workers=4) as executor:
        concurrent = list(executor.map(engine.compute_rating, players))

    assert concurrent == sequential


def test_zero_input_gets_neutral_skill_and_maximum_sigma(caplog: pytest.LogCaptureFixture) -> None:
    engine = RatingEngine(SeedingParameters())

    with caplog.at_level(logging.INFO, logger="skillseed.engine"):
        result = engine.compute_rating(PlayerSkillInput())

    assert result.skill_result.normalized_skill == pytest.approx(50.0)
    assert result.mu == pytest.approx(1500.0)
    assert result.sigma == pytest.approx(8.333)
    assert result.is_degenerate
    assert not result.is_fallback
    assert "No games on record" in caplog.text


def test_negative_input_raises_with_flagged_fallback() -> None:
    engine = RatingEngine(SeedingParameters())
    player = PlayerSkillInput.from_tracker_fields(ones_previous_peak=-5)

    with pytest.raises(PlayerInputValidationError, match="ones.previous.mmr cannot be negative") as exc_info:
        engine.compute_rating(player)

    fallback = exc_info.value.fallback
    assert fallback.is_fallback
    assert fallback.mu == pytest.approx(1000.0)
    assert fallback.sigma == pytest.approx(8.333)
    assert fallback.skill_result.total_games == 0
    assert fallback.uncertainty is None


def test_games_are_validated_before_mmr() -> None:
    engine = RatingEngine(SeedingParameters())
    player = PlayerSkillInput.from_tracker_fields(ones_current_peak=-1, threes_previous_games=-2)

    with pytest.raises(PlayerInputValidationError, match="threes.previous.games"):
        engine.compute_rating(player)


def test_non_integer_value_is_rejected_with_fallback() -> None:
    engine = RatingEngine(SeedingParameters())
    player = PlayerSkillInput(ones=ModeRecord(current=SeasonSnapshot(mmr="800", games=20)))

    with pytest.raises(PlayerInputValidationError, match="ones.current.mmr must be an integer"):
        engine.compute_rating(player)

    result = engine.compute_rating_or_fallback(player)
    assert result.is_fallback
    assert result.mu == pytest.approx(1000.0)


def test_boolean_value_is_rejected_with_fallback() -> None:
    engine = RatingEngine(SeedingParameters())
    player = PlayerSkillInput(twos=ModeRecord(previous=SeasonSnapshot(mmr=True, games=True)))

    result = engine.compute_rating_or_fallback(player)

    assert result.is_fallback
    assert result.skill_result.total_games == 0
    assert result.skill_result.error == "twos.previous.games must be an integer, got True"


def test_compute_rating_or_fallback_returns_fallback(caplog: pytest.LogCaptureFixture) -> None:
    engine = RatingEngine(SeedingParameters())

    with caplog.at_level(logging.WARNING, logger="skillseed.engine"):
        result = engine.compute_rating_or_fallback(None)

    assert result.is_fallback
    assert result.mu == pytest.approx(1000.0)
    assert result.skill_result.error == "player record is required"
    assert "using fallback rating" in caplog.text


def test_result_as_dict_carries_breakdown_and_factors() -> None:
    engine = RatingEngine(SeedingParameters())

    payload = engine.compute_rating(
        PlayerSkillInput.from_tracker_fields(twos_current_peak=1300, twos_current_games=120)
    ).as_dict()

    assert set(payload["skill_result"]["breakdown"]) == {"ones", "twos", "threes"}
    assert payload["skill_result"]["aggregation_method"] == "percentile-based"
    assert "fallback" not in payload["skill_result"]
    assert payload["uncertainty"]["sigma"] == payload["sigma"]
    assert payload["computed_at"]


@pytest.mark.parametrize(
    ("fields", "expected_mu"),
    [
        (
            {
                "ones_current_peak": 800,
                "ones_current_games": 14,
                "ones_previous_peak": 799,
                "ones_previous_games": 37,
                "twos_current_peak": 1142,
                "twos_current_games": 13,
                "twos_previous_peak": 1133,
                "twos_previous_games": 60,
                "threes_current_peak": 1110,
                "threes_current_games": 11,
                "threes_previous_peak": 1167,
                "threes_previous_games": 42,
            },
            1805.78,
        ),
        (
            {
                "ones_current_peak": 1140,
                "ones_current_games": 0,
                "ones_previous_peak": 1184,
                "ones_previous_games": 23,
                "twos_current_peak": 1660,
                "twos_current_games": 0,
                "twos_previous_peak": 2002,
                "twos_previous_games": 170,
                "threes_current_peak": 1559,
                "threes_current_games": 0,
                "threes_previous_peak": 1753,
                "threes_previous_games": 110,
            },
            1998.65,
        ),
        (
            {
                "ones_current_peak": 1365,
                "ones_current_games": 351,
                "ones_previous_peak": 1311,
                "ones_previous_games": 931,
                "twos_current_peak": 1801,
                "twos_current_games": 728,
                "twos_previous_peak": 1885,
                "twos_previous_games": 772,
                "threes_current_peak": 1398,
                "threes_current_games": 5,
                "threes_previous_peak": 1444,
                "threes_previous_games": 1,
            },
            1998.54,
        ),
    ],
)
def test_legacy_production_profile_matches_known_players(
    fields: dict[str, int],
    expected_mu: float,
) -> None:
    result = _legacy_engine().compute_rating(PlayerSkillInput.from_tracker_fields(**fields))

    assert result.mu == pytest.approx(expected_mu, abs=50.0)
