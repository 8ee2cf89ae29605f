"""Unit tests for the six-factor sigma estimator."""

from __future__ import annotations

import pytest

from skillseed.common import PlayerSkillInput
from skillseed.uncertainty import UncertaintyEstimator, UncertaintyParameters


def _estimator(**overrides) -> UncertaintyEstimator:
    return UncertaintyEstimator(UncertaintyParameters(**overrides))


def test_experience_factor_saturates_at_max_certainty_games() -> None:
    estimator = _estimator()

    assert estimator.experience_factor(
        PlayerSkillInput.from_tracker_fields(twos_current_games=250)
    ) == pytest.approx(0.25)
    assert estimator.experience_factor(
        PlayerSkillInput.from_tracker_fields(twos_current_games=2000)
    ) == pytest.approx(1.0)


def test_diversity_factor_without_active_modes_is_minimum() -> None:
    estimator = _estimator()

    assert estimator.diversity_factor(
        PlayerSkillInput.from_tracker_fields(ones_current_games=9)
    ) == pytest.approx(0.3)


def test_diversity_factor_single_mode_has_no_variance_penalty() -> None:
    estimator = _estimator()

    assert estimator.diversity_factor(
        PlayerSkillInput.from_tracker_fields(twos_current_games=100)
    ) == pytest.approx(1 / 3)


def test_diversity_factor_penalizes_lopsided_game_counts() -> None:
    estimator = _estimator()
    player = PlayerSkillInput.from_tracker_fields(ones_current_games=100, twos_current_games=300)

    # population variance of (100, 300) is 10000, which caps the penalty at 0.2
    assert estimator.diversity_factor(player) == pytest.approx(2 / 3 * 0.8)


def test_diversity_factor_even_spread_is_maximum() -> None:
    estimator = _estimator()
    player = PlayerSkillInput.from_tracker_fields(
        ones_current_games=50,
        twos_current_games=50,
        threes_current_games=50,
    )

    assert estimator.diversity_factor(player) == pytest.approx(1.0)


def test_consistency_factor_steps_at_low_activity_games() -> None:
    estimator = _estimator()

    assert estimator.consistency_factor(
        PlayerSkillInput.from_tracker_fields(twos_current_games=49)
    ) == pytest.approx(0.5)
    assert estimator.consistency_factor(
        PlayerSkillInput.from_tracker_fields(twos_current_games=50)
    ) == pytest.approx(0.8)


def test_recency_factor_tracks_current_season_share() -> None:
    estimator = _estimator()

    assert estimator.recency_factor(
        PlayerSkillInput.from_tracker_fields(twos_current_games=30, twos_previous_games=10)
    ) == pytest.approx(0.875)
    assert estimator.recency_factor(
        PlayerSkillInput.from_tracker_fields(twos_previous_games=10)
    ) == pytest.approx(0.5)
    assert estimator.recency_factor(PlayerSkillInput()) == pytest.approx(0.3)


@pytest.mark.parametrize(
    ("peak", "expected"),
    [(500, 0.5), (600, 0.5), (900, 0.7), (1200, 0.9), (1300, 0.9)],
)
def test_peak_performance_factor_interpolates_between_thresholds(peak: int, expected: float) -> None:
    estimator = _estimator()

    assert estimator.peak_performance_factor(
        PlayerSkillInput.from_tracker_fields(threes_previous_peak=peak)
    ) == pytest.approx(expected)


def test_data_quality_factor_counts_non_zero_fields() -> None:
    estimator = _estimator()
    full = PlayerSkillInput.from_tracker_fields(
        **{
            f"{mode}_{season}_{kind}": 10
            for mode in ("ones", "twos", "threes")
            for season in ("current", "previous")
            for kind in ("peak", "games")
        }
    )
    partial = PlayerSkillInput.from_tracker_fields(
        ones_current_peak=800,
        ones_current_games=20,
        ones_previous_peak=790,
        ones_previous_games=15,
        twos_current_peak=900,
        twos_current_games=40,
        twos_previous_peak=880,
        twos_previous_games=35,
        threes_current_peak=700,
    )

    assert estimator.data_quality_factor(PlayerSkillInput()) == pytest.approx(0.5)
    assert estimator.data_quality_factor(full) == pytest.approx(1.0)
    assert estimator.data_quality_factor(partial) == pytest.approx(0.75)


def test_zero_input_gets_maximum_sigma() -> None:
    breakdown = _estimator().estimate(PlayerSkillInput())

    assert breakdown.combined == pytest.approx(0.0)
    assert breakdown.sigma == pytest.approx(8.333)


def test_sigma_for_established_player() -> None:
    player = PlayerSkillInput.from_tracker_fields(
        ones_current_peak=1500,
        ones_current_games=400,
        ones_previous_peak=1400,
        ones_previous_games=100,
        twos_current_peak=1500,
        twos_current_games=400,
        twos_previous_peak=1400,
        twos_previous_games=100,
        threes_current_peak=1500,
        threes_current_games=400,
        threes_previous_peak=1400,
        threes_previous_games=100,
    )

    breakdown = _estimator().estimate(player)

    assert breakdown.experience == pytest.approx(1.0)
    assert breakdown.diversity == pytest.approx(1.0)
    assert breakdown.recency == pytest.approx(0.9)
    assert breakdown.combined == pytest.approx(0.8 * 0.9 * 0.9)
    assert breakdown.sigma == pytest.approx(4.553)


def test_sigma_stays_within_configured_bounds() -> None:
    estimator = _estimator(sigma_min=1.0, sigma_max=2.0)
    players = [
        PlayerSkillInput(),
        PlayerSkillInput.from_tracker_fields(twos_current_peak=2000, twos_current_games=5000),
        PlayerSkillInput.from_tracker_fields(ones_previous_peak=300, ones_previous_games=12),
    ]

    for player in players:
        assert 1.0 <= estimator.calculate_sigma(player) <= 2.0
