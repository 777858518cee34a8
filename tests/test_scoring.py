from __future__ import annotations

import pytest

from fatigue_engine.models import FatigueMarkers
from fatigue_engine.scoring import calculate_fatigue_score, marker_contribution, raw_fatigue_sum


def test_worked_hypertrophy_scenario(worked_markers):
    assert raw_fatigue_sum(worked_markers, "hypertrophy") == pytest.approx(51.04)
    score = calculate_fatigue_score(worked_markers, "intermediate", "hypertrophy")
    assert score == pytest.approx(5.104)


def test_level_multiplier_applied(worked_markers):
    base = calculate_fatigue_score(worked_markers, "intermediate", "hypertrophy")
    assert calculate_fatigue_score(worked_markers, "beginner", "hypertrophy") == pytest.approx(base * 1.2)
    assert calculate_fatigue_score(worked_markers, "advanced", "hypertrophy") == pytest.approx(base * 0.8)
    assert calculate_fatigue_score(worked_markers, "elite", "hypertrophy") == pytest.approx(base * 0.7)


def test_individual_tolerance_scales_score(worked_markers):
    base = calculate_fatigue_score(worked_markers, "intermediate", "hypertrophy")
    tolerant = calculate_fatigue_score(worked_markers, "intermediate", "hypertrophy", 0.5)
    assert tolerant == pytest.approx(base * 0.5)


def test_uniform_weights_for_general_fitness(worked_markers):
    # 5 + 10 + 6 + 6 + 5 + 0.8 + 5 + 6 + 2 + 5
    assert raw_fatigue_sum(worked_markers, "general_fitness") == pytest.approx(50.8)


class TestMarkerContribution:
    def test_goodness_markers_are_inverted(self):
        assert marker_contribution("sleep_quality", 9, 1.0) == 1.0
        assert marker_contribution("technical_proficiency", 2, 1.5) == 12.0

    def test_resting_heart_rate_is_downscaled(self):
        assert marker_contribution("resting_heart_rate", 10, 1.5) == pytest.approx(1.5)

    def test_appetite_direction_does_not_matter(self):
        assert marker_contribution("appetite_changes", -3, 0.8) == marker_contribution(
            "appetite_changes", 3, 0.8
        )

    def test_direct_markers(self):
        assert marker_contribution("stress_score", 7, 1.0) == 7.0
        assert marker_contribution("strength_decrease", 20, 2.0) == 40.0


def test_clamped_inputs_score_like_boundary_values(worked_markers):
    clamped = FatigueMarkers(**{**worked_markers.model_dump(), "soreness": 15})
    boundary = FatigueMarkers(**{**worked_markers.model_dump(), "soreness": 10})
    assert calculate_fatigue_score(clamped, "advanced", "strength") == calculate_fatigue_score(
        boundary, "advanced", "strength"
    )
