"""
Tests for the 4B scoring engine.

Validates:
  - Sub-score bands (AT ratio, TP ratio, timing gap, decel, path, ball)
  - Full 4B calculation for a reference elite swing
  - Leak flags from weak sub-scores
  - Degraded inputs (zero pelvis, NaN) never raise or leave the 0-100 range
  - Age brackets, grades and scout grades
"""

import logging
import math
from dataclasses import replace

import pytest

from fourb.bands import BandTable, otherwise
from fourb.four_b_scoring import (
    calculate_4b_scores,
    get_grade,
    resolve_age_caps,
    score_at_ratio,
    score_bat_path_consistency,
    score_consistency,
    score_exit_velo,
    score_stability,
    score_timing_gap,
    score_torso_decel,
    score_tp_ratio,
    scout_grade_label,
    to_scout_grade,
    velocity_percentile,
)
from fourb.models.swing import SwingMetrics
from fourb.utils.config import DEFAULT_TABLES
from fourb.utils.constants import AGE_CAPS, GRADE_LADDER


def make_metrics(**overrides) -> SwingMetrics:
    """Reference elite swing: every sub-score in its top band."""
    values = dict(
        pelvis_momentum_peak=100.0,
        torso_momentum_peak=450.0,      # TP 4.5
        arms_momentum_peak=742.5,       # AT 1.65
        pelvis_peak_frame=40,
        torso_peak_frame=50,
        arms_peak_frame=60,
        contact_frame=100,              # gap 10%
        pelvis_decel_pct=40.0,
        torso_decel_pct=50.0,
        drift_timing=0.5,
        bat_direction_std=8.0,
        exit_velo_avg=80.0,
        exit_velo_max=88.0,
        exit_velo_cv=5.0,
        barrel_rate=30.0,
        hard_hit_rate=55.0,
        mishit_rate=10.0,
    )
    values.update(overrides)
    return SwingMetrics(**values)


class TestSubScores:
    """Tests for individual band lookups."""

    def test_at_ratio_elite(self):
        assert score_at_ratio(1.65) == 95

    def test_at_ratio_below_floor(self):
        assert score_at_ratio(0.9) == 45

    @pytest.mark.parametrize("ratio,expected", [
        (1.5, 95), (1.8, 95), (1.3, 80), (1.9, 80), (1.2, 65),
        (2.2, 55), (2.5, 40),
    ])
    def test_at_ratio_bands(self, ratio, expected):
        assert score_at_ratio(ratio) == expected

    def test_at_ratio_missing(self):
        assert score_at_ratio(None) == 40

    @pytest.mark.parametrize("ratio,expected", [
        (4.5, 95), (6.0, 80), (3.7, 80), (7.0, 65), (8.0, 50), (3.0, 55), (10.0, 40),
    ])
    def test_tp_ratio_bands(self, ratio, expected):
        assert score_tp_ratio(ratio) == expected

    @pytest.mark.parametrize("gap,expected", [
        (10, 90), (6, 75), (18, 75), (2, 55), (22, 55), (-5, 40), (40, 45),
    ])
    def test_timing_gap_bands(self, gap, expected):
        assert score_timing_gap(gap) == expected

    def test_torso_decel(self):
        assert score_torso_decel(45) == 95
        assert score_torso_decel(26) == 55
        assert score_torso_decel(10) == 45

    def test_bat_path_missing_is_worst(self):
        assert score_bat_path_consistency(None) == 25
        assert score_bat_path_consistency(math.nan) == 25
        assert score_bat_path_consistency(9.9) == 95

    def test_exit_velo_relative_to_cap(self):
        assert score_exit_velo(72, 72) == 95
        assert score_exit_velo(45, 72) == 55     # 0.625 of cap
        assert score_exit_velo(80, 0) == 45      # no cap, default arm

    def test_stability_penalties(self):
        assert score_stability(0.5, 0) == 100
        assert score_stability(0.7, 0) == 65
        assert score_stability(0.6, 0) == 80
        assert score_stability(0.3, 0) == 90
        assert score_stability(0.7, 100) == 40   # volatility capped at 25
        assert score_stability(0.7, 25) >= 30

    def test_consistency(self):
        assert score_consistency(5) == 100
        assert score_consistency(27) == pytest.approx(82.5)
        assert score_consistency(200) == 65

    def test_velocity_percentile_default(self):
        assert velocity_percentile(None, AGE_CAPS["13U"]) == 75

    def test_velocity_percentile_clamped(self):
        assert velocity_percentile(803.9, AGE_CAPS["10U"]) == 100
        assert velocity_percentile(803.9, AGE_CAPS["Pro"]) == pytest.approx(100)


class TestCalculate4BScores:
    """Tests for the full 4B calculation."""

    def test_elite_swing(self):
        scores = calculate_4b_scores(make_metrics())
        assert scores.body == 92
        assert scores.brain == 95
        assert scores.bat == 95
        assert scores.ball == 95
        assert scores.composite == 94
        assert scores.grade == "Plus-Plus"
        assert scores.age_group == "13U"
        assert scores.flags == ()

    def test_components_populated(self):
        scores = calculate_4b_scores(make_metrics())
        assert scores.body_components.transfer_efficiency == 95
        assert scores.body_components.velocity_pct == 75
        assert scores.bat_components.at_ratio == 95
        assert scores.raw_metrics.tp_momentum_ratio == 4.5
        assert scores.raw_metrics.at_momentum_ratio == 1.65
        assert scores.raw_metrics.timing_gap_pct == 10.0

    def test_scout_grades(self):
        scores = calculate_4b_scores(make_metrics())
        assert scores.scout_grades["composite"] == 76
        assert all(20 <= g <= 80 for g in scores.scout_grades.values())

    def test_deterministic(self):
        m = make_metrics(exit_velo_cv=17.3, drift_timing=0.61)
        assert calculate_4b_scores(m) == calculate_4b_scores(m)

    def test_rejects_plain_dict(self):
        with pytest.raises(TypeError):
            calculate_4b_scores({"pelvis_momentum_peak": 1.0})

    def test_zero_pelvis_is_safe(self):
        scores = calculate_4b_scores(make_metrics(pelvis_momentum_peak=0))
        assert scores.raw_metrics.tp_momentum_ratio == 0.0
        assert 0 <= scores.body <= 100
        assert "flag_weak_transfer" in scores.flags

    def test_nan_inputs_stay_in_range(self):
        nan = float("nan")
        m = make_metrics(**{name: nan for name in (
            "pelvis_momentum_peak", "torso_momentum_peak", "arms_momentum_peak",
            "contact_frame", "torso_decel_pct", "drift_timing",
            "bat_direction_std", "exit_velo_avg", "exit_velo_cv",
            "barrel_rate", "hard_hit_rate", "mishit_rate",
        )})
        scores = calculate_4b_scores(m)
        for value in (scores.body, scores.brain, scores.bat, scores.ball,
                      scores.composite):
            assert 0 <= value <= 100

    def test_zero_contact_frame_uses_no_data_timing(self):
        scores = calculate_4b_scores(make_metrics(contact_frame=0))
        assert scores.brain_components.timing == 40
        assert scores.raw_metrics.timing_gap_pct == 0.0

    def test_mishits_cost_ball_points(self):
        clean = calculate_4b_scores(make_metrics(mishit_rate=10))
        sloppy = calculate_4b_scores(make_metrics(mishit_rate=35))
        assert sloppy.ball == clean.ball - 10

    def test_age_bracket_changes_ball(self):
        youth = calculate_4b_scores(make_metrics(exit_velo_avg=72), age_group="13U")
        pro = calculate_4b_scores(make_metrics(exit_velo_avg=72), age_group="Pro")
        assert pro.ball < youth.ball

    def test_unknown_age_group_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            scores = calculate_4b_scores(make_metrics(), age_group="99U")
        assert scores.age_group == "13U"
        assert "99U" in caplog.text

    def test_injected_tables(self):
        tables = replace(
            DEFAULT_TABLES,
            at_ratio_bands=BandTable((), default=otherwise(12, "Flat")),
        )
        assert score_at_ratio(1.65, tables) == 12
        scores = calculate_4b_scores(make_metrics(), tables=tables)
        assert scores.bat_components.at_ratio == 12

    def test_injected_category_weights(self):
        tables = replace(
            DEFAULT_TABLES,
            brain_weights={"timing": 1.0, "consistency": 0.0},
        )
        scores = calculate_4b_scores(make_metrics(exit_velo_cv=40.0), tables=tables)
        assert scores.brain == scores.brain_components.timing
        default = calculate_4b_scores(make_metrics(exit_velo_cv=40.0))
        assert default.brain < scores.brain

    def test_missing_default_bracket_falls_back(self, caplog):
        tables = replace(DEFAULT_TABLES, default_age_group="14u")
        with caplog.at_level(logging.WARNING):
            scores = calculate_4b_scores(make_metrics(), tables=tables)
        assert scores.age_group == "13U"
        assert "14u" in caplog.text


class TestFlags:
    """Tests for leak flag generation."""

    def test_arm_dominant(self):
        scores = calculate_4b_scores(make_metrics(arms_momentum_peak=450 * 2.5))
        assert "flag_arm_dominant" in scores.flags
        assert "flag_poor_transfer" not in scores.flags

    def test_poor_transfer(self):
        scores = calculate_4b_scores(make_metrics(arms_momentum_peak=450 * 1.0))
        assert "flag_poor_transfer" in scores.flags

    def test_weak_transfer(self):
        scores = calculate_4b_scores(make_metrics(
            torso_momentum_peak=300, arms_momentum_peak=495))
        assert "flag_weak_transfer" in scores.flags

    def test_simultaneous(self):
        scores = calculate_4b_scores(make_metrics(arms_peak_frame=51))
        assert "flag_simultaneous" in scores.flags

    def test_late_timing(self):
        scores = calculate_4b_scores(make_metrics(arms_peak_frame=75))
        assert "flag_late_timing" in scores.flags

    def test_no_decel(self):
        scores = calculate_4b_scores(make_metrics(torso_decel_pct=20))
        assert "flag_no_decel" in scores.flags

    def test_drift(self):
        scores = calculate_4b_scores(make_metrics(drift_timing=0.6))
        assert "flag_drift" in scores.flags

    def test_casting(self):
        scores = calculate_4b_scores(make_metrics(bat_direction_std=40))
        assert "flag_casting" in scores.flags

    def test_timing_flag_edges(self):
        assert "flag_simultaneous" not in calculate_4b_scores(
            make_metrics(arms_peak_frame=56)).flags
        assert "flag_simultaneous" in calculate_4b_scores(
            make_metrics(arms_peak_frame=54)).flags
        assert "flag_late_timing" not in calculate_4b_scores(
            make_metrics(arms_peak_frame=69)).flags
        assert "flag_late_timing" in calculate_4b_scores(
            make_metrics(arms_peak_frame=71)).flags


class TestGrades:
    """Tests for grade and scout-grade mapping."""

    @pytest.mark.parametrize("score,grade", [
        (95, "Plus-Plus"), (80, "Plus-Plus"), (79.9, "Plus"), (65, "Above Average"),
        (50, "Average"), (45, "Below Average"), (10, "Developing"),
    ])
    def test_grade_ladder(self, score, grade):
        assert get_grade(score)[0] == grade

    def test_grade_monotonic(self):
        order = [g for _, g, _ in reversed(GRADE_LADDER)]
        order.insert(0, "Developing")
        previous = 0
        for score in range(-10, 111):
            rank = order.index(get_grade(score)[0])
            assert rank >= previous
            previous = rank

    def test_grade_nan(self):
        assert get_grade(float("nan"))[0] == "Developing"

    @pytest.mark.parametrize("score,grade", [
        (0, 20), (50, 50), (100, 80), (-30, 20), (250, 80),
    ])
    def test_scout_grade(self, score, grade):
        assert to_scout_grade(score) == grade

    def test_scout_grade_nan(self):
        assert to_scout_grade(float("nan")) == 20

    @pytest.mark.parametrize("grade,label", [
        (80, "Plus-Plus"), (60, "Plus"), (55, "Above Avg"), (50, "Average"),
        (45, "Below Avg"), (40, "Fringe"), (20, "Well Below"),
    ])
    def test_scout_labels(self, grade, label):
        assert scout_grade_label(grade) == label

    def test_resolve_age_caps_default(self):
        bracket, caps = resolve_age_caps(None)
        assert bracket == "13U"
        assert caps["exit_velo"] == 72
