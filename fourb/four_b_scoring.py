"""
4B scoring engine for fourb.

Converts SwingMetrics into Body / Brain / Bat / Ball category scores, a
weighted composite, a grade, and leak flags.

  Body  = transfer efficiency (TP + AT momentum ratios), stability, velocity
  Brain = torso -> arms timing gap, exit-velocity consistency
  Bat   = AT momentum ratio, torso deceleration, bat path consistency
  Ball  = exit velocity vs age cap, barrel rate, hard-hit rate, mishits

Every sub-score comes from a BandTable lookup (see fourb.bands), so the
bands can be audited and swapped via ScoringTables. Scores are relative to
the caller's age bracket; only "Pro" scores against the full MLB baseline.

No function here raises on bad numbers. Zero denominators, NaN, and missing
optional inputs fall back to fixed scores with a "No data" label.
"""

import logging
import math
from typing import Mapping, Optional

from fourb.models.drill import DrillFlag
from fourb.models.swing import (
    BallComponents,
    BatComponents,
    BodyComponents,
    BrainComponents,
    FourBScores,
    RawMetrics,
    SwingMetrics,
)
from fourb.utils.config import DEFAULT_TABLES, ScoringTables
from fourb.utils.constants import (
    BALL_FLOOR,
    CONSISTENCY_CV_SPAN,
    CONSISTENCY_CV_START,
    DEFAULT_AGE_GROUP,
    DEFAULT_VELOCITY_PERCENTILE,
    DRIFT_EARLY,
    DRIFT_LATE,
    DRIFT_LATE_SEVERE,
    FLAG_ARM_DOMINANT_RATIO,
    FLAG_AT_SCORE_BELOW,
    FLAG_DECEL_SCORE_AT_MOST,
    FLAG_LATE_TIMING_GAP_PCT,
    FLAG_PATH_SCORE_AT_MOST,
    FLAG_SIMULTANEOUS_GAP_PCT,
    FLAG_TP_SCORE_AT_MOST,
    GRADE_FLOOR,
    GRADE_LADDER,
    MAX_CONSISTENCY_PENALTY,
    MAX_VOLATILITY_PENALTY,
    MISHIT_ALLOWANCE,
    MISHIT_PENALTY_RATE,
    MLB_AVERAGES,
    NO_DATA,
    NO_DATA_SCORE,
    SCOUT_FLOOR,
    SCOUT_LADDER,
    SCOUT_MAX,
    SCOUT_MIN,
    STABILITY_FLOOR,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Numeric helpers
# =============================================================================

def _num(value, default: float = 0.0) -> float:
    """Coerce to a finite float, or return default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    return f if math.isfinite(f) else default


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    if not math.isfinite(value):
        return lo
    return max(lo, min(hi, value))


def _round(value: float) -> int:
    """Round half up (2.5 -> 3), matching how scores are displayed."""
    return int(math.floor(value + 0.5))


def _ratio(numerator: float, denominator: float) -> Optional[float]:
    """numerator / denominator, or None when the result would not be finite."""
    num = _num(numerator)
    den = _num(denominator)
    if den == 0:
        return None
    result = num / den
    return result if math.isfinite(result) else None


# =============================================================================
# Sub-score functions
# =============================================================================

def score_at_ratio(at_ratio: Optional[float],
                   tables: ScoringTables = DEFAULT_TABLES) -> float:
    """Score arms/torso momentum ratio. Elite band 1.5-1.8 scores 95."""
    if at_ratio is None:
        return NO_DATA_SCORE
    return tables.at_ratio_bands.score(at_ratio)


def score_tp_ratio(tp_ratio: Optional[float],
                   tables: ScoringTables = DEFAULT_TABLES) -> float:
    """Score torso/pelvis momentum ratio. Elite band 4.0-5.5 scores 95."""
    if tp_ratio is None:
        return NO_DATA_SCORE
    return tables.tp_ratio_bands.score(tp_ratio)


def score_timing_gap(gap_pct: Optional[float],
                     tables: ScoringTables = DEFAULT_TABLES) -> float:
    """Score torso->arms peak gap (% of frames to contact). Elite 8-15%."""
    if gap_pct is None:
        return NO_DATA_SCORE
    return tables.timing_gap_bands.score(gap_pct)


def score_torso_decel(decel_pct: float,
                      tables: ScoringTables = DEFAULT_TABLES) -> float:
    return tables.torso_decel_bands.score(_num(decel_pct))


def score_bat_path_consistency(bat_dir_std: float,
                               tables: ScoringTables = DEFAULT_TABLES) -> float:
    """Score bat direction std dev. Missing/NaN std scores as no repeatable path."""
    return tables.bat_path_bands.score(_num(bat_dir_std, default=math.inf))


def score_exit_velo(ev_avg: float, age_cap: float,
                    tables: ScoringTables = DEFAULT_TABLES) -> float:
    """Score average exit velocity as a fraction of the age-bracket cap."""
    pct = _ratio(ev_avg, age_cap)
    if pct is None:
        return tables.exit_velo_bands.default.score
    return tables.exit_velo_bands.score(pct)


def score_barrel_rate(barrel_rate: float,
                      tables: ScoringTables = DEFAULT_TABLES) -> float:
    return tables.barrel_rate_bands.score(_num(barrel_rate))


def score_hard_hit_rate(hard_hit_rate: float,
                        tables: ScoringTables = DEFAULT_TABLES) -> float:
    return tables.hard_hit_bands.score(_num(hard_hit_rate))


def score_stability(drift_timing: float, exit_velo_cv: float) -> float:
    """100 minus drift and volatility penalties, floored at 30.

    Drift later than 0.65 of the swing costs 35, later than 0.55 costs 20,
    earlier than 0.35 costs 10. Exit-velocity CV costs one point per
    percent, up to 25.
    """
    drift = _num(drift_timing, default=0.5)
    base = 100.0
    if drift > DRIFT_LATE_SEVERE:
        base -= 35
    elif drift > DRIFT_LATE:
        base -= 20
    elif drift < DRIFT_EARLY:
        base -= 10
    base -= min(MAX_VOLATILITY_PENALTY, max(0.0, _num(exit_velo_cv)))
    return max(STABILITY_FLOOR, base)


def score_consistency(exit_velo_cv: float) -> float:
    """Brain consistency: CV above 12% costs up to 35 points."""
    cv = _num(exit_velo_cv)
    penalty = min(
        MAX_CONSISTENCY_PENALTY,
        max(0.0, (cv - CONSISTENCY_CV_START) / CONSISTENCY_CV_SPAN) * MAX_CONSISTENCY_PENALTY,
    )
    return 100.0 - penalty


def velocity_percentile(torso_velocity: Optional[float],
                        age_caps: Mapping[str, float]) -> float:
    """Torso velocity vs MLB, scaled by what the age bracket should reach.

    Defaults to 75 when no velocity reading is present.
    """
    velo = _num(torso_velocity)
    expected = _num(age_caps.get("torso"))
    if velo <= 0 or expected <= 0:
        return DEFAULT_VELOCITY_PERCENTILE
    vs_mlb = velo / MLB_AVERAGES["torso_velocity"]
    return _clamp(vs_mlb / expected * 100)


# =============================================================================
# Grades
# =============================================================================

def get_grade(score: float) -> tuple[str, str]:
    """Map a composite score to (grade, color). Total over the real line."""
    value = _num(score, default=-math.inf)
    for threshold, grade, color in GRADE_LADDER:
        if value >= threshold:
            return grade, color
    return GRADE_FLOOR


def to_scout_grade(score: float) -> int:
    """Convert a 0-100 score to the 20-80 scout scale (50 -> 50)."""
    value = _clamp(_num(score))
    return int(_clamp(_round(SCOUT_MIN + value * (SCOUT_MAX - SCOUT_MIN) / 100),
                      SCOUT_MIN, SCOUT_MAX))


def scout_grade_label(grade: float) -> str:
    value = _num(grade, default=SCOUT_MIN)
    for threshold, label in SCOUT_LADDER:
        if value >= threshold:
            return label
    return SCOUT_FLOOR


def resolve_age_caps(age_group: Optional[str],
                     tables: ScoringTables = DEFAULT_TABLES) -> tuple[str, Mapping[str, float]]:
    """Look up an age bracket, falling back to the default bracket."""
    if isinstance(age_group, str) and age_group in tables.age_caps:
        return age_group, tables.age_caps[age_group]
    fallback = tables.default_age_group
    if fallback not in tables.age_caps:
        logger.warning(
            f"Default age group {fallback!r} has no bracket, using {DEFAULT_AGE_GROUP}"
        )
        fallback = DEFAULT_AGE_GROUP
    if age_group is not None:
        logger.warning(
            f"Unknown age group {age_group!r}, scoring against {fallback}"
        )
    return fallback, tables.age_caps[fallback]


# =============================================================================
# Leak flags
# =============================================================================

def generate_4b_flags(at_score: float, at_ratio: Optional[float],
                      tp_score: float, timing_gap_pct: Optional[float],
                      torso_decel_score: float, drift_timing: float,
                      path_score: float) -> tuple[str, ...]:
    """Translate weak 4B sub-scores into drill prescription flags."""
    flags = []
    if at_score < FLAG_AT_SCORE_BELOW:
        if at_ratio is not None and at_ratio > FLAG_ARM_DOMINANT_RATIO:
            flags.append(DrillFlag.ARM_DOMINANT.value)
        else:
            flags.append(DrillFlag.POOR_TRANSFER.value)
    if tp_score <= FLAG_TP_SCORE_AT_MOST:
        flags.append(DrillFlag.WEAK_TRANSFER.value)
    if timing_gap_pct is not None:
        if timing_gap_pct < FLAG_SIMULTANEOUS_GAP_PCT:
            flags.append(DrillFlag.SIMULTANEOUS.value)
        elif timing_gap_pct > FLAG_LATE_TIMING_GAP_PCT:
            flags.append(DrillFlag.LATE_TIMING.value)
    if torso_decel_score <= FLAG_DECEL_SCORE_AT_MOST:
        flags.append(DrillFlag.NO_DECEL.value)
    if _num(drift_timing) > DRIFT_LATE:
        flags.append(DrillFlag.DRIFT.value)
    if path_score <= FLAG_PATH_SCORE_AT_MOST:
        flags.append(DrillFlag.CASTING.value)
    return tuple(flags)


# =============================================================================
# Main calculation
# =============================================================================

def calculate_4b_scores(metrics: SwingMetrics,
                        age_group: Optional[str] = None,
                        tables: ScoringTables = DEFAULT_TABLES) -> FourBScores:
    """Compute the full 4B report for one swing or session.

    Args:
        metrics: Kinematic and outcome measurements.
        age_group: Bracket key ("10U" .. "18U", "College", "Pro"). Unknown
                   or missing keys fall back to the default bracket.
        tables: Scoring tables to use.

    Returns:
        FourBScores with every field populated.

    Raises:
        TypeError: if metrics is not a SwingMetrics.
    """
    if not isinstance(metrics, SwingMetrics):
        raise TypeError(
            f"calculate_4b_scores expects SwingMetrics, got {type(metrics).__name__}"
        )

    bracket, caps = resolve_age_caps(age_group, tables)

    tp_ratio = _ratio(metrics.torso_momentum_peak, metrics.pelvis_momentum_peak)
    at_ratio = _ratio(metrics.arms_momentum_peak, metrics.torso_momentum_peak)
    contact = _num(metrics.contact_frame)
    if contact > 0:
        timing_gap_pct = _ratio(
            _num(metrics.arms_peak_frame) - _num(metrics.torso_peak_frame), contact
        )
        timing_gap_pct = timing_gap_pct * 100 if timing_gap_pct is not None else None
    else:
        timing_gap_pct = None

    if tp_ratio is None or at_ratio is None:
        logger.debug(
            f"Momentum ratio unavailable (pelvis={metrics.pelvis_momentum_peak}, "
            f"torso={metrics.torso_momentum_peak}); using {NO_DATA!r} score"
        )

    body_w = tables.body_weights
    brain_w = tables.brain_weights
    bat_w = tables.bat_weights
    ball_w = tables.ball_weights

    # BODY
    tp_score = score_tp_ratio(tp_ratio, tables)
    at_score = score_at_ratio(at_ratio, tables)
    transfer_efficiency = (tp_score + at_score) / 2
    stability = score_stability(metrics.drift_timing, metrics.exit_velo_cv)
    velocity_pct = velocity_percentile(metrics.torso_velocity, caps)
    body = _clamp(
        transfer_efficiency * body_w["transfer_efficiency"]
        + stability * body_w["stability"]
        + velocity_pct * body_w["velocity_pct"]
    )

    # BRAIN
    timing = score_timing_gap(timing_gap_pct, tables)
    consistency = score_consistency(metrics.exit_velo_cv)
    brain = _clamp(
        timing * brain_w["timing"]
        + consistency * brain_w["consistency"]
    )

    # BAT
    torso_decel = score_torso_decel(metrics.torso_decel_pct, tables)
    path_consistency = score_bat_path_consistency(metrics.bat_direction_std, tables)
    bat = _clamp(
        at_score * bat_w["at_ratio"]
        + torso_decel * bat_w["torso_decel"]
        + path_consistency * bat_w["path_consistency"]
    )

    # BALL
    exit_velo = score_exit_velo(metrics.exit_velo_avg, caps["exit_velo"], tables)
    barrel = score_barrel_rate(metrics.barrel_rate, tables)
    hard_hit = score_hard_hit_rate(metrics.hard_hit_rate, tables)
    mishit_penalty = max(0.0, (_num(metrics.mishit_rate) - MISHIT_ALLOWANCE) * MISHIT_PENALTY_RATE)
    ball = _clamp(max(
        BALL_FLOOR,
        exit_velo * ball_w["exit_velo"]
        + barrel * ball_w["barrel_rate"]
        + hard_hit * ball_w["hard_hit"]
        - mishit_penalty,
    ))

    # COMPOSITE
    weights = tables.composite_weights
    composite = _clamp(
        body * weights["body"]
        + brain * weights["brain"]
        + bat * weights["bat"]
        + ball * weights["ball"]
    )
    grade, color = get_grade(composite)

    flags = generate_4b_flags(
        at_score, at_ratio, tp_score, timing_gap_pct,
        torso_decel, metrics.drift_timing, path_consistency,
    )

    categories = {"body": body, "brain": brain, "bat": bat, "ball": ball,
                  "composite": composite}
    scout_grades = {name: to_scout_grade(value) for name, value in categories.items()}

    logger.debug(
        f"4B scored ({bracket}): body={body:.1f} brain={brain:.1f} "
        f"bat={bat:.1f} ball={ball:.1f} composite={composite:.1f} "
        f"grade={grade} flags={list(flags)}"
    )

    return FourBScores(
        body=_round(body),
        brain=_round(brain),
        bat=_round(bat),
        ball=_round(ball),
        composite=_round(composite),
        body_components=BodyComponents(
            transfer_efficiency=_round(transfer_efficiency),
            stability=_round(stability),
            velocity_pct=_round(velocity_pct),
        ),
        brain_components=BrainComponents(
            timing=_round(timing),
            consistency=_round(consistency),
        ),
        bat_components=BatComponents(
            at_ratio=_round(at_score),
            torso_decel=_round(torso_decel),
            path_consistency=_round(path_consistency),
        ),
        ball_components=BallComponents(
            exit_velo=_round(exit_velo),
            barrel_rate=_round(barrel),
            hard_hit=_round(hard_hit),
        ),
        raw_metrics=RawMetrics(
            tp_momentum_ratio=round(tp_ratio, 2) if tp_ratio is not None else 0.0,
            at_momentum_ratio=round(at_ratio, 2) if at_ratio is not None else 0.0,
            torso_decel_pct=_num(metrics.torso_decel_pct),
            drift_timing=_num(metrics.drift_timing),
            bat_direction_std=_num(metrics.bat_direction_std),
            timing_gap_pct=round(timing_gap_pct, 1) if timing_gap_pct is not None else 0.0,
        ),
        grade=grade,
        grade_color=color,
        age_group=bracket,
        flags=flags,
        scout_grades=scout_grades,
    )
