"""
Kinetic Fingerprint scorer for fourb.

Scores a full momentum-energy time series (one row per frame, as exported
by Reboot Motion) on six weighted components:

  transfer_ratio   (25%)  torso / pelvis peak angular momentum
  timing_gap       (20%)  pelvis -> torso peak gap, % of frames to contact
  deceleration     (20%)  segments that peak before contact
  sequence_order   (15%)  ground-up firing order P -> T -> A -> B
  energy_delivery  (10%)  bat share of total kinetic energy at contact
  x_factor         (10%)  max torso-pelvis separation (degrees)

This scorer is independent of the 4B engine in fourb.four_b_scoring. The two
overlap in inputs but use different bands and weights.

Contact detection is a heuristic: the first frame where time_from_max_hand
is non-negative, else the last frame. Results whose contact lands on the
first or last frame are marked low confidence.
"""

import logging
import math
from pathlib import Path
from typing import Any, Mapping, NamedTuple, Optional, Sequence

import numpy as np
import pandas as pd

from fourb.models.drill import DrillFlag
from fourb.models.swing import ComponentScore, KineticFingerprintResult
from fourb.utils.config import DEFAULT_TABLES, ScoringTables
from fourb.utils.constants import (
    ARMS_MOMENTUM_FIELD,
    BAT_KE_FIELD,
    BAT_MOMENTUM_FIELD,
    CONTACT_SIGNAL_FIELD,
    DECEL_COUNT_SCORES,
    KF_COLOR_FLOOR,
    KF_COLOR_LADDER,
    KF_FLAG_SCORE_CUTOFF,
    KF_OVER_ROTATION_DEG,
    KF_OVER_SEPARATED_GAP_PCT,
    KF_RATING_FLOOR,
    KF_RATING_LADDER,
    KF_SIMULTANEOUS_GAP_PCT,
    NO_DATA,
    NO_DATA_SCORE,
    PELVIS_MOMENTUM_FIELD,
    PELVIS_ROT_FIELD,
    SEQUENCE_ERROR_FLOOR,
    SEQUENCE_ERROR_SCORES,
    TOTAL_KE_FIELD,
    TORSO_MOMENTUM_FIELD,
    TORSO_ROT_FIELD,
    X_FACTOR_NO_DATA_SCORE,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]

SEGMENT_CODES = ("P", "T", "A", "B")


class Peak(NamedTuple):
    value: float
    frame: int


class ComponentResult(NamedTuple):
    """Score for one component before weighting.

    `value` is the numeric measurement; `label` is its display form when
    the measurement is not a plain number ("2/3", "P→T→A→B").
    """
    score: float
    value: float
    rating: str
    label: str = ""


# =============================================================================
# Series helpers
# =============================================================================

def _to_float(raw: Any) -> float:
    """A single number or numeric string as a float, else NaN."""
    if raw is None or isinstance(raw, bool):
        return math.nan
    return float(pd.to_numeric(raw, errors="coerce"))


def _column(rows: Sequence[Row], field: str, fill: float = 0.0) -> np.ndarray:
    """Extract one field as a float array; unparseable cells become `fill`."""
    cells = pd.Series([row.get(field) for row in rows], dtype=object)
    values = np.array(pd.to_numeric(cells, errors="coerce"), dtype=float)
    values[~np.isfinite(values)] = fill
    return values


def _check_rows(rows: Any, name: str) -> Sequence[Row]:
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
        raise TypeError(f"{name} must be a sequence of row mappings")
    for row in rows:
        if not isinstance(row, Mapping):
            raise TypeError(
                f"{name} rows must be mappings, got {type(row).__name__}"
            )
    return rows


def find_peak(rows: Sequence[Row], field: str) -> Peak:
    """Peak absolute value of a field and the first frame it occurs at."""
    values = np.abs(_column(rows, field))
    if values.size == 0:
        return Peak(0.0, 0)
    frame = int(np.argmax(values))
    return Peak(float(values[frame]), frame)


def find_contact_frame(rows: Sequence[Row]) -> int:
    """First frame where time_from_max_hand >= 0, else the last frame.

    Frames with a missing or unparseable signal are skipped. An empty
    series returns 0.
    """
    if not rows:
        return 0
    signal = _column(rows, CONTACT_SIGNAL_FIELD, fill=math.nan)
    with np.errstate(invalid="ignore"):
        hits = np.flatnonzero(signal >= 0)
    if hits.size:
        return int(hits[0])
    return len(rows) - 1


def contact_confidence(contact_frame: int, num_frames: int) -> str:
    """'low' when contact landed on the first or last frame, else 'high'."""
    if num_frames <= 1 or contact_frame <= 0 or contact_frame >= num_frames - 1:
        return "low"
    return "high"


def load_series_csv(path) -> list[dict]:
    """Read a momentum-energy or inverse-kinematics CSV export into rows."""
    df = pd.read_csv(Path(path))
    return df.to_dict("records")


# =============================================================================
# Component scoring
# =============================================================================

def score_transfer_ratio(pelvis_peak: float, torso_peak: float,
                         tables: ScoringTables = DEFAULT_TABLES) -> ComponentResult:
    """Did the whip amplify? Elite torso/pelvis ratio: 1.50-1.80."""
    pelvis = _to_float(pelvis_peak)
    torso = _to_float(torso_peak)
    if not math.isfinite(pelvis) or pelvis == 0 or not math.isfinite(torso):
        return ComponentResult(NO_DATA_SCORE, 0.0, NO_DATA)
    ratio = abs(torso) / abs(pelvis)
    score, rating = tables.kf_transfer_bands.lookup(ratio)
    return ComponentResult(score, ratio, rating)


def score_timing_gap(pelvis_frame: float, torso_frame: float, contact_frame: float,
                     tables: ScoringTables = DEFAULT_TABLES) -> ComponentResult:
    """Did the segments separate? Elite pelvis->torso gap: 14-18% of contact."""
    if not contact_frame:
        return ComponentResult(NO_DATA_SCORE, 0.0, NO_DATA)
    gap = (torso_frame - pelvis_frame) / contact_frame * 100
    score, rating = tables.kf_timing_gap_bands.lookup(gap)
    return ComponentResult(score, gap, rating)


def score_deceleration(pelvis_frame: float, torso_frame: float,
                       arms_frame: float, contact_frame: float) -> ComponentResult:
    """Did the body brake so the bat could go? Counts peaks before contact."""
    count = sum(1 for frame in (pelvis_frame, torso_frame, arms_frame)
                if frame < contact_frame)
    score, rating = DECEL_COUNT_SCORES[count]
    return ComponentResult(score, float(count), rating, f"{count}/3")


def score_sequence_order(pelvis_frame: float, torso_frame: float,
                         arms_frame: float, bat_frame: float) -> ComponentResult:
    """Did it fire ground-up? Counts out-of-order segment pairs.

    A pair is out of order when the segment that should peak first
    (pelvis before torso before arms before bat) peaks strictly later.
    Simultaneous peaks are not penalized.
    """
    frames = (pelvis_frame, torso_frame, arms_frame, bat_frame)
    out_of_order = sum(
        1
        for i in range(len(frames))
        for j in range(i + 1, len(frames))
        if frames[i] > frames[j]
    )
    # Stable sort keeps ground-up order among ties
    order = sorted(range(len(frames)), key=lambda i: frames[i])
    sequence = "→".join(SEGMENT_CODES[i] for i in order)

    score, rating = SEQUENCE_ERROR_SCORES.get(out_of_order, SEQUENCE_ERROR_FLOOR)
    return ComponentResult(score, float(out_of_order), rating, sequence)


def score_energy_delivery(bat_ke: float, total_ke: float,
                          tables: ScoringTables = DEFAULT_TABLES) -> ComponentResult:
    """Did the bat get the energy? Elite: more than 45% of total at contact."""
    bat = _to_float(bat_ke)
    total = _to_float(total_ke)
    if not math.isfinite(total) or total == 0 or not math.isfinite(bat):
        return ComponentResult(NO_DATA_SCORE, 0.0, NO_DATA)
    delivery = bat / total * 100
    score, rating = tables.kf_energy_bands.lookup(delivery)
    return ComponentResult(score, delivery, rating)


def score_x_factor(pelvis_rot: Sequence[float], torso_rot: Sequence[float],
                   tables: ScoringTables = DEFAULT_TABLES) -> ComponentResult:
    """Did they create separation? Elite max torso-pelvis angle: 50-60 deg.

    Rotation series are in radians; the overlapping length is used.
    """
    pelvis = np.asarray(pelvis_rot, dtype=float)
    torso = np.asarray(torso_rot, dtype=float)
    n = min(pelvis.size, torso.size)
    if n == 0:
        return ComponentResult(X_FACTOR_NO_DATA_SCORE, 0.0, NO_DATA)
    separation = np.degrees(np.abs(torso[:n] - pelvis[:n]))
    separation = separation[np.isfinite(separation)]
    max_x_factor = float(separation.max()) if separation.size else 0.0
    max_x_factor = max(0.0, max_x_factor)
    score, rating = tables.kf_x_factor_bands.lookup(max_x_factor)
    return ComponentResult(score, max_x_factor, rating)


# =============================================================================
# Rating and flags
# =============================================================================

def get_rating(score: float) -> str:
    """Map a fingerprint total to Elite / Good / Working / Priority."""
    for threshold, rating in KF_RATING_LADDER:
        if score >= threshold:
            return rating
    return KF_RATING_FLOOR


def get_color(score: float) -> str:
    for threshold, color in KF_COLOR_LADDER:
        if score >= threshold:
            return color
    return KF_COLOR_FLOOR


def generate_flags(components: Mapping[str, ComponentScore]) -> tuple[str, ...]:
    """Emit drill prescription flags from component scores and values."""
    flags = []
    cutoff = KF_FLAG_SCORE_CUTOFF

    if components["transfer_ratio"].score < cutoff:
        flags.append(DrillFlag.WEAK_TRANSFER.value)

    timing = components["timing_gap"]
    if timing.score < cutoff and timing.raw_value < KF_SIMULTANEOUS_GAP_PCT:
        flags.append(DrillFlag.SIMULTANEOUS.value)
    if timing.raw_value > KF_OVER_SEPARATED_GAP_PCT:
        flags.append(DrillFlag.OVER_SEPARATED.value)

    if components["deceleration"].score < cutoff:
        flags.append(DrillFlag.NO_DECEL.value)
    if components["sequence_order"].score < cutoff:
        flags.append(DrillFlag.NO_SEQUENCE.value)
    if components["energy_delivery"].score < cutoff:
        flags.append(DrillFlag.ENERGY_LEAK.value)

    x_factor = components["x_factor"]
    if x_factor.score < cutoff:
        flags.append(DrillFlag.SHALLOW_XFACTOR.value)
    if x_factor.raw_value > KF_OVER_ROTATION_DEG:
        flags.append(DrillFlag.OVER_ROTATION.value)

    return tuple(flags)


# =============================================================================
# Master calculation
# =============================================================================

def calculate_kinetic_fingerprint(
    momentum_rows: Sequence[Row],
    kinematics_rows: Optional[Sequence[Row]] = None,
    tables: ScoringTables = DEFAULT_TABLES,
) -> KineticFingerprintResult:
    """Calculate the Kinetic Fingerprint for one swing.

    Args:
        momentum_rows: Rows from a momentum-energy export, one per frame.
        kinematics_rows: Rows from an inverse-kinematics export, used for
                         X-factor. Falls back to momentum_rows when None.
        tables: Scoring tables to use.

    Returns:
        KineticFingerprintResult with all six components.

    Raises:
        TypeError: if rows are not a sequence of mappings.
    """
    momentum_rows = _check_rows(momentum_rows, "momentum_rows")
    if kinematics_rows is not None:
        kinematics_rows = _check_rows(kinematics_rows, "kinematics_rows")

    # 1. Peaks per segment
    pelvis = find_peak(momentum_rows, PELVIS_MOMENTUM_FIELD)
    torso = find_peak(momentum_rows, TORSO_MOMENTUM_FIELD)
    arms = find_peak(momentum_rows, ARMS_MOMENTUM_FIELD)
    bat = find_peak(momentum_rows, BAT_MOMENTUM_FIELD)

    # 2. Contact
    contact = find_contact_frame(momentum_rows)
    confidence = contact_confidence(contact, len(momentum_rows))
    if confidence == "low":
        logger.warning(
            f"Contact frame {contact} of {len(momentum_rows)} is at the edge "
            f"of the series; fingerprint is low confidence"
        )

    # 3. Energy at contact
    if momentum_rows:
        bat_ke = float(_column(momentum_rows, BAT_KE_FIELD, fill=math.nan)[contact])
        total_ke = float(_column(momentum_rows, TOTAL_KE_FIELD, fill=math.nan)[contact])
    else:
        bat_ke = total_ke = math.nan

    # 4. Rotation series for X-factor
    rotation_rows = kinematics_rows if kinematics_rows is not None else momentum_rows
    pelvis_rot = _column(rotation_rows, PELVIS_ROT_FIELD)
    torso_rot = _column(rotation_rows, TORSO_ROT_FIELD)

    # 5. Components
    weights = tables.kf_weights
    results = {
        "transfer_ratio": score_transfer_ratio(pelvis.value, torso.value, tables),
        "timing_gap": score_timing_gap(pelvis.frame, torso.frame, contact, tables),
        "deceleration": score_deceleration(pelvis.frame, torso.frame, arms.frame, contact),
        "sequence_order": score_sequence_order(pelvis.frame, torso.frame, arms.frame, bat.frame),
        "energy_delivery": score_energy_delivery(bat_ke, total_ke, tables),
        "x_factor": score_x_factor(pelvis_rot, torso_rot, tables),
    }
    display = {
        "transfer_ratio": lambda r: f"{r.value:.2f}",
        "timing_gap": lambda r: f"{r.value:.1f}%",
        "deceleration": lambda r: r.label,
        "sequence_order": lambda r: r.label,
        "energy_delivery": lambda r: f"{r.value:.1f}%",
        "x_factor": lambda r: f"{r.value:.1f}°",
    }
    components = {
        name: ComponentScore(
            score=result.score,
            weight=weights[name],
            value=display[name](result),
            rating=result.rating,
            raw_value=result.value,
        )
        for name, result in results.items()
    }

    # 6. Weighted total
    total = sum(c.score * c.weight for c in components.values())
    total = int(math.floor(max(0.0, min(100.0, total)) + 0.5))

    flags = generate_flags(components)

    logger.debug(
        f"Kinetic fingerprint: total={total} contact={contact} "
        f"sequence={components['sequence_order'].value} flags={list(flags)}"
    )

    return KineticFingerprintResult(
        total=total,
        components=components,
        rating=get_rating(total),
        color=get_color(total),
        flags=flags,
        contact_frame=contact,
        contact_confidence=confidence,
    )
