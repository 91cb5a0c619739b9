"""
Data models for swing scoring in fourb.

SwingMetrics: Per-swing or per-session kinematic summary (scorer input).
FourBScores: Body / Brain / Bat / Ball category scores and composite.
ComponentScore: One weighted component of the Kinetic Fingerprint.
KineticFingerprintResult: Weighted fingerprint over a momentum time series.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class SwingMetrics:
    """Kinematic and outcome measurements for one swing or session.

    Attributes:
        pelvis_momentum_peak: Peak pelvis angular momentum.
        torso_momentum_peak: Peak torso angular momentum.
        arms_momentum_peak: Peak arms angular momentum.
        pelvis_peak_frame: Frame index of the pelvis peak.
        torso_peak_frame: Frame index of the torso peak.
        arms_peak_frame: Frame index of the arms peak.
        contact_frame: Frame index of ball contact.
        pelvis_decel_pct: Pelvis deceleration from peak to contact (%).
        torso_decel_pct: Torso deceleration from peak to contact (%).
        drift_timing: When forward drift happens, as a fraction of the swing.
        bat_direction_std: Std dev of bat direction at contact (degrees).
        exit_velo_avg: Average exit velocity (mph).
        exit_velo_max: Max exit velocity (mph).
        exit_velo_cv: Exit velocity coefficient of variation (%).
        barrel_rate: Barrels per batted ball (%).
        hard_hit_rate: Hard-hit balls per batted ball (%).
        mishit_rate: Mishits per batted ball (%).
        pelvis_velocity: Peak pelvis rotational velocity (deg/s), optional.
        torso_velocity: Peak torso rotational velocity (deg/s), optional.
        arms_velocity: Peak arms rotational velocity (deg/s), optional.
    """
    pelvis_momentum_peak: float
    torso_momentum_peak: float
    arms_momentum_peak: float
    pelvis_peak_frame: float
    torso_peak_frame: float
    arms_peak_frame: float
    contact_frame: float
    pelvis_decel_pct: float
    torso_decel_pct: float
    drift_timing: float
    bat_direction_std: float
    exit_velo_avg: float
    exit_velo_max: float
    exit_velo_cv: float
    barrel_rate: float
    hard_hit_rate: float
    mishit_rate: float
    pelvis_velocity: Optional[float] = None
    torso_velocity: Optional[float] = None
    arms_velocity: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SwingMetrics":
        """Build from a plain mapping. Unknown keys are ignored.

        Raises:
            TypeError: if data is not a mapping or a required key is missing.
        """
        if not isinstance(data, Mapping):
            raise TypeError(
                f"SwingMetrics.from_dict expects a mapping, got {type(data).__name__}"
            )
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass(frozen=True)
class BodyComponents:
    transfer_efficiency: int
    stability: int
    velocity_pct: int


@dataclass(frozen=True)
class BrainComponents:
    timing: int
    consistency: int


@dataclass(frozen=True)
class BatComponents:
    at_ratio: int
    torso_decel: int
    path_consistency: int


@dataclass(frozen=True)
class BallComponents:
    exit_velo: int
    barrel_rate: int
    hard_hit: int


@dataclass(frozen=True)
class RawMetrics:
    """Intermediate ratios surfaced for display and auditing."""
    tp_momentum_ratio: float
    at_momentum_ratio: float
    torso_decel_pct: float
    drift_timing: float
    bat_direction_std: float
    timing_gap_pct: float


@dataclass(frozen=True)
class FourBScores:
    """Complete 4B score report.

    Attributes:
        body, brain, bat, ball: Category scores (0-100).
        composite: Weighted composite (0-100).
        body_components .. ball_components: Sub-scores per category.
        raw_metrics: Ratios the sub-scores were computed from.
        grade: Qualitative grade for the composite ("Plus-Plus" .. "Developing").
        grade_color: Display color for the grade.
        age_group: Bracket the scores were computed against.
        flags: Leak tokens for drill prescription.
        scout_grades: Category and composite scores on the 20-80 scale.
    """
    body: int
    brain: int
    bat: int
    ball: int
    composite: int
    body_components: BodyComponents
    brain_components: BrainComponents
    bat_components: BatComponents
    ball_components: BallComponents
    raw_metrics: RawMetrics
    grade: str
    grade_color: str
    age_group: str
    flags: tuple[str, ...] = ()
    scout_grades: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ComponentScore:
    """One scored component of the Kinetic Fingerprint.

    Attributes:
        score: Component score (0-100).
        weight: Weight in the fingerprint total.
        value: Display string for the measured value ("1.62", "15.0%", "P→T→A→B").
        rating: Qualitative label for the band the value fell into.
        raw_value: The numeric measurement behind `value`.
    """
    score: float
    weight: float
    value: str
    rating: str
    raw_value: float = 0.0


@dataclass(frozen=True)
class KineticFingerprintResult:
    """Weighted Kinetic Fingerprint over a momentum-energy time series.

    Attributes:
        total: Weighted total (0-100).
        components: Six named ComponentScores.
        rating: "Elite", "Good", "Working", or "Priority".
        color: Display color for the rating.
        flags: Leak tokens for drill prescription.
        contact_frame: Frame the contact heuristic picked.
        contact_confidence: "high", or "low" when contact landed on the
                            first or last frame.
    """
    total: int
    components: Mapping[str, ComponentScore]
    rating: str
    color: str
    flags: tuple[str, ...]
    contact_frame: int
    contact_confidence: str
