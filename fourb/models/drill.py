"""
Drill definitions for fourb.

Provides the motor profile, drill category, and flag enumerations used by
the prescription resolver, plus the static DrillDefinition record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MotorProfile(str, Enum):
    """How a hitter naturally generates power."""
    SPINNER = "SPINNER"
    WHIPPER = "WHIPPER"
    SLINGSHOTTER = "SLINGSHOTTER"
    TITAN = "TITAN"


class DrillCategory(str, Enum):
    DECELERATION = "deceleration"
    LOADING = "loading"
    TRANSFER = "transfer"
    RELEASE = "release"
    BRACE = "brace"
    SEQUENCING = "sequencing"
    FOUNDATION = "foundation"
    CONNECTION = "connection"


class ProfileFitStatus(str, Enum):
    YES = "yes"
    CRITICAL = "critical"
    MAYBE = "maybe"
    CAREFUL = "careful"
    NO = "no"


class DrillFlag(str, Enum):
    """Leak tokens emitted by the scorers and consumed by prescription."""
    # Deceleration
    WEAK_BRACE = "flag_weak_brace"
    OVER_SPINNING = "flag_over_spinning"
    LATE_TIMING = "flag_late_timing"
    NO_DECEL = "flag_no_decel"
    # Loading
    WEAK_LOAD = "flag_weak_load"
    EARLY_FIRE = "flag_early_fire"
    NO_COIL = "flag_no_coil"
    SLIDE = "flag_slide"
    SHALLOW_XFACTOR = "flag_shallow_xfactor"
    OVER_ROTATION = "flag_over_rotation"
    # Transfer
    WEAK_TRANSFER = "flag_weak_transfer"
    LOW_TORSO_VELO = "flag_low_torso_velo"
    POOR_TRANSFER = "flag_poor_transfer"
    ENERGY_LEAK = "flag_energy_leak"
    # Timing / release
    LATE_WHIP = "flag_late_whip"
    HANDS_LATE = "flag_hands_late"
    ARM_DOMINANT = "flag_arm_dominant"
    # Drift
    DRIFT = "flag_drift"
    HEAD_MOVEMENT = "flag_head_movement"
    # Sequence
    SIMULTANEOUS = "flag_simultaneous"
    NO_SEQUENCE = "flag_no_sequence"
    OVER_SEPARATED = "flag_over_separated"
    # Connection
    CASTING = "flag_casting"
    ARM_BAR = "flag_arm_bar"
    DISCONNECTED = "flag_disconnected"
    # Foundation
    BALANCE_ASYMMETRY = "flag_balance_asymmetry"


@dataclass(frozen=True)
class ProfileFit:
    profile: MotorProfile
    status: ProfileFitStatus
    notes: str = ""


@dataclass(frozen=True)
class CoachingCue:
    issue: str
    cue: str


@dataclass(frozen=True)
class ProfileContraindication:
    """Coaching approaches to avoid for a motor profile, and why."""
    profile: MotorProfile
    avoid: tuple[str, ...]
    reason: str


@dataclass(frozen=True)
class DrillDefinition:
    """A corrective drill and the rules for prescribing it.

    Attributes:
        slug: Stable identifier used in prescriptions.
        name: Display name.
        category: What the drill trains.
        triggered_by_flags: Flags that prescribe this drill.
        setup: Setup steps.
        the_move: Execution steps.
        coaching_cues: Cue per issue.
        why_it_works: Short rationale.
        profile_fits: Fit per motor profile.
        contraindications: When not to use it.
        progression: Optional progression steps.
    """
    slug: str
    name: str
    category: DrillCategory
    triggered_by_flags: tuple[DrillFlag, ...]
    setup: tuple[str, ...]
    the_move: tuple[str, ...]
    coaching_cues: tuple[CoachingCue, ...]
    why_it_works: str
    profile_fits: tuple[ProfileFit, ...]
    contraindications: tuple[str, ...]
    progression: tuple[str, ...] = ()

    def fit_for(self, profile: MotorProfile) -> Optional[ProfileFit]:
        """Return the fit entry for a profile, if the drill lists one."""
        for fit in self.profile_fits:
            if fit.profile == profile:
                return fit
        return None
