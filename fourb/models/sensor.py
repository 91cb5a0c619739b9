"""
Data models for bat-sensor swings in fourb.

NormalizeOptions: Caller context for a normalization run.
CanonicalSwing: One vendor-independent, validated swing record.
NormalizeBatchResult: Batch output partitioned by validity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class NormalizeOptions:
    """Context applied to every swing in a normalization run.

    Attributes:
        session_id: Session the swings belong to.
        sdk_version: Vendor SDK version tag, kept for audit.
        swing_number_offset: Added to the batch index when a payload
                             carries no swing number of its own.
    """
    session_id: str
    sdk_version: Optional[str] = None
    swing_number_offset: int = 0


@dataclass(frozen=True)
class CanonicalSwing:
    """Normalized swing record: one physical quantity per field.

    Attributes:
        session_id: Owning session.
        swing_id: Vendor swing identifier, if the payload had one.
        occurred_at: When the swing happened (timezone-aware UTC).
        swing_number: Position of the swing within its session.
        bat_speed_mph: Max barrel speed.
        hand_speed_mph: Max hand speed.
        trigger_to_impact_ms: Time from trigger to impact.
        attack_angle_deg: Swing plane steepness.
        attack_direction_deg: Swing plane heading.
        swing_plane_tilt_deg: Swing plane tilt.
        impact_location_x, impact_location_y, impact_location_z: Contact
            point on the barrel (sensor coordinates).
        applied_power: Vendor power metric.
        max_acceleration: Peak acceleration.
        hand_to_bat_ratio: hand_speed / bat_speed.
        is_valid: Whether the swing passed validation.
        invalid_reason: Rejection code; set exactly when is_valid is False.
        warnings: Non-fatal warning codes.
        raw: The original payload.
        raw_meta: Audit side-channel (sdk_version, occurred_at_raw,
                  normalized_at).
    """
    session_id: str
    occurred_at: datetime
    is_valid: bool
    invalid_reason: Optional[str] = None
    swing_id: Optional[str] = None
    swing_number: Optional[int] = None

    bat_speed_mph: Optional[float] = None
    hand_speed_mph: Optional[float] = None
    trigger_to_impact_ms: Optional[int] = None
    attack_angle_deg: Optional[float] = None
    attack_direction_deg: Optional[float] = None
    swing_plane_tilt_deg: Optional[float] = None

    impact_location_x: Optional[float] = None
    impact_location_y: Optional[float] = None
    impact_location_z: Optional[float] = None

    applied_power: Optional[float] = None
    max_acceleration: Optional[float] = None

    hand_to_bat_ratio: Optional[float] = None

    warnings: tuple[str, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)
    raw_meta: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if self.is_valid and self.invalid_reason is not None:
            raise ValueError("A valid swing cannot carry an invalid_reason")
        if not self.is_valid and self.invalid_reason is None:
            raise ValueError("An invalid swing must carry an invalid_reason")

    @property
    def dedupe_key(self) -> tuple:
        """Identity used to drop re-imported swings.

        The vendor swing id wins when present. Otherwise the key is built
        from the timestamp and the rounded measurements, which is why
        extraction rounds every value to a fixed precision.
        """
        if self.swing_id:
            return (self.session_id, "id", str(self.swing_id))
        return (
            self.session_id,
            "values",
            self.occurred_at.isoformat(),
            self.bat_speed_mph,
            self.hand_speed_mph,
            self.trigger_to_impact_ms,
            self.impact_location_x,
            self.impact_location_y,
            self.impact_location_z,
        )

    def to_dict(self) -> dict:
        """Flat, JSON-friendly view (raw payload omitted)."""
        return {
            "session_id": self.session_id,
            "swing_id": self.swing_id,
            "occurred_at": self.occurred_at.isoformat(),
            "swing_number": self.swing_number,
            "bat_speed_mph": self.bat_speed_mph,
            "hand_speed_mph": self.hand_speed_mph,
            "trigger_to_impact_ms": self.trigger_to_impact_ms,
            "attack_angle_deg": self.attack_angle_deg,
            "attack_direction_deg": self.attack_direction_deg,
            "swing_plane_tilt_deg": self.swing_plane_tilt_deg,
            "impact_location_x": self.impact_location_x,
            "impact_location_y": self.impact_location_y,
            "impact_location_z": self.impact_location_z,
            "applied_power": self.applied_power,
            "max_acceleration": self.max_acceleration,
            "hand_to_bat_ratio": self.hand_to_bat_ratio,
            "is_valid": self.is_valid,
            "invalid_reason": self.invalid_reason,
            "warnings": list(self.warnings),
        }


@dataclass
class NormalizeBatchResult:
    """Batch normalization output. Input order is preserved in each list.

    Attributes:
        valid: Swings that passed validation.
        invalid: Rejected swings.
        warnings: Valid swings that carry at least one warning
                  (a subset of `valid`).
    """
    valid: list[CanonicalSwing] = field(default_factory=list)
    invalid: list[CanonicalSwing] = field(default_factory=list)
    warnings: list[CanonicalSwing] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.invalid)

    def summary(self) -> dict:
        """Counts plus a histogram of rejection reasons."""
        reasons: dict[str, int] = {}
        for swing in self.invalid:
            reasons[swing.invalid_reason] = reasons.get(swing.invalid_reason, 0) + 1
        return {
            "total": self.total,
            "valid": len(self.valid),
            "invalid": len(self.invalid),
            "warned": len(self.warnings),
            "invalid_reasons": reasons,
        }
