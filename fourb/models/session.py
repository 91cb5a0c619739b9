"""
Sensor session model for fourb.

A session is one batch of bat-sensor swings from a single hitter, as
produced by the normalizer. Aggregate stats feed consistency reporting.
"""

from dataclasses import dataclass, field
from statistics import mean, stdev
from typing import Optional

from fourb.models.sensor import CanonicalSwing, NormalizeBatchResult


@dataclass
class SensorSession:
    """Canonical swings belonging to one session.

    Attributes:
        session_id: Session identifier shared by every swing.
        swings: Swings in arrival order, valid and invalid.
        notes: Coach notes about the session.
    """
    session_id: str
    swings: list[CanonicalSwing] = field(default_factory=list)
    notes: str = ""

    @classmethod
    def from_batch(cls, session_id: str,
                   batch: NormalizeBatchResult) -> "SensorSession":
        """Build a session from a normalizer batch, ordered by swing number."""
        swings = batch.valid + batch.invalid
        swings.sort(key=lambda s: (s.swing_number is None, s.swing_number or 0))
        return cls(session_id=session_id, swings=swings)

    def add_swing(self, swing: CanonicalSwing):
        """Add a swing, ignoring one already present (same dedupe key)."""
        if any(s.dedupe_key == swing.dedupe_key for s in self.swings):
            return
        self.swings.append(swing)

    @property
    def valid_swings(self) -> list[CanonicalSwing]:
        return [s for s in self.swings if s.is_valid]

    @property
    def num_swings(self) -> int:
        return len(self.swings)

    def get_stats(self) -> dict:
        """Compute aggregate statistics over the valid swings."""
        if not self.swings:
            return {}

        valid = self.valid_swings
        stats = {
            "num_swings": len(self.swings),
            "num_valid": len(valid),
        }
        if not valid:
            return stats

        bat_speeds = [s.bat_speed_mph for s in valid]
        hand_speeds = [s.hand_speed_mph for s in valid
                       if s.hand_speed_mph is not None]
        timings = [s.trigger_to_impact_ms for s in valid
                   if s.trigger_to_impact_ms is not None]

        avg_bat = mean(bat_speeds)
        stats["avg_bat_speed"] = round(avg_bat, 1)
        stats["max_bat_speed"] = max(bat_speeds)
        stats["avg_hand_speed"] = round(mean(hand_speeds), 1) if hand_speeds else None
        stats["avg_time_to_contact"] = round(mean(timings)) if timings else None

        if len(bat_speeds) > 1:
            std_bat = stdev(bat_speeds)
            stats["std_bat_speed"] = round(std_bat, 1)
            stats["bat_speed_cv"] = round(std_bat / avg_bat * 100, 1)
        if len(timings) > 1:
            stats["std_time_to_contact"] = round(stdev(timings), 1)

        return stats

    def best_swing(self) -> Optional[CanonicalSwing]:
        """Fastest valid swing, or None."""
        valid = self.valid_swings
        if not valid:
            return None
        return max(valid, key=lambda s: s.bat_speed_mph)
