"""
Bat-sensor swing normalizer for fourb.

Vendor payloads name the same quantity differently depending on SDK
version (speedBarrelMax vs batSpeed, nested metrics.* blocks, epoch vs ISO
timestamps). This module resolves each quantity through an ordered list of
aliases, rounds it to a fixed precision, validates the result, and emits a
CanonicalSwing.

Rejections are data, not errors: a swing that fails validation comes back
with is_valid=False and an invalid_reason code. Only a payload that is not
a mapping at all raises.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from fourb.models.sensor import CanonicalSwing, NormalizeBatchResult, NormalizeOptions
from fourb.utils.config import DEFAULT_TABLES, ScoringTables
from fourb.utils.constants import (
    ANGLE_DECIMALS,
    EPOCH_MILLIS_THRESHOLD,
    LOCATION_DECIMALS,
    RATIO_DECIMALS,
    SPEED_DECIMALS,
)

logger = logging.getLogger(__name__)

# Rejection and warning codes
MISSING_BAT_SPEED = "missing_bat_speed"
BELOW_SPEED_THRESHOLD = "below_speed_threshold"
ABOVE_SPEED_THRESHOLD = "above_speed_threshold"
TIMING_TOO_FAST = "timing_too_fast"
TIMING_TOO_SLOW = "timing_too_slow"
HAND_SPEED_LOW = "hand_speed_low"

# A path into the payload: ("metrics", "batSpeed") means raw["metrics"]["batSpeed"]
FieldAlias = tuple[str, ...]

# Alias chains, highest priority first. The canonical field name is always
# last so a CanonicalSwing.to_dict() re-normalizes to the same record.
BAT_SPEED_ALIASES: tuple[FieldAlias, ...] = (
    ("speedBarrelMax",),
    ("metrics", "speedBarrelMax"),
    ("batSpeed",),
    ("metrics", "batSpeed"),
    ("bat_speed_mph",),
)
HAND_SPEED_ALIASES = (("speedHandsMax",), ("handSpeed",), ("hand_speed_mph",))
TIME_TO_CONTACT_ALIASES = (
    ("quicknessTriggerImpact",),
    ("timeToContact",),
    ("triggerToImpact",),
    ("trigger_to_impact_ms",),
)
ATTACK_ANGLE_ALIASES = (
    ("swingPlaneSteepnessAngle",), ("attackAngle",), ("attack_angle_deg",),
)
ATTACK_DIRECTION_ALIASES = (
    ("swingPlaneHeadingAngle",), ("attackDirection",), ("attack_direction_deg",),
)
PLANE_TILT_ALIASES = (
    ("swingPlaneTiltAngle",), ("planeTilt",), ("swing_plane_tilt_deg",),
)
IMPACT_X_ALIASES = (("impactLocationX",), ("impactLocation", "x"), ("impact_location_x",))
IMPACT_Y_ALIASES = (("impactLocationY",), ("impactLocation", "y"), ("impact_location_y",))
IMPACT_Z_ALIASES = (("impactLocationZ",), ("impactLocation", "z"), ("impact_location_z",))
APPLIED_POWER_ALIASES = (("appliedPower",), ("power",), ("applied_power",))
MAX_ACCELERATION_ALIASES = (
    ("maxAcceleration",), ("acceleration",), ("max_acceleration",),
)
SWING_ID_ALIASES = (("swingId",), ("uuid",), ("id",), ("swing_id",))
SWING_NUMBER_ALIASES = (
    ("swingIndex",), ("swingNumber",), ("index",), ("swing_number",),
)
TIMESTAMP_ALIASES = (
    ("timestamp",), ("occurredAt",), ("swingTimestamp",), ("occurred_at",),
)


class ValidationResult(NamedTuple):
    is_valid: bool
    reason: Optional[str]
    warnings: tuple[str, ...]


# =============================================================================
# Alias resolution
# =============================================================================

def _lookup(raw: Mapping[str, Any], path: FieldAlias) -> Any:
    node: Any = raw
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers too large for a float
        return False


def resolve_number(raw: Mapping[str, Any],
                   aliases: Iterable[FieldAlias]) -> Optional[float]:
    """First alias holding a finite number (bools excluded), else None."""
    for path in aliases:
        value = _lookup(raw, path)
        if _is_number(value):
            return float(value)
    return None


def resolve_first(raw: Mapping[str, Any],
                  aliases: Iterable[FieldAlias]) -> Any:
    """First alias holding any non-None value, else None."""
    for path in aliases:
        value = _lookup(raw, path)
        if value is not None:
            return value
    return None


def _round_to(value: Optional[float], decimals: int) -> Optional[float]:
    """Round half-up to a fixed number of decimals."""
    if value is None:
        return None
    factor = 10 ** decimals
    scaled = value * factor + 0.5
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / factor


# =============================================================================
# Field extractors
# =============================================================================

def extract_bat_speed(raw: Mapping[str, Any]) -> Optional[float]:
    return _round_to(resolve_number(raw, BAT_SPEED_ALIASES), SPEED_DECIMALS)


def extract_hand_speed(raw: Mapping[str, Any]) -> Optional[float]:
    return _round_to(resolve_number(raw, HAND_SPEED_ALIASES), SPEED_DECIMALS)


def extract_time_to_contact(raw: Mapping[str, Any]) -> Optional[int]:
    """Trigger-to-impact time in whole milliseconds."""
    value = resolve_number(raw, TIME_TO_CONTACT_ALIASES)
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def extract_attack_angle(raw: Mapping[str, Any]) -> Optional[float]:
    return _round_to(resolve_number(raw, ATTACK_ANGLE_ALIASES), ANGLE_DECIMALS)


def extract_attack_direction(raw: Mapping[str, Any]) -> Optional[float]:
    return _round_to(resolve_number(raw, ATTACK_DIRECTION_ALIASES), ANGLE_DECIMALS)


def extract_plane_tilt(raw: Mapping[str, Any]) -> Optional[float]:
    return _round_to(resolve_number(raw, PLANE_TILT_ALIASES), ANGLE_DECIMALS)


def extract_impact_location(raw: Mapping[str, Any]) -> tuple[Optional[float], ...]:
    """(x, y, z) contact point, each to 3 decimals."""
    return tuple(
        _round_to(resolve_number(raw, aliases), LOCATION_DECIMALS)
        for aliases in (IMPACT_X_ALIASES, IMPACT_Y_ALIASES, IMPACT_Z_ALIASES)
    )


def extract_applied_power(raw: Mapping[str, Any]) -> Optional[float]:
    return _round_to(resolve_number(raw, APPLIED_POWER_ALIASES), SPEED_DECIMALS)


def extract_max_acceleration(raw: Mapping[str, Any]) -> Optional[float]:
    return _round_to(resolve_number(raw, MAX_ACCELERATION_ALIASES), SPEED_DECIMALS)


def extract_swing_id(raw: Mapping[str, Any]) -> Optional[str]:
    value = resolve_first(raw, SWING_ID_ALIASES)
    if value is None or isinstance(value, bool):
        return None
    return str(value)


def extract_swing_number(raw: Mapping[str, Any],
                         fallback: Optional[int]) -> Optional[int]:
    """Swing number from the payload, else the caller's batch position."""
    value = resolve_number(raw, SWING_NUMBER_ALIASES)
    if value is not None:
        return int(value)
    return fallback


# =============================================================================
# Timestamps
# =============================================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(raw: Mapping[str, Any],
                    now: Optional[datetime] = None) -> tuple[datetime, Any]:
    """Resolve when a swing occurred.

    Accepts ISO-8601 strings (a trailing "Z" is fine; naive times are taken
    as UTC) and epoch numbers. Numbers above 10^12 are epoch milliseconds,
    anything smaller is epoch seconds.

    Returns:
        (occurred_at, original_value). occurred_at falls back to `now` when
        the value is missing or unparseable.
    """
    now = now or _utcnow()
    value = resolve_first(raw, TIMESTAMP_ALIASES)
    if value is None:
        return now, None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Unparseable timestamp {value!r}, using now")
            return now, value
    elif _is_number(value):
        seconds = value / 1000 if value > EPOCH_MILLIS_THRESHOLD else value
        try:
            parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug(f"Epoch timestamp {value!r} out of range, using now")
            return now, value
    else:
        return now, value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc), value


# =============================================================================
# Validation
# =============================================================================

def validate_swing(bat_speed_mph: Optional[float],
                   hand_speed_mph: Optional[float],
                   trigger_to_impact_ms: Optional[float],
                   tables: ScoringTables = DEFAULT_TABLES) -> ValidationResult:
    """Apply the rejection rules in order; the first failure wins.

    Rejections: missing_bat_speed, below_speed_threshold,
    above_speed_threshold, timing_too_fast, timing_too_slow.
    Warnings (valid swings only): hand_speed_low.
    """
    if bat_speed_mph is None:
        return ValidationResult(False, MISSING_BAT_SPEED, ())
    # Waggles and practice motions
    if bat_speed_mph < tables.min_bat_speed_mph:
        return ValidationResult(False, BELOW_SPEED_THRESHOLD, ())
    # Sensor glitch
    if bat_speed_mph > tables.max_bat_speed_mph:
        return ValidationResult(False, ABOVE_SPEED_THRESHOLD, ())

    if trigger_to_impact_ms is not None:
        if trigger_to_impact_ms < tables.min_time_to_contact_ms:
            return ValidationResult(False, TIMING_TOO_FAST, ())
        if trigger_to_impact_ms > tables.max_time_to_contact_ms:
            return ValidationResult(False, TIMING_TOO_SLOW, ())

    warnings = []
    if (hand_speed_mph is not None and bat_speed_mph > 0
            and hand_speed_mph / bat_speed_mph < tables.low_hand_speed_ratio):
        warnings.append(HAND_SPEED_LOW)

    return ValidationResult(True, None, tuple(warnings))


# =============================================================================
# Normalization
# =============================================================================

def normalize_swing(
    raw: Mapping[str, Any],
    options: NormalizeOptions,
    index: Optional[int] = None,
    now: Optional[datetime] = None,
    tables: ScoringTables = DEFAULT_TABLES,
) -> CanonicalSwing:
    """Normalize one vendor payload into a CanonicalSwing.

    Args:
        raw: Vendor swing payload.
        options: Session context.
        index: Position within the batch, used as the swing number when
               the payload has none.
        now: Clock used for missing timestamps and the audit stamp.
        tables: Validation thresholds.

    Raises:
        TypeError: if raw is not a mapping.
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"Swing payload must be a mapping, got {type(raw).__name__}")

    now = now or _utcnow()

    bat_speed = extract_bat_speed(raw)
    hand_speed = extract_hand_speed(raw)
    time_to_contact = extract_time_to_contact(raw)
    impact_x, impact_y, impact_z = extract_impact_location(raw)
    fallback_number = index + options.swing_number_offset if index is not None else None
    occurred_at, occurred_at_raw = parse_timestamp(raw, now)

    hand_to_bat_ratio = None
    if bat_speed is not None and hand_speed is not None and bat_speed > 0:
        ratio = hand_speed / bat_speed
        if math.isfinite(ratio):
            hand_to_bat_ratio = _round_to(ratio, RATIO_DECIMALS)

    validation = validate_swing(bat_speed, hand_speed, time_to_contact, tables)

    swing = CanonicalSwing(
        session_id=options.session_id,
        swing_id=extract_swing_id(raw),
        occurred_at=occurred_at,
        swing_number=extract_swing_number(raw, fallback_number),
        bat_speed_mph=bat_speed,
        hand_speed_mph=hand_speed,
        trigger_to_impact_ms=time_to_contact,
        attack_angle_deg=extract_attack_angle(raw),
        attack_direction_deg=extract_attack_direction(raw),
        swing_plane_tilt_deg=extract_plane_tilt(raw),
        impact_location_x=impact_x,
        impact_location_y=impact_y,
        impact_location_z=impact_z,
        applied_power=extract_applied_power(raw),
        max_acceleration=extract_max_acceleration(raw),
        hand_to_bat_ratio=hand_to_bat_ratio,
        is_valid=validation.is_valid,
        invalid_reason=validation.reason,
        warnings=validation.warnings,
        raw=raw,
        raw_meta={
            "sdk_version": options.sdk_version,
            "occurred_at_raw": occurred_at_raw,
            "normalized_at": now.isoformat(),
        },
    )

    if swing.is_valid:
        logger.debug(
            f"Swing {swing.swing_number}: {bat_speed} mph, "
            f"{time_to_contact} ms, warnings={list(swing.warnings)}"
        )
    else:
        logger.debug(f"Swing {swing.swing_number} rejected: {swing.invalid_reason}")
    return swing


def normalize_swing_batch(
    raws: Iterable[Mapping[str, Any]],
    session_id: str,
    sdk_version: Optional[str] = None,
    swing_number_offset: int = 0,
    now: Optional[datetime] = None,
    tables: ScoringTables = DEFAULT_TABLES,
) -> NormalizeBatchResult:
    """Normalize a batch and partition it by validity, keeping input order."""
    options = NormalizeOptions(
        session_id=session_id,
        sdk_version=sdk_version,
        swing_number_offset=swing_number_offset,
    )
    now = now or _utcnow()
    result = NormalizeBatchResult()

    for index, raw in enumerate(raws):
        swing = normalize_swing(raw, options, index=index, now=now, tables=tables)
        if swing.is_valid:
            result.valid.append(swing)
            if swing.warnings:
                result.warnings.append(swing)
        else:
            result.invalid.append(swing)

    logger.info(
        f"Session {session_id}: normalized {result.total} swings "
        f"({len(result.valid)} valid, {len(result.invalid)} invalid, "
        f"{len(result.warnings)} with warnings)"
    )
    return result


def dedupe_key(swing: CanonicalSwing) -> tuple:
    """Identity used to drop re-imported swings."""
    return swing.dedupe_key
