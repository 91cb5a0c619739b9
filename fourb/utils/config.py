"""
Configuration for fourb.

Two layers:
  - ScoringTables: an immutable bundle of every band table, bracket table,
    and validation threshold the scorers use. Library functions take one as
    an argument (default: DEFAULT_TABLES) and never read config on their own.
  - Config: user settings persisted to ~/.fourb/config.json (or the path in
    FOURB_CONFIG), merged over defaults. Config.scoring_tables() turns the
    settings into a ScoringTables for callers such as the CLI.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

from fourb.bands import BandTable
from fourb.utils import constants as C

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringTables:
    """Immutable scoring configuration shared by every scorer."""

    age_caps: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: C.AGE_CAPS)
    default_age_group: str = C.DEFAULT_AGE_GROUP

    # 4B category bands
    at_ratio_bands: BandTable = C.AT_RATIO_BANDS
    tp_ratio_bands: BandTable = C.TP_RATIO_BANDS
    timing_gap_bands: BandTable = C.TIMING_GAP_BANDS
    torso_decel_bands: BandTable = C.TORSO_DECEL_BANDS
    bat_path_bands: BandTable = C.BAT_PATH_BANDS
    exit_velo_bands: BandTable = C.EXIT_VELO_BANDS
    barrel_rate_bands: BandTable = C.BARREL_RATE_BANDS
    hard_hit_bands: BandTable = C.HARD_HIT_BANDS
    body_weights: Mapping[str, float] = field(
        default_factory=lambda: C.BODY_WEIGHTS)
    brain_weights: Mapping[str, float] = field(
        default_factory=lambda: C.BRAIN_WEIGHTS)
    bat_weights: Mapping[str, float] = field(
        default_factory=lambda: C.BAT_WEIGHTS)
    ball_weights: Mapping[str, float] = field(
        default_factory=lambda: C.BALL_WEIGHTS)
    composite_weights: Mapping[str, float] = field(
        default_factory=lambda: C.COMPOSITE_WEIGHTS)

    # Kinetic fingerprint
    kf_transfer_bands: BandTable = C.KF_TRANSFER_BANDS
    kf_timing_gap_bands: BandTable = C.KF_TIMING_GAP_BANDS
    kf_energy_bands: BandTable = C.KF_ENERGY_BANDS
    kf_x_factor_bands: BandTable = C.KF_X_FACTOR_BANDS
    kf_weights: Mapping[str, float] = field(
        default_factory=lambda: C.KF_WEIGHTS)

    # Sensor validation
    min_bat_speed_mph: float = C.MIN_BAT_SPEED_MPH
    max_bat_speed_mph: float = C.MAX_BAT_SPEED_MPH
    min_time_to_contact_ms: float = C.MIN_TIME_TO_CONTACT_MS
    max_time_to_contact_ms: float = C.MAX_TIME_TO_CONTACT_MS
    low_hand_speed_ratio: float = C.LOW_HAND_SPEED_RATIO


DEFAULT_TABLES = ScoringTables()

# Config keys that map straight onto ScoringTables fields
_TABLE_OVERRIDES = (
    "default_age_group",
    "min_bat_speed_mph",
    "max_bat_speed_mph",
    "min_time_to_contact_ms",
    "max_time_to_contact_ms",
    "low_hand_speed_ratio",
)


def _is_threshold(value) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


class Config:
    """Manages fourb settings with JSON file persistence."""

    _APP_DIR = Path.home() / ".fourb"
    _CONFIG_FILE = _APP_DIR / "config.json"
    _ENV_PATH = "FOURB_CONFIG"

    _defaults = {
        "default_age_group": C.DEFAULT_AGE_GROUP,
        "min_bat_speed_mph": C.MIN_BAT_SPEED_MPH,
        "max_bat_speed_mph": C.MAX_BAT_SPEED_MPH,
        "min_time_to_contact_ms": C.MIN_TIME_TO_CONTACT_MS,
        "max_time_to_contact_ms": C.MAX_TIME_TO_CONTACT_MS,
        "low_hand_speed_ratio": C.LOW_HAND_SPEED_RATIO,
        "default_motor_profile": "SPINNER",
    }

    _instance: Optional["Config"] = None
    _settings: dict

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._settings = {}
            cls._instance._load()
        return cls._instance

    @classmethod
    def config_path(cls) -> Path:
        """Settings file location; FOURB_CONFIG takes priority."""
        env_path = os.environ.get(cls._ENV_PATH, "")
        if env_path:
            return Path(env_path).expanduser()
        return cls._CONFIG_FILE

    def _load(self):
        """Load settings from disk, merging with defaults."""
        path = self.config_path()
        if path.exists():
            try:
                with open(path) as f:
                    saved = json.load(f)
                # Merge: defaults first, then saved values override
                self._settings = {**self._defaults, **saved}
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Ignoring unreadable config {path}: {e}")
                self._settings = dict(self._defaults)
        else:
            self._settings = dict(self._defaults)

    def save(self):
        """Persist current settings to disk."""
        path = self.config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self._settings, f, indent=2)

    def get(self, key: str, default=None):
        """Get a setting value."""
        return self._settings.get(key, default)

    def set(self, key: str, value):
        """Set a setting value and save."""
        self._settings[key] = value
        self.save()

    @classmethod
    def reload(cls) -> "Config":
        """Drop the cached instance and read settings again."""
        cls._instance = None
        return cls()

    @classmethod
    def scoring_tables(cls) -> ScoringTables:
        """Build ScoringTables from defaults plus any configured overrides.

        Overrides that would break scoring are ignored with a warning: an
        age group with no bracket, or a threshold that is not a number.
        """
        instance = cls()
        overrides = {}
        for key in _TABLE_OVERRIDES:
            value = instance.get(key)
            if value is None or value == cls._defaults[key]:
                continue
            if key == "default_age_group":
                if not isinstance(value, str) or value not in DEFAULT_TABLES.age_caps:
                    logger.warning(
                        f"Ignoring {key}={value!r}: not one of "
                        f"{', '.join(DEFAULT_TABLES.age_caps)}"
                    )
                    continue
            elif not _is_threshold(value):
                logger.warning(f"Ignoring {key}={value!r}: expected a number")
                continue
            overrides[key] = value
        if not overrides:
            return DEFAULT_TABLES
        logger.debug(f"Scoring table overrides: {overrides}")
        return replace(DEFAULT_TABLES, **overrides)
