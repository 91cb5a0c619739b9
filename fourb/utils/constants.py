"""
Baselines, band tables, and thresholds for fourb scoring.

MLB averages come from Reboot Motion population exports. Band tables
encode coaching judgment about elite / good / developing / poor mechanics
and are intentionally stepwise, not smooth curves.

Every table here is immutable (tuples and read-only mappings) so it can be
shared across threads and bundled into a ScoringTables instance.
"""

from types import MappingProxyType

from fourb.bands import (
    Band,
    BandTable,
    above,
    at_least,
    below,
    between,
    otherwise,
)

# =============================================================================
# MLB Population Baselines
# =============================================================================

MLB_AVERAGES = MappingProxyType({
    "pelvis_velocity": 639.8,      # deg/s
    "torso_velocity": 803.9,       # deg/s
    "arms_velocity": 1070.7,       # deg/s
    "x_factor": 40.7,              # degrees
    "tp_velocity_ratio": 1.26,     # torso / pelvis
    "at_velocity_ratio": 1.33,     # arms / torso
})

# =============================================================================
# Age / Level Brackets
# =============================================================================

# Fraction of MLB segment velocity expected at each bracket, plus the
# exit-velocity cap (mph) an age-appropriate "plus" hitter reaches.
AGE_CAPS = MappingProxyType({
    "10U":     MappingProxyType({"pelvis": 0.35, "torso": 0.35, "arms": 0.40, "exit_velo": 55}),
    "11U":     MappingProxyType({"pelvis": 0.40, "torso": 0.40, "arms": 0.45, "exit_velo": 60}),
    "12U":     MappingProxyType({"pelvis": 0.45, "torso": 0.45, "arms": 0.50, "exit_velo": 65}),
    "13U":     MappingProxyType({"pelvis": 0.52, "torso": 0.55, "arms": 0.55, "exit_velo": 72}),
    "14U":     MappingProxyType({"pelvis": 0.58, "torso": 0.60, "arms": 0.62, "exit_velo": 78}),
    "15U":     MappingProxyType({"pelvis": 0.65, "torso": 0.68, "arms": 0.70, "exit_velo": 83}),
    "16U":     MappingProxyType({"pelvis": 0.72, "torso": 0.75, "arms": 0.78, "exit_velo": 88}),
    "17U":     MappingProxyType({"pelvis": 0.80, "torso": 0.82, "arms": 0.85, "exit_velo": 92}),
    "18U":     MappingProxyType({"pelvis": 0.85, "torso": 0.88, "arms": 0.90, "exit_velo": 95}),
    "College": MappingProxyType({"pelvis": 0.90, "torso": 0.92, "arms": 0.95, "exit_velo": 100}),
    "Pro":     MappingProxyType({"pelvis": 1.00, "torso": 1.00, "arms": 1.00, "exit_velo": 110}),
})

DEFAULT_AGE_GROUP = "13U"

# =============================================================================
# 4B Category Bands
# =============================================================================

# Arms / torso momentum ratio
AT_RATIO_BANDS = BandTable((
    Band(between(1.5, 1.8), 95, "Elite"),
    Band(between(1.3, 1.5, hi_open=True), 80, "Good"),
    Band(between(1.8, 2.0, lo_open=True), 80, "Slightly over-whipped"),
    Band(between(1.1, 1.3, hi_open=True), 65, "Developing"),
    Band(between(2.0, 2.3, lo_open=True), 55, "Disconnected"),
    Band(below(1.1), 45, "Poor transfer"),
), default=otherwise(40, "Out of range"))

# Torso / pelvis momentum ratio
TP_RATIO_BANDS = BandTable((
    Band(between(4.0, 5.5), 95, "Elite"),
    Band(between(5.5, 6.5, lo_open=True), 80, "Good"),
    Band(between(3.5, 4.0, hi_open=True), 80, "Good"),
    Band(between(6.5, 7.5, lo_open=True), 65, "Developing"),
    Band(between(7.5, 9.0, lo_open=True), 50, "Disconnected"),
    Band(below(3.5), 55, "Weak transfer"),
), default=otherwise(40, "Out of range"))

# Torso -> arms peak gap as % of frames to contact
TIMING_GAP_BANDS = BandTable((
    Band(between(8, 15), 90, "Elite"),
    Band(between(5, 8, hi_open=True), 75, "Good"),
    Band(between(15, 20, lo_open=True), 75, "Slightly late"),
    Band(between(0, 5, hi_open=True), 55, "Simultaneous"),
    Band(between(20, 25, lo_open=True), 55, "Late"),
    Band(below(0), 40, "Out of sequence"),
), default=otherwise(45, "Very late"))

TORSO_DECEL_BANDS = BandTable((
    Band(at_least(45), 95, "Elite"),
    Band(at_least(40), 85, "Good"),
    Band(at_least(35), 75, "Working"),
    Band(at_least(30), 65, "Developing"),
    Band(at_least(25), 55, "Weak brake"),
), default=otherwise(45, "No brake"))

# Bat direction standard deviation (degrees)
BAT_PATH_BANDS = BandTable((
    Band(below(10), 95, "Elite"),
    Band(below(15), 85, "Good"),
    Band(below(25), 70, "Working"),
    Band(below(35), 50, "Inconsistent"),
    Band(below(50), 35, "Erratic"),
), default=otherwise(25, "No repeatable path"))

# Average exit velocity as a fraction of the age cap
EXIT_VELO_BANDS = BandTable((
    Band(at_least(1.0), 95, "At cap"),
    Band(at_least(0.90), 85, "Plus"),
    Band(at_least(0.80), 75, "Above average"),
    Band(at_least(0.70), 65, "Average"),
    Band(at_least(0.60), 55, "Below average"),
), default=otherwise(45, "Developing"))

BARREL_RATE_BANDS = BandTable((
    Band(at_least(25), 95, "Elite"),
    Band(at_least(20), 85, "Plus"),
    Band(at_least(15), 75, "Above average"),
    Band(at_least(10), 65, "Average"),
    Band(at_least(5), 55, "Below average"),
), default=otherwise(45, "Developing"))

HARD_HIT_BANDS = BandTable((
    Band(at_least(50), 95, "Elite"),
    Band(at_least(40), 85, "Plus"),
    Band(at_least(30), 75, "Above average"),
    Band(at_least(20), 65, "Average"),
    Band(at_least(10), 55, "Below average"),
), default=otherwise(45, "Developing"))

# Stability penalties
DRIFT_LATE_SEVERE = 0.65       # drift timing beyond this: -35
DRIFT_LATE = 0.55              # -20
DRIFT_EARLY = 0.35             # drift timing below this: -10
MAX_VOLATILITY_PENALTY = 25
STABILITY_FLOOR = 30

# Brain consistency: CV above 12% starts costing points, max 35
CONSISTENCY_CV_START = 12
CONSISTENCY_CV_SPAN = 30
MAX_CONSISTENCY_PENALTY = 35

# Ball: mishits above 15% cost half a point per percent
MISHIT_ALLOWANCE = 15
MISHIT_PENALTY_RATE = 0.5
BALL_FLOOR = 30

DEFAULT_VELOCITY_PERCENTILE = 75

# Category and composite weights
BODY_WEIGHTS = MappingProxyType({"transfer_efficiency": 0.50, "stability": 0.35, "velocity_pct": 0.15})
BRAIN_WEIGHTS = MappingProxyType({"timing": 0.50, "consistency": 0.50})
BAT_WEIGHTS = MappingProxyType({"at_ratio": 0.40, "torso_decel": 0.30, "path_consistency": 0.30})
BALL_WEIGHTS = MappingProxyType({"exit_velo": 0.40, "barrel_rate": 0.30, "hard_hit": 0.30})
COMPOSITE_WEIGHTS = MappingProxyType({"body": 0.30, "brain": 0.20, "bat": 0.30, "ball": 0.20})

# Composite -> (grade, display color). Evaluated top to bottom.
GRADE_LADDER = (
    (80, "Plus-Plus", "#4ecdc4"),
    (70, "Plus", "#4ecdc4"),
    (60, "Above Average", "#7fd8be"),
    (50, "Average", "#ffa500"),
    (40, "Below Average", "#ff8c42"),
)
GRADE_FLOOR = ("Developing", "#ff6b6b")

# 20-80 scout scale
SCOUT_MIN = 20
SCOUT_MAX = 80
SCOUT_LADDER = (
    (70, "Plus-Plus"),
    (60, "Plus"),
    (55, "Above Avg"),
    (50, "Average"),
    (45, "Below Avg"),
    (40, "Fringe"),
)
SCOUT_FLOOR = "Well Below"

# 4B leak flags
FLAG_AT_SCORE_BELOW = 65         # A:T score under this flags a transfer leak
FLAG_ARM_DOMINANT_RATIO = 2.0    # A:T ratio above this reads as arm-dominant
FLAG_TP_SCORE_AT_MOST = 55       # T:P score at or under this: weak transfer
FLAG_SIMULTANEOUS_GAP_PCT = 5    # torso -> arms gap under this (% of contact)
FLAG_LATE_TIMING_GAP_PCT = 20    # gap over this
FLAG_DECEL_SCORE_AT_MOST = 55
FLAG_PATH_SCORE_AT_MOST = 50     # bat path score at or under this: casting

# =============================================================================
# Kinetic Fingerprint Bands
# =============================================================================

KF_WEIGHTS = MappingProxyType({
    "transfer_ratio": 0.25,
    "timing_gap": 0.20,
    "deceleration": 0.20,
    "sequence_order": 0.15,
    "energy_delivery": 0.10,
    "x_factor": 0.10,
})

KF_TRANSFER_BANDS = BandTable((
    Band(between(1.50, 1.80), 100, "Elite"),
    Band(between(1.30, 1.50, hi_open=True), 85, "Good"),
    Band(between(1.80, 2.00, lo_open=True), 80, "Slightly over-whipped"),
    Band(between(1.10, 1.30, hi_open=True), 65, "Developing"),
    Band(above(2.00), 50, "Disconnected"),
), default=otherwise(40, "Poor transfer"))

# Pelvis -> torso peak gap as % of frames to contact
KF_TIMING_GAP_BANDS = BandTable((
    Band(between(14, 18), 100, "Elite"),
    Band(between(10, 14, hi_open=True), 85, "Good"),
    Band(between(18, 22, lo_open=True), 80, "Slightly late"),
    Band(between(5, 10, hi_open=True), 65, "Too simultaneous"),
    Band(above(22), 50, "Over-separated"),
), default=otherwise(40, "Simultaneous firing"))

KF_ENERGY_BANDS = BandTable((
    Band(above(45), 100, "Elite"),
    Band(at_least(40), 85, "Good"),
    Band(at_least(35), 70, "Working"),
    Band(at_least(30), 55, "Developing"),
), default=otherwise(40, "Body keeping energy"))

KF_X_FACTOR_BANDS = BandTable((
    Band(between(50, 60), 100, "Elite"),
    Band(between(45, 50, hi_open=True), 90, "Good"),
    Band(between(40, 45, hi_open=True), 80, "Working"),
    Band(between(35, 40, hi_open=True), 65, "Developing"),
    Band(above(65), 60, "Over-rotation risk"),
), default=otherwise(50, "Limited separation"))

# Count ladder shared by deceleration (segments braked) and sequence order
# (out-of-order pairs, read from the other end).
DECEL_COUNT_SCORES = MappingProxyType({
    3: (100, "Elite"),
    2: (70, "Working"),
    1: (40, "Priority"),
    0: (20, "Critical"),
})
SEQUENCE_ERROR_SCORES = MappingProxyType({
    0: (100, "Elite"),
    1: (70, "Working"),
    2: (40, "Priority"),
})
SEQUENCE_ERROR_FLOOR = (20, "Critical")

NO_DATA = "No data"
NO_DATA_SCORE = 40
X_FACTOR_NO_DATA_SCORE = 50

# Total -> rating bucket
KF_RATING_LADDER = (
    (90, "Elite"),
    (80, "Good"),
    (60, "Working"),
)
KF_RATING_FLOOR = "Priority"

KF_COLOR_LADDER = (
    (80, "#4ecdc4"),   # teal: elite / good
    (60, "#ffa500"),   # orange: working
)
KF_COLOR_FLOOR = "#ff6b6b"

# Flag thresholds
KF_FLAG_SCORE_CUTOFF = 70
KF_SIMULTANEOUS_GAP_PCT = 10
KF_OVER_SEPARATED_GAP_PCT = 20
KF_OVER_ROTATION_DEG = 60

# Momentum-energy export columns (Reboot Motion)
PELVIS_MOMENTUM_FIELD = "lowertorso_angular_momentum_z"
TORSO_MOMENTUM_FIELD = "torso_angular_momentum_z"
ARMS_MOMENTUM_FIELD = "arms_angular_momentum_z"
BAT_MOMENTUM_FIELD = "bat_angular_momentum_z"
BAT_KE_FIELD = "bat_kinetic_energy"
TOTAL_KE_FIELD = "total_kinetic_energy"
CONTACT_SIGNAL_FIELD = "time_from_max_hand"
PELVIS_ROT_FIELD = "pelvis_rot"
TORSO_ROT_FIELD = "torso_rot"

# =============================================================================
# Bat Sensor Validation (Diamond Kinetics style payloads)
# =============================================================================

MIN_BAT_SPEED_MPH = 25.0       # below this is a waggle, not a swing
MAX_BAT_SPEED_MPH = 120.0      # above this is sensor error
MIN_TIME_TO_CONTACT_MS = 100
MAX_TIME_TO_CONTACT_MS = 300
LOW_HAND_SPEED_RATIO = 0.20    # hand / bat speed; warning only

# Epoch values above this are milliseconds (2001-09-09 in ms)
EPOCH_MILLIS_THRESHOLD = 1_000_000_000_000

SPEED_DECIMALS = 1
ANGLE_DECIMALS = 1
LOCATION_DECIMALS = 3
RATIO_DECIMALS = 2
