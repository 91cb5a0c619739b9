"""
Drill library data for fourb: the ten core drills, the flag-to-drill
mapping, and per-profile restrictions, cautions and contraindications.
"""

from types import MappingProxyType

from fourb.models.drill import (
    CoachingCue,
    DrillCategory,
    DrillDefinition,
    DrillFlag as F,
    MotorProfile as P,
    ProfileContraindication,
    ProfileFit,
    ProfileFitStatus as S,
)


def _fits(spinner, whipper, slingshotter, titan) -> tuple[ProfileFit, ...]:
    """Profile fits in SPINNER, WHIPPER, SLINGSHOTTER, TITAN order."""
    return tuple(
        ProfileFit(profile, status, notes)
        for profile, (status, notes) in zip(
            (P.SPINNER, P.WHIPPER, P.SLINGSHOTTER, P.TITAN),
            (spinner, whipper, slingshotter, titan),
        )
    )


def _cues(*cues: str, issue: str = "General") -> tuple[CoachingCue, ...]:
    return tuple(CoachingCue(issue, cue) for cue in cues)


DRILL_LIBRARY: tuple[DrillDefinition, ...] = (
    DrillDefinition(
        slug="box-step-down-front",
        name="Box Step-Down (Front Leg)",
        category=DrillCategory.DECELERATION,
        triggered_by_flags=(F.WEAK_BRACE, F.OVER_SPINNING, F.DRIFT, F.LATE_TIMING),
        setup=(
            'Both feet on box (6-12" height)',
            "Tee or front toss",
            "Normal stance on box",
        ),
        the_move=(
            "Stride DOWN off the box (front foot lands on ground)",
            "Back foot stays on box",
            "Front leg CATCHES your weight and POSTS",
            "Swing",
        ),
        coaching_cues=(
            CoachingCue("Weak Brace", '"Post up. Be a wall, not a door."'),
            CoachingCue("Over-Spinner", '"Stomp and STOP. Feel the brake catch your hips."'),
            CoachingCue("Drift", '"Down, not out. Land and rotate."'),
            CoachingCue("Late Timing", '"The step triggers the swing. Don\'t wait."'),
        ),
        why_it_works=(
            "Gravity forces the front leg to absorb load. Can't drift or "
            "you'd fall. Teaches deceleration through constraint."
        ),
        profile_fits=_fits(
            (S.YES, "Teaches them to brake; they spin too much"),
            (S.YES, "Reinforces the violent front-side stop"),
            (S.CAREFUL, "May disrupt their linear pattern"),
            (S.YES, "Helps manage mass through front side"),
        ),
        contraindications=(
            "Don't use with guys who are already TOO stiff on front leg",
            "Don't use with lower body injuries (knee, ankle)",
            "Don't use if they over-extend already",
        ),
        progression=(
            "Box + Tee (feel the extension, no timing pressure)",
            "Box + Front Toss (add timing, maintain extension)",
            "Box + Velo (force adaptation under pressure)",
        ),
    ),
    DrillDefinition(
        slug="box-step-down-back",
        name="Box Step-Down (Back Leg)",
        category=DrillCategory.LOADING,
        triggered_by_flags=(F.WEAK_LOAD, F.EARLY_FIRE, F.NO_COIL, F.SLIDE),
        setup=(
            'Both feet on box (6-12" height)',
            "Tee or front toss",
            "Normal stance on box",
        ),
        the_move=(
            "Step DOWN with BACK foot first",
            "Back foot lands on ground, loads into back hip",
            "Front foot stays on box (or follows)",
            "Swing from that loaded position",
        ),
        coaching_cues=(
            CoachingCue("Weak Load", '"Drop into your back pocket. Feel it. Now turn."'),
            CoachingCue("Early Fire", '"Step down, sit in it, THEN go."'),
            CoachingCue("No Coil", '"Load the spring before you release it."'),
            CoachingCue("Slide", '"Down, not sideways. Feel the back hip catch."'),
        ),
        why_it_works=(
            "Gravity forces you INTO the back hip. Eccentric loading builds "
            "strength in position and delays the fire."
        ),
        profile_fits=_fits(
            (S.MAYBE, "Could help deepen load before quick turn"),
            (S.YES, "They need deep load for leverage"),
            (S.CRITICAL, "Back leg is their engine"),
            (S.YES, "Builds foundation for mass management"),
        ),
        contraindications=(
            "Don't use with guys who already over-load (get stuck back)",
            "Don't use with back hip or knee issues",
            "Don't use if they have timing issues from being too slow",
        ),
        progression=(
            "Box + Pause + Tee (feel the load, hold, then swing)",
            "Box + Tee (continuous motion)",
            "Box + Front Toss (add timing)",
        ),
    ),
    DrillDefinition(
        slug="violent-brake",
        name="Violent Brake Drill",
        category=DrillCategory.TRANSFER,
        triggered_by_flags=(F.LATE_TIMING, F.NO_DECEL, F.POOR_TRANSFER, F.ENERGY_LEAK,
                            F.OVER_SEPARATED),
        setup=(
            "Normal stance",
            "Resistance band around waist, anchored behind",
            "Tee or soft toss",
        ),
        the_move=(
            "Load normally",
            "Fire hips; band pulls back",
            "STOP the hips against the band resistance",
            "Feel torso whip past",
        ),
        coaching_cues=_cues(
            '"Hips GO, hips STOP, hands GO."',
            '"The brake is what makes the whip."',
            '"Fire and freeze the hips. Let the barrel take over."',
        ),
        why_it_works=(
            "Band creates resistance that must be overcome. Forces active "
            "deceleration. Athlete FEELS the transfer when hips stop."
        ),
        profile_fits=_fits(
            (S.YES, "Teaches brake after quick rotation"),
            (S.CRITICAL, "This IS their power source"),
            (S.YES, "Helps convert linear to rotational"),
            (S.YES, "Manages the big engine"),
        ),
        contraindications=(
            "Don't use if they're already too \"stoppy\" (no flow)",
            "Don't use heavy resistance, just enough to feel",
        ),
    ),
    DrillDefinition(
        slug="freeman-pendulum",
        name="Freeman Pendulum",
        category=DrillCategory.RELEASE,
        triggered_by_flags=(F.LATE_WHIP, F.HANDS_LATE, F.ARM_DOMINANT, F.OVER_SEPARATED),
        setup=("Normal stance", "Focus on hands at back hip", "Tee or soft toss"),
        the_move=(
            "Load normally",
            "As hands reach back hip, RELEASE the bat",
            "Bat should swing like a pendulum toward the ground",
            "Don't muscle it; let it fall",
        ),
        coaching_cues=_cues(
            '"Hands pass back hip. Let it go."',
            '"The bat falls. You don\'t throw it."',
            '"Pendulum, not push."',
        ),
        why_it_works=(
            "Creates feel for early release point. Takes arms out of the "
            "equation. Teaches gravity-assisted bat path."
        ),
        profile_fits=_fits(
            (S.YES, "Gets them releasing sooner"),
            (S.CRITICAL, "This IS the Freeman feel"),
            (S.CAREFUL, "May feel disconnected from ground"),
            (S.YES, "Simplifies the release"),
        ),
        contraindications=(
            "Don't use with guys who are ALREADY early (whip <50%)",
            "Don't use if they cast; they'll cast more",
        ),
    ),
    DrillDefinition(
        slug="wall-drill",
        name="Wall Drill",
        category=DrillCategory.BRACE,
        triggered_by_flags=(F.DRIFT, F.WEAK_BRACE, F.HEAD_MOVEMENT, F.OVER_ROTATION),
        setup=(
            "Stand with front hip ~6 inches from wall",
            "Tee set up inside",
            "Normal stance parallel to wall",
        ),
        the_move=(
            "Load normally",
            "Stride and rotate",
            "Front hip should NOT touch wall",
            "If you drift, you hit the wall",
        ),
        coaching_cues=_cues(
            '"Rotate, don\'t slide."',
            '"The wall is your front-side limit."',
            '"If you touch, you drifted."',
        ),
        why_it_works=(
            "Instant feedback on drift. Physical constraint prevents the "
            "mistake. Teaches rotation around axis, not slide through it."
        ),
        profile_fits=_fits(
            (S.YES, "Keeps rotation tight"),
            (S.YES, "Prevents drift before brake"),
            (S.CAREFUL, "They need SOME linear; don't over-constrain"),
            (S.YES, "Keeps mass centered"),
        ),
        contraindications=(
            "Don't use with guys who are already too rotational with no linear",
            "Don't put wall too close; some forward movement is natural",
        ),
    ),
    DrillDefinition(
        slug="back-hip-load",
        name="Back Hip Load Drill",
        category=DrillCategory.LOADING,
        triggered_by_flags=(F.SHALLOW_XFACTOR, F.NO_COIL, F.WEAK_LOAD),
        setup=(
            "Hands on bat, bat behind back (in elbows)",
            "Normal stance",
            "No swing, just load pattern",
        ),
        the_move=(
            "Sit into back hip",
            "Feel the coil in the back glute",
            "Front shoulder stays closed",
            "Hold for 2 seconds",
            "Return",
        ),
        coaching_cues=_cues(
            '"Sit into the back pocket."',
            '"Feel the glute load."',
            '"Shoulders stay closed. Hips do the work."',
        ),
        why_it_works=(
            "Isolates the load pattern. Builds awareness of back hip "
            "engagement. Creates separation feel without the swing."
        ),
        profile_fits=_fits(
            (S.CAREFUL, "They don't need deep load; quick turn is their style"),
            (S.CRITICAL, "Deep load is their power source"),
            (S.YES, "Builds the foundation for push"),
            (S.YES, "Teaches them to use the mass"),
        ),
        contraindications=(
            "Don't over-cue for Spinners; they'll get stuck",
            "Don't use if they have hip mobility restrictions",
        ),
    ),
    DrillDefinition(
        slug="step-and-turn-sop",
        name="Step and Turn SOP",
        category=DrillCategory.SEQUENCING,
        triggered_by_flags=(F.SIMULTANEOUS, F.NO_SEQUENCE, F.POOR_TRANSFER),
        setup=(
            "Normal stance",
            "Hands at chest (no bat first, then add)",
            "Focus on lower/upper body separation",
        ),
        the_move=(
            "STEP: front foot lands",
            "Pause (feel the separation)",
            "TURN: hips fire, torso follows",
            "Hands go last",
        ),
        coaching_cues=_cues(
            '"Step... pause... TURN."',
            '"Feel the hips go before the hands."',
            '"Two beats, not one."',
        ),
        why_it_works=(
            "Breaks the simultaneous pattern. Creates feel for sequence. "
            "Teaches patience."
        ),
        profile_fits=_fits(
            (S.CAREFUL, "Don't slow them down too much"),
            (S.YES, "Reinforces hip lead"),
            (S.YES, "Builds ground-up pattern"),
            (S.CRITICAL, "They need the sequence most"),
        ),
        contraindications=(
            "Don't over-cue the pause; it should be felt, not forced",
            "Don't use with guys who are already too slow/deliberate",
        ),
    ),
    DrillDefinition(
        slug="resistance-band-rotations",
        name="Resistance Band Rotations",
        category=DrillCategory.TRANSFER,
        triggered_by_flags=(F.WEAK_TRANSFER, F.LOW_TORSO_VELO, F.ENERGY_LEAK),
        setup=(
            "Band anchored at hip height",
            "Handle at chest or shoulders",
            "Athletic stance",
        ),
        the_move=(
            "Rotate against band resistance",
            "Focus on torso accelerating",
            "Hips stable, torso moves",
            "Control the return",
        ),
        coaching_cues=_cues(
            '"Torso does the work."',
            '"Hips stay quiet, shoulders rip."',
            '"Control the way back."',
        ),
        why_it_works=(
            "Builds rotational strength. Isolates torso acceleration. "
            "Creates feel for transfer."
        ),
        profile_fits=_fits(
            (S.YES, "Builds quick rotation strength"),
            (S.YES, "Builds leverage strength"),
            (S.CAREFUL, "Don't over-rotate them"),
            (S.YES, "Builds the engine"),
        ),
        contraindications=(
            "Don't use heavy resistance; quality over load",
            "Don't let them cheat with hips",
        ),
    ),
    DrillDefinition(
        slug="single-leg-stability",
        name="Single-Leg Stability Holds",
        category=DrillCategory.FOUNDATION,
        triggered_by_flags=(F.BALANCE_ASYMMETRY,),
        setup=("Stand on one leg", "Opposite knee at 90°", "Hold position"),
        the_move=(
            "Hold for 30-60 seconds",
            "Don't let knee cave",
            "Keep hips level",
            "Switch sides",
        ),
        coaching_cues=_cues(
            '"Knee over toe. Don\'t cave."',
            '"Hips level, eyes forward."',
            '"Own the position."',
        ),
        why_it_works=(
            "Builds single-leg stability. Exposes asymmetry. Foundation for "
            "all dynamic movement."
        ),
        profile_fits=_fits(*[(S.YES, "Foundation work for everyone")] * 4),
        contraindications=(
            "Regress to wall support if they can't hold 15 seconds",
            "Address pain immediately",
        ),
    ),
    DrillDefinition(
        slug="constraint-rope-drill",
        name="Constraint Rope Drill",
        category=DrillCategory.CONNECTION,
        triggered_by_flags=(F.CASTING, F.ARM_BAR, F.DISCONNECTED),
        setup=(
            "Rope/band connects back elbow to front hip",
            "Normal stance",
            "Tee or soft toss",
        ),
        the_move=(
            "Swing with constraint",
            "If you cast, rope pulls tight",
            "Stay connected through rotation",
        ),
        coaching_cues=_cues(
            '"Hands in, barrel out."',
            '"Turn together."',
            '"Feel the connection."',
        ),
        why_it_works=(
            "Physical constraint prevents casting. Teaches hands-inside-ball "
            "path. Creates body-arm connection feel."
        ),
        profile_fits=_fits(
            (S.YES, "Keeps them compact"),
            (S.CAREFUL, "They need some extension; don't over-constrain"),
            (S.YES, "Keeps them connected to ground"),
            (S.YES, "Prevents arm-dominant patterns"),
        ),
        contraindications=(
            "Don't use with Whippers who need extension",
            "Don't use if they're already too tight/restricted",
        ),
    ),
)

FLAG_TO_DRILLS = MappingProxyType({
    # Deceleration
    F.WEAK_BRACE: ("box-step-down-front", "violent-brake", "wall-drill"),
    F.OVER_SPINNING: ("box-step-down-front", "violent-brake"),
    F.LATE_TIMING: ("box-step-down-front", "violent-brake", "freeman-pendulum"),
    F.NO_DECEL: ("violent-brake",),
    # Loading
    F.WEAK_LOAD: ("box-step-down-back", "back-hip-load"),
    F.EARLY_FIRE: ("box-step-down-back", "back-hip-load"),
    F.NO_COIL: ("box-step-down-back", "back-hip-load"),
    F.SLIDE: ("box-step-down-back", "wall-drill"),
    F.SHALLOW_XFACTOR: ("back-hip-load",),
    F.OVER_ROTATION: ("wall-drill",),
    # Transfer
    F.WEAK_TRANSFER: ("resistance-band-rotations", "violent-brake"),
    F.LOW_TORSO_VELO: ("resistance-band-rotations",),
    F.POOR_TRANSFER: ("step-and-turn-sop", "resistance-band-rotations"),
    F.ENERGY_LEAK: ("violent-brake", "resistance-band-rotations"),
    # Timing / release
    F.LATE_WHIP: ("freeman-pendulum",),
    F.HANDS_LATE: ("freeman-pendulum",),
    F.ARM_DOMINANT: ("freeman-pendulum",),
    # Drift
    F.DRIFT: ("wall-drill", "box-step-down-front"),
    F.HEAD_MOVEMENT: ("wall-drill",),
    # Sequence
    F.SIMULTANEOUS: ("step-and-turn-sop",),
    F.NO_SEQUENCE: ("step-and-turn-sop",),
    F.OVER_SEPARATED: ("violent-brake", "freeman-pendulum"),
    # Connection
    F.CASTING: ("constraint-rope-drill",),
    F.ARM_BAR: ("constraint-rope-drill",),
    F.DISCONNECTED: ("constraint-rope-drill",),
    # Foundation
    F.BALANCE_ASYMMETRY: ("single-leg-stability",),
})

# Hard blocks: never prescribed for the profile
PROFILE_DRILL_RESTRICTIONS = MappingProxyType({
    P.SPINNER: (),
    P.WHIPPER: ("constraint-rope-drill",),
    P.SLINGSHOTTER: ("box-step-down-front",),
    P.TITAN: (),
})

# Soft warnings: prescribed, but coached carefully
PROFILE_DRILL_CAUTIONS = MappingProxyType({
    P.SPINNER: ("box-step-down-back", "step-and-turn-sop", "back-hip-load"),
    P.WHIPPER: (),
    P.SLINGSHOTTER: ("wall-drill", "resistance-band-rotations"),
    P.TITAN: (),
})

PROFILE_CONTRAINDICATIONS: tuple[ProfileContraindication, ...] = (
    ProfileContraindication(
        P.SPINNER,
        ("Extension drills", "Long swing cues", "Hip slide emphasis",
         '"Get through the ball" cues'),
        "Spinners generate power through rotation, not linear extension. "
        "Forcing extension breaks their natural path.",
    ),
    ProfileContraindication(
        P.WHIPPER,
        ("Compact cues", '"Keep hands close"', "Quick hands drills",
         "Tight rotation work"),
        "Whippers need extension and leverage. Compacting their swing kills "
        "their power source.",
    ),
    ProfileContraindication(
        P.SLINGSHOTTER,
        ("Rotation-only drills", '"Spin and hit" cues', '"Stay back" cues',
         "Over-constraining linear movement"),
        "Slingshotters use linear ground force. Pure rotation takes away "
        "their foundation.",
    ),
    ProfileContraindication(
        P.TITAN,
        ("Speed-first cues", "Quick twitch drills only",
         "Light bat work exclusively", '"Be faster" messaging'),
        "Titans need to manage their mass. Speed-first approaches cause "
        "sequencing breakdown.",
    ),
)
