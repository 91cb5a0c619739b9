"""
fourb command line: score swings, fingerprint momentum exports, normalize
bat-sensor batches and prescribe drills. Every command prints JSON.

Usage:
    fourb score metrics.json --age 14U
    fourb fingerprint momentum.csv --kinematics ik.csv
    fourb normalize swings.json --session S1 --sdk-version 3.2
    fourb prescribe --profile WHIPPER flag_casting flag_drift
    fourb -v ...                       # debug logging
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict

from fourb.utils.config import Config


def setup_logging(verbose: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _load_json(path: str):
    with open(path) as f:
        return json.load(f)


def _emit(payload):
    print(json.dumps(payload, indent=2, default=str))


def run_score(args) -> int:
    """Score a SwingMetrics JSON file on the 4B scale."""
    from fourb.four_b_scoring import calculate_4b_scores
    from fourb.models.swing import SwingMetrics

    metrics = SwingMetrics.from_dict(_load_json(args.metrics))
    tables = Config.scoring_tables()
    scores = calculate_4b_scores(metrics, age_group=args.age, tables=tables)
    _emit(asdict(scores))
    return 0


def run_fingerprint(args) -> int:
    """Compute the Kinetic Fingerprint from CSV exports."""
    from fourb.kinetic_fingerprint import calculate_kinetic_fingerprint, load_series_csv

    momentum = load_series_csv(args.momentum)
    kinematics = load_series_csv(args.kinematics) if args.kinematics else None
    result = calculate_kinetic_fingerprint(
        momentum, kinematics, tables=Config.scoring_tables()
    )
    _emit(asdict(result))
    return 0


def run_normalize(args) -> int:
    """Normalize a JSON array of vendor swing payloads."""
    from fourb.models.session import SensorSession
    from fourb.normalizer import normalize_swing_batch

    payload = _load_json(args.swings)
    if isinstance(payload, dict):
        payload = payload.get("swings", [])
    if not isinstance(payload, list):
        raise ValueError("expected a JSON array of swings or {\"swings\": [...]}")

    batch = normalize_swing_batch(
        payload,
        session_id=args.session,
        sdk_version=args.sdk_version,
        tables=Config.scoring_tables(),
    )
    session = SensorSession.from_batch(args.session, batch)
    _emit({
        "summary": batch.summary(),
        "stats": session.get_stats(),
        "swings": [swing.to_dict() for swing in session.swings],
    })
    return 0


def run_prescribe(args) -> int:
    """Prescribe drills for leak flags and a motor profile."""
    from fourb.drills import prescribe

    profile = args.profile or Config().get("default_motor_profile")
    _emit(prescribe(args.flags, profile).to_dict())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fourb",
        description="4B swing scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Score swing metrics on the 4B scale")
    score.add_argument("metrics", help="JSON file of swing metrics")
    score.add_argument(
        "--age", type=str, default=None,
        help="Age bracket (10U-18U, College, Pro; default from config)",
    )
    score.set_defaults(func=run_score)

    fingerprint = sub.add_parser(
        "fingerprint", help="Kinetic Fingerprint from a momentum-energy CSV",
    )
    fingerprint.add_argument("momentum", help="Momentum-energy CSV export")
    fingerprint.add_argument(
        "--kinematics", type=str, default=None,
        help="Inverse-kinematics CSV for X-factor (default: momentum file)",
    )
    fingerprint.set_defaults(func=run_fingerprint)

    normalize = sub.add_parser("normalize", help="Normalize bat-sensor swings")
    normalize.add_argument("swings", help="JSON file of vendor swing payloads")
    normalize.add_argument("--session", required=True, help="Session id")
    normalize.add_argument("--sdk-version", default=None, help="Vendor SDK version")
    normalize.set_defaults(func=run_normalize)

    presc = sub.add_parser("prescribe", help="Prescribe drills for leak flags")
    presc.add_argument(
        "--profile", type=str, default=None,
        help="Motor profile (SPINNER, WHIPPER, SLINGSHOTTER, TITAN)",
    )
    presc.add_argument("flags", nargs="*", help="Leak flags, e.g. flag_drift")
    presc.set_defaults(func=run_prescribe)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.func(args)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
