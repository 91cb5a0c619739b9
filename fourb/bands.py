"""
Piecewise banded scoring.

A BandTable is an ordered list of (predicate, score, label) bands evaluated
top to bottom. The first band whose predicate accepts the value wins; if
none do, the table's default arm is returned. Non-finite inputs (NaN, inf)
never match a band and always land on the default arm.
"""

import math
from dataclasses import dataclass
from typing import Callable

Predicate = Callable[[float], bool]


@dataclass(frozen=True)
class Band:
    """One scoring band: if predicate(value) then (score, label)."""
    predicate: Predicate
    score: float
    label: str


@dataclass(frozen=True)
class BandTable:
    """Ordered bands with a mandatory default arm."""
    bands: tuple[Band, ...]
    default: Band

    def lookup(self, value: float) -> tuple[float, str]:
        """Return (score, label) for value."""
        if value is None or not math.isfinite(value):
            return self.default.score, self.default.label
        for band in self.bands:
            if band.predicate(value):
                return band.score, band.label
        return self.default.score, self.default.label

    def score(self, value: float) -> float:
        return self.lookup(value)[0]


# =============================================================================
# Predicate builders
# =============================================================================

def between(lo: float, hi: float,
            lo_open: bool = False, hi_open: bool = False) -> Predicate:
    """Interval predicate. Closed on both ends unless told otherwise."""
    def check(v: float) -> bool:
        lower_ok = v > lo if lo_open else v >= lo
        upper_ok = v < hi if hi_open else v <= hi
        return lower_ok and upper_ok
    return check


def at_least(lo: float) -> Predicate:
    return lambda v: v >= lo


def above(lo: float) -> Predicate:
    return lambda v: v > lo


def below(hi: float) -> Predicate:
    return lambda v: v < hi


def at_most(hi: float) -> Predicate:
    return lambda v: v <= hi


def otherwise(score: float, label: str) -> Band:
    """Default arm for a BandTable."""
    return Band(lambda v: True, score, label)
