"""
Tests for piecewise banded scoring.

Validates:
  - Bands are evaluated top to bottom, first match wins
  - Open and closed interval edges
  - Non-finite inputs always land on the default arm
"""

import math
import pytest

from fourb.bands import (
    Band,
    BandTable,
    above,
    at_least,
    at_most,
    below,
    between,
    otherwise,
)


@pytest.fixture
def table():
    return BandTable((
        Band(between(10, 20), 100, "Mid"),
        Band(between(20, 30, lo_open=True), 80, "High"),
        Band(below(10), 60, "Low"),
    ), default=otherwise(0, "Out"))


class TestBandTable:
    """Tests for ordered band lookup."""

    @pytest.mark.parametrize("value,expected", [
        (10, (100, "Mid")),
        (20, (100, "Mid")),        # closed upper edge wins over the next band
        (20.0001, (80, "High")),
        (30, (80, "High")),
        (9.99, (60, "Low")),
        (31, (0, "Out")),
    ])
    def test_edges(self, table, value, expected):
        assert table.lookup(value) == expected

    def test_first_match_wins(self):
        """Overlapping bands resolve to the earlier one."""
        t = BandTable((
            Band(at_least(0), 1, "first"),
            Band(at_least(0), 2, "second"),
        ), default=otherwise(0, "none"))
        assert t.score(5) == 1

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None])
    def test_non_finite_hits_default(self, table, value):
        assert table.lookup(value) == (0, "Out")

    def test_empty_table_is_all_default(self):
        t = BandTable((), default=otherwise(42, "Flat"))
        assert t.lookup(1e9) == (42, "Flat")


class TestPredicates:
    """Tests for predicate builders."""

    def test_between_open_edges(self):
        p = between(1, 2, lo_open=True, hi_open=True)
        assert not p(1)
        assert p(1.5)
        assert not p(2)

    def test_one_sided(self):
        assert above(5)(5.01) and not above(5)(5)
        assert at_least(5)(5)
        assert below(5)(4.99) and not below(5)(5)
        assert at_most(5)(5)
