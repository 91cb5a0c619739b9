"""
Tests for drill prescription.

Validates:
  - Flag union order and de-duplication
  - Profile restrictions are always enforced
  - Cautions are reported, not removed
  - Unknown flags and profiles fall back without raising
"""

import logging

import pytest

from fourb.drills import (
    DEFAULT_LIBRARY,
    DrillLibrary,
    filter_drills_by_profile,
    get_cautions,
    get_drill_by_slug,
    get_drills_for_flags,
    get_profile_contraindications,
    is_drill_cautioned_for_profile,
    prescribe,
    resolve_profile,
)
from fourb.models.drill import DrillFlag, MotorProfile, ProfileFitStatus
from fourb.utils.drill_data import (
    DRILL_LIBRARY,
    FLAG_TO_DRILLS,
    PROFILE_DRILL_RESTRICTIONS,
)


class TestDrillData:
    """Tests for the static drill catalogue."""

    def test_ten_core_drills(self):
        assert len(DRILL_LIBRARY) == 10
        assert len({d.slug for d in DRILL_LIBRARY}) == 10

    def test_every_mapped_slug_exists(self):
        for slugs in FLAG_TO_DRILLS.values():
            for slug in slugs:
                assert get_drill_by_slug(slug) is not None, slug

    def test_every_flag_is_mapped(self):
        assert set(FLAG_TO_DRILLS) == set(DrillFlag)

    def test_profile_fit_lookup(self):
        drill = get_drill_by_slug("violent-brake")
        assert drill.fit_for(MotorProfile.WHIPPER).status == ProfileFitStatus.CRITICAL


class TestGetDrillsForFlags:
    """Tests for flag -> drill union."""

    def test_flag_order_then_mapping_order(self):
        slugs = get_drills_for_flags(["flag_drift", "flag_weak_brace"])
        assert slugs == ["wall-drill", "box-step-down-front", "violent-brake"]

    def test_accepts_enum(self):
        assert get_drills_for_flags([DrillFlag.CASTING]) == ["constraint-rope-drill"]

    def test_unknown_flag_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            slugs = get_drills_for_flags(["flag_typo", "flag_no_decel"])
        assert slugs == ["violent-brake"]
        assert "flag_typo" in caplog.text

    def test_fingerprint_flags_mapped(self):
        assert get_drills_for_flags(["flag_over_rotation"]) == ["wall-drill"]
        assert "violent-brake" in get_drills_for_flags(["flag_energy_leak"])
        assert "freeman-pendulum" in get_drills_for_flags(["flag_over_separated"])


class TestProfileFiltering:
    """Tests for restrictions and cautions."""

    def test_whipper_never_gets_rope_drill(self):
        slugs = get_drills_for_flags(["flag_casting"])
        assert slugs == ["constraint-rope-drill"]
        assert filter_drills_by_profile(slugs, MotorProfile.WHIPPER) == []

    @pytest.mark.parametrize("profile", list(MotorProfile))
    def test_restrictions_always_enforced(self, profile):
        all_slugs = get_drills_for_flags(list(DrillFlag))
        filtered = filter_drills_by_profile(all_slugs, profile)
        for slug in PROFILE_DRILL_RESTRICTIONS[profile]:
            assert slug not in filtered

    def test_cautions_kept(self):
        slugs = get_drills_for_flags(["flag_simultaneous", "flag_weak_load"])
        filtered = filter_drills_by_profile(slugs, "SPINNER")
        assert "step-and-turn-sop" in filtered
        assert get_cautions(filtered, "SPINNER") == [
            "step-and-turn-sop", "box-step-down-back", "back-hip-load",
        ]

    def test_is_cautioned(self):
        assert is_drill_cautioned_for_profile("wall-drill", MotorProfile.SLINGSHOTTER)
        assert not is_drill_cautioned_for_profile("wall-drill", MotorProfile.TITAN)

    def test_contraindications(self):
        entry = get_profile_contraindications("titan")
        assert entry.profile == MotorProfile.TITAN
        assert "Speed-first cues" in entry.avoid


class TestResolveProfile:
    """Tests for profile coercion."""

    def test_case_insensitive(self):
        assert resolve_profile(" whipper ") == MotorProfile.WHIPPER

    def test_unknown_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_profile("LEFTY") == MotorProfile.SPINNER
        assert "LEFTY" in caplog.text

    def test_none_is_default(self):
        assert resolve_profile(None) == MotorProfile.SPINNER


class TestPrescribe:
    """Tests for full prescriptions."""

    def test_slingshotter(self):
        result = prescribe(["flag_weak_brace", "flag_weak_transfer"], "SLINGSHOTTER")
        assert result.profile == MotorProfile.SLINGSHOTTER
        assert result.slugs == [
            "violent-brake", "wall-drill", "resistance-band-rotations",
        ]
        assert result.cautioned == ("wall-drill", "resistance-band-rotations")

    def test_unknown_flags_reported(self):
        result = prescribe(["flag_nope", "flag_casting"], "TITAN")
        assert result.unknown_flags == ("flag_nope",)
        assert result.slugs == ["constraint-rope-drill"]

    def test_to_dict(self):
        data = prescribe(["flag_drift"], "SLINGSHOTTER").to_dict()
        assert data["profile"] == "SLINGSHOTTER"
        assert data["drills"][0] == {
            "slug": "wall-drill",
            "name": "Wall Drill",
            "category": "brace",
            "cautioned": True,
        }

    def test_custom_library(self):
        library = DrillLibrary(
            flag_to_drills={DrillFlag.DRIFT: ("wall-drill", "missing-drill")},
            restrictions={},
            cautions={},
        )
        result = library.prescribe(["flag_drift"], "SPINNER")
        assert result.slugs == ["wall-drill"]

    def test_default_library_shared(self):
        assert prescribe(["flag_drift"]).slugs == DEFAULT_LIBRARY.prescribe(["flag_drift"]).slugs
