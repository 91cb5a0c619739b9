"""
Drill prescription for fourb.

Turns leak flags from either scorer into an ordered, de-duplicated drill
list for a hitter's motor profile. Restricted drills are removed outright;
cautioned drills stay in the list and are reported separately so a coach
knows to go carefully with them.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence, Union

from fourb.models.drill import (
    DrillDefinition,
    DrillFlag,
    MotorProfile,
    ProfileContraindication,
)
from fourb.utils.drill_data import (
    DRILL_LIBRARY,
    FLAG_TO_DRILLS,
    PROFILE_CONTRAINDICATIONS,
    PROFILE_DRILL_CAUTIONS,
    PROFILE_DRILL_RESTRICTIONS,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = MotorProfile.SPINNER

ProfileLike = Union[MotorProfile, str, None]
FlagLike = Union[DrillFlag, str]


@dataclass(frozen=True)
class Prescription:
    """Drills prescribed for a set of flags and a motor profile.

    Attributes:
        profile: Profile the prescription was resolved for.
        drills: Prescribed drills, in flag order then mapping order.
        cautioned: Slugs from `drills` to coach carefully for this profile.
        unknown_flags: Input tokens that matched no known flag.
    """
    profile: MotorProfile
    drills: tuple[DrillDefinition, ...]
    cautioned: tuple[str, ...] = ()
    unknown_flags: tuple[str, ...] = ()

    @property
    def slugs(self) -> list[str]:
        return [drill.slug for drill in self.drills]

    def to_dict(self) -> dict:
        return {
            "profile": self.profile.value,
            "drills": [
                {
                    "slug": drill.slug,
                    "name": drill.name,
                    "category": drill.category.value,
                    "cautioned": drill.slug in self.cautioned,
                }
                for drill in self.drills
            ],
            "cautioned": list(self.cautioned),
            "unknown_flags": list(self.unknown_flags),
        }


def resolve_profile(profile: ProfileLike) -> MotorProfile:
    """Coerce a profile name (any case) to MotorProfile.

    Unknown names fall back to SPINNER, which has no hard restrictions.
    """
    if isinstance(profile, MotorProfile):
        return profile
    if profile is None:
        return DEFAULT_PROFILE
    try:
        return MotorProfile(str(profile).strip().upper())
    except ValueError:
        logger.warning(
            f"Unknown motor profile {profile!r}, using {DEFAULT_PROFILE.value}"
        )
        return DEFAULT_PROFILE


class DrillLibrary:
    """Drill definitions plus the rules for prescribing them.

    The module-level DEFAULT_LIBRARY holds the core drills; build another
    instance to prescribe from a different catalogue.
    """

    def __init__(
        self,
        drills: Sequence[DrillDefinition] = DRILL_LIBRARY,
        flag_to_drills: Mapping[DrillFlag, Sequence[str]] = FLAG_TO_DRILLS,
        restrictions: Mapping[MotorProfile, Sequence[str]] = PROFILE_DRILL_RESTRICTIONS,
        cautions: Mapping[MotorProfile, Sequence[str]] = PROFILE_DRILL_CAUTIONS,
        contraindications: Sequence[ProfileContraindication] = PROFILE_CONTRAINDICATIONS,
    ):
        self._drills = {drill.slug: drill for drill in drills}
        self._flag_to_drills = flag_to_drills
        self._restrictions = restrictions
        self._cautions = cautions
        self._contraindications = tuple(contraindications)

    @property
    def drills(self) -> list[DrillDefinition]:
        return list(self._drills.values())

    def get_drill_by_slug(self, slug: str) -> Optional[DrillDefinition]:
        return self._drills.get(slug)

    def _parse_flags(self, flags: Iterable[FlagLike]) -> tuple[list[DrillFlag], list[str]]:
        known, unknown = [], []
        for flag in flags:
            try:
                known.append(DrillFlag(flag))
            except ValueError:
                logger.warning(f"Ignoring unknown drill flag {flag!r}")
                unknown.append(str(flag))
        return known, unknown

    def get_drills_for_flags(self, flags: Iterable[FlagLike]) -> list[str]:
        """Union of drill slugs for the flags, first occurrence wins."""
        known, _ = self._parse_flags(flags)
        return self._union(known)

    def _union(self, flags: Iterable[DrillFlag]) -> list[str]:
        slugs: list[str] = []
        for flag in flags:
            for slug in self._flag_to_drills.get(flag, ()):
                if slug not in slugs:
                    slugs.append(slug)
        return slugs

    def filter_drills_by_profile(self, slugs: Iterable[str],
                                 profile: ProfileLike) -> list[str]:
        """Drop drills the profile must never do."""
        restricted = self._restrictions.get(resolve_profile(profile), ())
        return [slug for slug in slugs if slug not in restricted]

    def is_drill_cautioned_for_profile(self, slug: str, profile: ProfileLike) -> bool:
        return slug in self._cautions.get(resolve_profile(profile), ())

    def get_cautions(self, slugs: Iterable[str], profile: ProfileLike) -> list[str]:
        """The subset of slugs to coach carefully for the profile."""
        profile = resolve_profile(profile)
        return [slug for slug in slugs
                if self.is_drill_cautioned_for_profile(slug, profile)]

    def get_profile_contraindications(
            self, profile: ProfileLike) -> Optional[ProfileContraindication]:
        profile = resolve_profile(profile)
        for entry in self._contraindications:
            if entry.profile == profile:
                return entry
        return None

    def prescribe(self, flags: Iterable[FlagLike],
                  profile: ProfileLike = DEFAULT_PROFILE) -> Prescription:
        """Resolve flags to drills for a profile.

        Args:
            flags: Leak flags, as DrillFlag or their string values.
            profile: Motor profile, as MotorProfile or a name in any case.

        Returns:
            Prescription with restricted drills removed.
        """
        profile = resolve_profile(profile)
        known, unknown = self._parse_flags(flags)

        slugs = self.filter_drills_by_profile(self._union(known), profile)
        drills = []
        for slug in slugs:
            drill = self.get_drill_by_slug(slug)
            if drill is None:
                logger.warning(f"Flag mapping names unknown drill {slug!r}")
                continue
            drills.append(drill)

        prescription = Prescription(
            profile=profile,
            drills=tuple(drills),
            cautioned=tuple(self.get_cautions((d.slug for d in drills), profile)),
            unknown_flags=tuple(unknown),
        )
        logger.debug(
            f"Prescribed {prescription.slugs} for {profile.value} "
            f"(cautioned={list(prescription.cautioned)})"
        )
        return prescription


DEFAULT_LIBRARY = DrillLibrary()


def get_drills_for_flags(flags: Iterable[FlagLike]) -> list[str]:
    return DEFAULT_LIBRARY.get_drills_for_flags(flags)


def filter_drills_by_profile(slugs: Iterable[str], profile: ProfileLike) -> list[str]:
    return DEFAULT_LIBRARY.filter_drills_by_profile(slugs, profile)


def get_cautions(slugs: Iterable[str], profile: ProfileLike) -> list[str]:
    return DEFAULT_LIBRARY.get_cautions(slugs, profile)


def is_drill_cautioned_for_profile(slug: str, profile: ProfileLike) -> bool:
    return DEFAULT_LIBRARY.is_drill_cautioned_for_profile(slug, profile)


def get_profile_contraindications(profile: ProfileLike) -> Optional[ProfileContraindication]:
    return DEFAULT_LIBRARY.get_profile_contraindications(profile)


def get_drill_by_slug(slug: str) -> Optional[DrillDefinition]:
    return DEFAULT_LIBRARY.get_drill_by_slug(slug)


def prescribe(flags: Iterable[FlagLike],
              profile: ProfileLike = DEFAULT_PROFILE) -> Prescription:
    return DEFAULT_LIBRARY.prescribe(flags, profile)
