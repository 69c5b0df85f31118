"""
Weight Profile Registry

Named archaeological contexts mapped to six factor weights:
- Built-in profiles are constants and must sum to 1.0
- A custom profile lets the user assign weights, validated at use time
"""

import math
import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Union
from enum import Enum

from survey.errors import UnknownProfile, InvalidWeightSum

log = logging.getLogger(__name__)

# Order matters: it is the order factors are displayed and exported in.
FACTORS = (
    "data_quality",
    "morphology",
    "elevation",
    "water_access",
    "vegetation",
    "archaeology",
)

FACTOR_LABELS = {
    "data_quality": "Data Quality",
    "morphology": "Morphology",
    "elevation": "Elevation",
    "water_access": "Water Access",
    "vegetation": "Vegetation",
    "archaeology": "Archaeology",
}

BUILTIN_SUM_TOLERANCE = 1e-4
CUSTOM_SUM_TOLERANCE = 0.01


# ═══════════════════════════════════════════════════════════════════════════
# PROFILE KEYS
# ═══════════════════════════════════════════════════════════════════════════
class ScoringProfile(Enum):
    """Archaeological contexts with their own weighting."""
    PREHISTORIC = "prehistoric"
    ROMAN_MILITARY = "roman_military"
    MEDIEVAL = "medieval"
    MODERN_MILITARY = "modern_military"
    AGRICULTURAL = "agricultural"
    INDUSTRIAL = "industrial"
    CUSTOM = "custom"


@dataclass(frozen=True)
class WeightProfile:
    """Six non-negative factor weights, intended to sum to 1.0."""
    data_quality: float
    morphology: float
    elevation: float
    water_access: float
    vegetation: float
    archaeology: float

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def weight(self, factor: str) -> float:
        return getattr(self, factor)

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "WeightProfile":
        return cls(**{f: min(1.0, max(0.0, float(data.get(f, 0.0)))) for f in FACTORS})


@dataclass
class ProfileInfo:
    """Display metadata and weights for one registered profile."""

    name: str
    description: str
    weights: WeightProfile
    characteristics: List[str] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# PREDEFINED PROFILES
# ═══════════════════════════════════════════════════════════════════════════
PROFILES = {
    ScoringProfile.PREHISTORIC: ProfileInfo(
        name="Prehistoric Settlements",
        description="Emphasizes water access (35%), suitable for settlements from Neolithic to Bronze Age",
        weights=WeightProfile(
            data_quality=0.15,
            morphology=0.15,
            elevation=0.10,
            water_access=0.35,
            vegetation=0.15,
            archaeology=0.10,
        ),
        characteristics=[
            "Heavily weighted toward water sources (historical and modern)",
            "Less emphasis on geometric regularity",
            "Considers seasonal resource availability",
        ],
    ),

    ScoringProfile.ROMAN_MILITARY: ProfileInfo(
        name="Roman Military Sites",
        description="Focuses on geometric morphology (25%) and strategic elevation (20%)",
        weights=WeightProfile(
            data_quality=0.15,
            morphology=0.25,
            elevation=0.20,
            water_access=0.15,
            vegetation=0.10,
            archaeology=0.15,
        ),
        characteristics=[
            "Strong emphasis on geometric forms and regularity",
            "Strategic elevation important for camps and forts",
            "Archaeological context valuable for military roads",
        ],
    ),

    ScoringProfile.MEDIEVAL: ProfileInfo(
        name="Medieval Fortifications",
        description="Prioritizes defensive positions (25% elevation) with balanced other factors",
        weights=WeightProfile(
            data_quality=0.15,
            morphology=0.20,
            elevation=0.25,
            water_access=0.15,
            vegetation=0.10,
            archaeology=0.15,
        ),
        characteristics=[
            "Dominant positions crucial for defense",
            "Morphology reflects castle and fortification plans",
            "Water access balanced with defensibility",
        ],
    ),

    ScoringProfile.MODERN_MILITARY: ProfileInfo(
        name="Modern Military",
        description="Heavy weight on regular morphology (30%) typical of military installations",
        weights=WeightProfile(
            data_quality=0.20,
            morphology=0.30,
            elevation=0.15,
            water_access=0.05,
            vegetation=0.15,
            archaeology=0.15,
        ),
        characteristics=[
            "Regular patterns from standardized construction",
            "Less dependent on water sources",
            "Often in upland training areas",
        ],
    ),

    ScoringProfile.AGRICULTURAL: ProfileInfo(
        name="Agricultural Features",
        description="Vegetation patterns (25%) and water access (20%) are key indicators",
        weights=WeightProfile(
            data_quality=0.15,
            morphology=0.20,
            elevation=0.05,
            water_access=0.20,
            vegetation=0.25,
            archaeology=0.15,
        ),
        characteristics=[
            "Vegetation anomalies from field systems",
            "Water management features important",
            "Lower elevation areas preferred",
        ],
    ),

    ScoringProfile.INDUSTRIAL: ProfileInfo(
        name="Industrial Remains",
        description="Infrastructure proximity via morphology (25%) and archaeological context (20%)",
        weights=WeightProfile(
            data_quality=0.20,
            morphology=0.25,
            elevation=0.05,
            water_access=0.10,
            vegetation=0.20,
            archaeology=0.20,
        ),
        characteristics=[
            "Morphology shows extraction/processing areas",
            "Archaeological databases often have records",
            "Transport infrastructure proximity",
        ],
    ),

    ScoringProfile.CUSTOM: ProfileInfo(
        name="Custom Profile",
        description="Define your own weights for specific research questions",
        weights=WeightProfile(
            data_quality=0.17,
            morphology=0.17,
            elevation=0.17,
            water_access=0.17,
            vegetation=0.16,
            archaeology=0.16,
        ),
        characteristics=[
            "Define weights based on your specific research questions",
        ],
    ),
}

DEFAULT_CUSTOM_WEIGHTS = PROFILES[ScoringProfile.CUSTOM].weights


def _check_builtin_profiles():
    for key, info in PROFILES.items():
        if key is ScoringProfile.CUSTOM:
            continue
        if not math.isclose(info.weights.total, 1.0, abs_tol=BUILTIN_SUM_TOLERANCE):
            raise ValueError(f"Profile '{key.value}' weights sum to {info.weights.total}, expected 1.0")


_check_builtin_profiles()


# ═══════════════════════════════════════════════════════════════════════════
# LOOKUP
# ═══════════════════════════════════════════════════════════════════════════
def resolve_profile(profile: Union[str, ScoringProfile]) -> ScoringProfile:
    """Turn a profile key (string or enum) into a ScoringProfile."""
    if isinstance(profile, ScoringProfile):
        return profile
    try:
        return ScoringProfile(profile)
    except ValueError:
        raise UnknownProfile(profile, [p.value for p in ScoringProfile]) from None


def get_weights(
    profile: Union[str, ScoringProfile],
    custom_weights: Optional[WeightProfile] = None
) -> WeightProfile:
    """
    Get the weights for a profile.

    Args:
        profile: Profile key, e.g. "prehistoric"
        custom_weights: User weights, only consulted for the custom profile

    Raises:
        UnknownProfile: if the key is not registered
    """
    key = resolve_profile(profile)
    if key is ScoringProfile.CUSTOM and custom_weights is not None:
        return custom_weights
    return PROFILES[key].weights


def validate_weights(weights: WeightProfile) -> Optional[InvalidWeightSum]:
    """Return an InvalidWeightSum warning if weights are not 1.0 ± 0.01, else None."""
    total = weights.total
    if abs(total - 1.0) < CUSTOM_SUM_TOLERANCE:
        return None
    log.warning(f"Custom weights sum to {total:.3f}; scoring with unnormalized weights")
    return InvalidWeightSum(total, weights.as_dict())


def list_profiles() -> List[Dict[str, str]]:
    """List all registered profiles."""
    return [
        {"id": p.value, "name": PROFILES[p].name, "description": PROFILES[p].description}
        for p in ScoringProfile
    ]
