"""
Score Calculator

Weighted-normalized scoring:
- Each factor's capped sub-total is divided by its own maximum (0-1 scale)
- Normalized sub-totals are combined with the profile weights
- The weighted sum is rescaled by 13 onto the legacy 0-13 range
- The probability bucket comes from fixed thresholds on that total
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Any, Optional

from survey.models import Site, LandCover, Probability
from survey.profiles import FACTORS, FACTOR_LABELS, WeightProfile, get_weights

log = logging.getLogger(__name__)

# Maximum sub-total per factor, used to normalize onto 0-1.
FACTOR_MAXIMUMS = {
    "data_quality": 3,
    "morphology": 3,
    "elevation": 2,
    "water_access": 2,
    "vegetation": 2,
    "archaeology": 1,
}

SCORE_SCALE = 13
HIGH_THRESHOLD = 8
MEDIUM_THRESHOLD = 4


# ═══════════════════════════════════════════════════════════════════════════
# SUB-SCORES
# ═══════════════════════════════════════════════════════════════════════════
def data_quality_subtotal(site: Site) -> float:
    dq = site.data_quality
    bonus = 1 if dq.visualization_count >= 2 else 0
    return max(0, min(3, dq.point_density + bonus))


def morphology_subtotal(site: Site) -> float:
    morph = site.morphology
    size_bonus = 1 if morph.is_large else 0
    return max(0.0, min(3.0, morph.regularity + morph.complexity + size_bonus))


def context_subtotal(site: Site) -> float:
    return max(0, min(2, site.context.elevation_percentile))


def water_subtotal(site: Site) -> float:
    water = site.water
    return max(0, min(2, water.modern_water + len(water.historical_water)))


def vegetation_subtotal(site: Site) -> float:
    veg = site.vegetation
    if veg.land_cover == LandCover.URBAN:
        return 0
    cap = 1 if veg.land_cover == LandCover.FOREST else 2
    return max(0, min(cap, veg.anomaly_score))


def archaeology_subtotal(site: Site) -> float:
    return max(0, min(1, site.archaeology.sites_nearby))


SUBTOTAL_FUNCTIONS = {
    "data_quality": data_quality_subtotal,
    "morphology": morphology_subtotal,
    "elevation": context_subtotal,
    "water_access": water_subtotal,
    "vegetation": vegetation_subtotal,
    "archaeology": archaeology_subtotal,
}


def compute_subtotals(site: Site) -> Dict[str, float]:
    """Capped sub-total for every factor, keyed by weight name."""
    return {factor: SUBTOTAL_FUNCTIONS[factor](site) for factor in FACTORS}


def normalize(sub_totals: Dict[str, float]) -> Dict[str, float]:
    """Divide each sub-total by its factor maximum."""
    return {factor: sub_totals[factor] / FACTOR_MAXIMUMS[factor] for factor in FACTORS}


def weighted_sum(normalized: Dict[str, float], weights: WeightProfile) -> float:
    return sum(normalized[f] * weights.weight(f) for f in FACTORS)


def classify(total_score: float) -> Probability:
    """Bucket a 0-13 score. Boundary values fall into the lower bucket."""
    if total_score > HIGH_THRESHOLD:
        return Probability.HIGH
    if total_score > MEDIUM_THRESHOLD:
        return Probability.MEDIUM
    return Probability.LOW


# ═══════════════════════════════════════════════════════════════════════════
# RESULT
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class ScoreResult:
    """Output of the Score Calculator for one site."""
    sub_totals: Dict[str, float]
    weighted_score: float  # 0-1
    total_score: float  # 0-13
    probability: Probability

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sub_totals': dict(self.sub_totals),
            'weighted_score': self.weighted_score,
            'total_score': self.total_score,
            'probability': self.probability.value,
        }


def compute_score(site: Site, weights: Optional[WeightProfile] = None) -> ScoreResult:
    """
    Score a site. Pure; the caller stores the result on the Site.

    Args:
        site: Site with in-range raw inputs
        weights: Override weights; defaults to the site's own profile

    Raises:
        UnknownProfile: if weights is None and the site's profile is unknown
    """
    if weights is None:
        weights = get_weights(site.scoring_profile, site.custom_weights)

    sub_totals = compute_subtotals(site)
    weighted = weighted_sum(normalize(sub_totals), weights)
    total = weighted * SCORE_SCALE
    probability = classify(total)

    log.debug(f"Site {site.id}: weighted={weighted:.4f} total={total:.2f} ({probability.value})")
    return ScoreResult(
        sub_totals=sub_totals,
        weighted_score=weighted,
        total_score=total,
        probability=probability,
    )


def score_site(site: Site, weights: Optional[WeightProfile] = None) -> Site:
    """Return a copy of the site with sub-totals, total score and probability filled in."""
    result = compute_score(site, weights)
    subs = result.sub_totals
    return replace(
        site,
        data_quality=replace(site.data_quality, sub_total=subs["data_quality"]),
        morphology=replace(site.morphology, sub_total=subs["morphology"]),
        context=replace(site.context, sub_total=subs["elevation"]),
        water=replace(site.water, sub_total=subs["water_access"]),
        vegetation=replace(site.vegetation, sub_total=subs["vegetation"]),
        archaeology=replace(site.archaeology, sub_total=subs["archaeology"]),
        total_score=result.total_score,
        probability=result.probability,
    )


def explain_score(site: Site, weights: Optional[WeightProfile] = None) -> str:
    """Generate human-readable explanation of a site's score."""
    if weights is None:
        weights = get_weights(site.scoring_profile, site.custom_weights)
    result = compute_score(site, weights)

    lines = [f"Score: {result.total_score:.1f}/{SCORE_SCALE} ({result.probability.value})"]
    lines.append(f"Profile: {site.scoring_profile}")
    lines.append("")
    lines.append("Factor contributions:")
    for factor in FACTORS:
        sub = result.sub_totals[factor]
        weight = weights.weight(factor)
        points = sub / FACTOR_MAXIMUMS[factor] * weight * SCORE_SCALE
        lines.append(
            f"  {FACTOR_LABELS[factor]}: {sub:g}/{FACTOR_MAXIMUMS[factor]} "
            f"x {weight:.0%} = +{points:.2f}"
        )
    return "\n".join(lines)
