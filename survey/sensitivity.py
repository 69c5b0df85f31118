"""
Sensitivity Analysis Module - Leave-one-factor-out diagnostics.

Removes each factor in turn, renormalizes the remaining weights and measures
how much the score moves. Flags single-factor dominance as a bias signal.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Tuple

from survey.models import Site
from survey.profiles import FACTORS, FACTOR_LABELS, WeightProfile, get_weights
from survey.scoring import SCORE_SCALE, compute_subtotals, normalize, weighted_sum

log = logging.getLogger(__name__)

DOMINANCE_THRESHOLD = 40.0  # percent
DEFAULT_DATA_CONFIDENCE = 50.0


@dataclass
class FactorImpact:
    """Effect of removing one factor from the weighted score."""
    factor: str
    label: str
    score_without: float
    impact: float
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'factor': self.label,
            'score_without': self.score_without,
            'impact': self.impact,
            'percentage': self.percentage,
        }


@dataclass
class SensitivityResult:
    """Result of a sensitivity analysis."""
    base_score: float
    factor_impacts: List[FactorImpact] = field(default_factory=list)
    dominant_factor: Optional[str] = None
    confidence_range: Tuple[float, float] = (0.0, 0.0)

    @property
    def recommendation(self) -> str:
        if self.dominant_factor:
            return f"Gather additional evidence to validate {self.dominant_factor.lower()} assessment"
        return "Well-balanced assessment across multiple factors"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'base_score': self.base_score,
            'factor_impacts': [f.to_dict() for f in self.factor_impacts],
            'dominant_factor': self.dominant_factor,
            'confidence_range': list(self.confidence_range),
            'recommendation': self.recommendation,
        }


class SensitivityAnalyzer:
    """Analyzer for factor contributions to a site's score."""

    def __init__(self):
        self.results: Dict[int, SensitivityResult] = {}  # latest result per site id

    @staticmethod
    def score_without(
        normalized: Dict[str, float],
        weights: WeightProfile,
        exclude: str
    ) -> float:
        """Weighted score with one factor removed and the rest rescaled by 1 / (1 - w)."""
        remaining = 1.0 - weights.weight(exclude)
        if remaining <= 0:
            return 0.0
        partial = sum(normalized[f] * weights.weight(f) for f in FACTORS if f != exclude)
        return partial / remaining

    @staticmethod
    def confidence_range(site: Site, base_score: float) -> Tuple[float, float]:
        """Interval around base_score, wider when data confidence or source agreement is low."""
        data_confidence = site.data_quality.confidence or DEFAULT_DATA_CONFIDENCE
        source_agreement = 50.0 if site.data_sources.source_conflicts else 100.0
        overall = (data_confidence + source_agreement) / 2

        spread = base_score * (1 - overall / 100)
        return (max(0.0, base_score - spread), min(float(SCORE_SCALE), base_score + spread))

    def analyze(self, site: Site, weights: Optional[WeightProfile] = None) -> SensitivityResult:
        """
        Run leave-one-out analysis for a site.

        Args:
            site: The site to analyze
            weights: Profile weights; defaults to the site's own profile

        Returns:
            SensitivityResult with impacts sorted by descending |percentage|
        """
        if weights is None:
            weights = get_weights(site.scoring_profile, site.custom_weights)

        normalized = normalize(compute_subtotals(site))
        base = weighted_sum(normalized, weights)

        impacts = []
        for factor in FACTORS:
            without = self.score_without(normalized, weights, factor)
            impact = base - without
            percentage = impact / base * 100 if base > 0 else 0.0
            impacts.append(FactorImpact(
                factor=factor,
                label=FACTOR_LABELS[factor],
                score_without=without,
                impact=impact,
                percentage=percentage,
            ))

        impacts.sort(key=lambda f: abs(f.percentage), reverse=True)

        dominant = None
        if impacts and abs(impacts[0].percentage) > DOMINANCE_THRESHOLD:
            dominant = impacts[0].label
            log.info(f"Site {site.id}: {dominant} dominates the score ({impacts[0].percentage:.1f}%)")

        result = SensitivityResult(
            base_score=base,
            factor_impacts=impacts,
            dominant_factor=dominant,
            confidence_range=self.confidence_range(site, base),
        )
        self.results[site.id] = result
        return result


def get_sensitivity_analyzer() -> SensitivityAnalyzer:
    """Factory function for sensitivity analyzer."""
    return SensitivityAnalyzer()
