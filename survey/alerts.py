"""
Warning banners.

Nothing in the scoring engine is fatal to a session; problems surface as
alerts the UI renders above the results.
"""

from dataclasses import dataclass
from typing import List, Optional
from enum import Enum

from survey.models import Site, Likelihood
from survey.profiles import WeightProfile, ScoringProfile, get_weights, validate_weights
from survey.sampling import SamplingRecord
from survey.sensitivity import SensitivityResult


class AlertKind(Enum):
    BIAS = "bias"
    INSUFFICIENT_SOURCES = "insufficient_sources"
    DOMINANT_FACTOR = "dominant_factor"
    INVALID_WEIGHTS = "invalid_weights"
    HIGH_PROBABILITY_ALTERNATIVE = "high_probability_alternative"


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    severity: str  # "warning" or "error"
    title: str
    message: str


def high_probability_alternatives(site: Site) -> List[str]:
    """Labels of checked alternative explanations rated high."""
    return [
        alt.label for alt in site.alternative_explanations
        if alt.checked and alt.probability == Likelihood.HIGH
    ]


def collect_alerts(
    site: Optional[Site] = None,
    sensitivity: Optional[SensitivityResult] = None,
    sampling: Optional[SamplingRecord] = None,
    weights: Optional[WeightProfile] = None,
) -> List[Alert]:
    """Gather every warning that applies to the current view."""
    alerts = []

    if sampling is not None and sampling.bias_warning:
        alerts.append(Alert(
            kind=AlertKind.BIAS,
            severity="error",
            title="Bias Warning!",
            message="You're focusing too much on high-scoring sites. "
                    "Sample more medium, low, and empty areas.",
        ))

    if site is not None:
        if not site.data_sources.minimum_sources_met:
            alerts.append(Alert(
                kind=AlertKind.INSUFFICIENT_SOURCES,
                severity="warning",
                title="Minimum data sources not met",
                message="At least 3 different source types must be checked before scoring.",
            ))

        if site.scoring_profile == ScoringProfile.CUSTOM.value:
            invalid = validate_weights(weights or get_weights(site.scoring_profile, site.custom_weights))
            if invalid is not None:
                alerts.append(Alert(
                    kind=AlertKind.INVALID_WEIGHTS,
                    severity="error",
                    title=f"Total Weight: {round(invalid.total * 100)}%",
                    message="Custom weights must equal 100%. Scoring uses the weights as entered.",
                ))

        high_alts = high_probability_alternatives(site)
        if high_alts:
            alerts.append(Alert(
                kind=AlertKind.HIGH_PROBABILITY_ALTERNATIVE,
                severity="warning",
                title="High Probability Alternative Detected",
                message=f"{', '.join(high_alts)} rated high. "
                        "Consider additional investigation before classification.",
            ))

    if sensitivity is not None and sensitivity.dominant_factor:
        alerts.append(Alert(
            kind=AlertKind.DOMINANT_FACTOR,
            severity="warning",
            title="Single Factor Dominance Detected",
            message=f"{sensitivity.dominant_factor} accounts for over 40% of the score. "
                    "Consider additional evidence to validate this assessment.",
        ))

    return alerts
