"""
Survey package for the LIDAR Archaeological Scoring System.
Contains the site model, weight profiles, scoring and bias diagnostics.
"""

from survey.errors import UnknownProfile, InvalidWeightSum
from survey.profiles import ScoringProfile, WeightProfile, get_weights, validate_weights, list_profiles
from survey.models import Site, Probability, create_site
from survey.scoring import ScoreResult, compute_score, score_site, classify
from survey.sensitivity import SensitivityAnalyzer, SensitivityResult, FactorImpact
from survey.sampling import SamplingTracker, SamplingRecord, Bucket
from survey.session import SurveySession
from survey.export import export_csv

__all__ = [
    # Errors
    "UnknownProfile",
    "InvalidWeightSum",
    # Profiles
    "ScoringProfile",
    "WeightProfile",
    "get_weights",
    "validate_weights",
    "list_profiles",
    # Sites and scoring
    "Site",
    "Probability",
    "create_site",
    "ScoreResult",
    "compute_score",
    "score_site",
    "classify",
    # Diagnostics
    "SensitivityAnalyzer",
    "SensitivityResult",
    "FactorImpact",
    "SamplingTracker",
    "SamplingRecord",
    "Bucket",
    # Session and export
    "SurveySession",
    "export_csv",
]
