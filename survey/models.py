"""
Core data models for the LIDAR archaeological scoring system.

Records are frozen dataclasses. Edits produce new records through
dataclasses.replace(); see survey.session for the update entry points.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from enum import Enum

from survey.profiles import WeightProfile

log = logging.getLogger(__name__)

# Morphology size bonus applies at or above this many metres.
LARGE_FEATURE_METRES = 150.0


# ═══════════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════════
class Probability(Enum):
    """Probability bucket derived from the composite score."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class LandCover(Enum):
    AGRICULTURAL = "agricultural"
    FOREST = "forest"
    URBAN = "urban"
    GRASSLAND = "grassland"
    WETLAND = "wetland"


class SourceQuality(Enum):
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


class Likelihood(Enum):
    """Rating given to an alternative explanation."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlternativeType(Enum):
    """Non-archaeological hypotheses a surveyor should rule out."""
    MODERN_MILITARY = "modern_military"
    AGRICULTURAL_EARTHWORK = "agricultural_earthwork"
    DRAINAGE_SYSTEM = "drainage_system"
    NATURAL_FORMATION = "natural_formation"
    INDUSTRIAL_INFRASTRUCTURE = "industrial_infrastructure"
    LIVESTOCK_ENCLOSURE = "livestock_enclosure"
    QUARRYING = "quarrying"
    OTHER = "other"


class MLClass(Enum):
    """User-assigned training-data class."""
    A = "A"  # Clear, verified, single-period
    B = "B"  # Clear features with some ambiguity
    C = "C"  # Unclear, multi-period, or poorly verified


class ShapeType(Enum):
    CIRCULAR = "circular"
    RECTANGULAR = "rectangular"
    IRREGULAR = "irregular"
    LINEAR = "linear"
    COMPLEX = "complex"


class SlopePosition(Enum):
    VALLEY = "valley"
    LOWER = "lower"
    MIDDLE = "middle"
    UPPER = "upper"
    RIDGE = "ridge"


class WaterSourceType(Enum):
    RIVER = "river"
    SPRING = "spring"
    LAKE = "lake"
    WETLAND = "wetland"


class LandUseType(Enum):
    DRAINAGE = "drainage"
    INFRASTRUCTURE = "infrastructure"
    AGRICULTURAL = "agricultural"
    INDUSTRIAL = "industrial"


ALTERNATIVE_LABELS = {
    AlternativeType.MODERN_MILITARY: ("Modern Military Activity", "Training grounds, bunkers, trenches, impact craters"),
    AlternativeType.AGRICULTURAL_EARTHWORK: ("Agricultural Earthworks", "Field boundaries, terraces, drainage ditches, livestock enclosures"),
    AlternativeType.DRAINAGE_SYSTEM: ("Drainage Systems", "Land improvement channels, water management features"),
    AlternativeType.NATURAL_FORMATION: ("Natural Formation", "Geological features, erosion patterns, natural depressions"),
    AlternativeType.INDUSTRIAL_INFRASTRUCTURE: ("Industrial Infrastructure", "Mining, quarrying, railways, industrial buildings"),
    AlternativeType.LIVESTOCK_ENCLOSURE: ("Livestock Features", "Animal pens, feeding areas, watering places"),
    AlternativeType.QUARRYING: ("Extraction Sites", "Stone quarries, gravel pits, clay extraction"),
    AlternativeType.OTHER: ("Other Explanation", "Any other non-archaeological interpretation"),
}


# ═══════════════════════════════════════════════════════════════════════════
# FACTOR GROUPS
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class DataQuality:
    """Point density and visualization products (sub-total 0-3)."""
    point_density: int = 0  # 0 = <1pt/m², 1 = 1-4pt/m², 2 = >4pt/m²
    hillshade: bool = False
    lrm: bool = False
    svf: bool = False
    slope: bool = False
    multispectral: bool = False
    seasonal_variation: bool = False
    confidence: float = 50.0  # 0-100%
    sub_total: float = 0.0

    @property
    def visualization_count(self) -> int:
        """How many of the four scored visualization techniques show the feature."""
        return sum([self.hillshade, self.lrm, self.svf, self.slope])


@dataclass(frozen=True)
class MorphologicalShape:
    type: ShapeType = ShapeType.IRREGULAR
    description: str = ""
    certainty: float = 50.0  # 0-100%


@dataclass(frozen=True)
class Morphology:
    """Period-neutral morphology (sub-total 0-3)."""
    shape: MorphologicalShape = field(default_factory=MorphologicalShape)
    regularity: float = 0.0  # 0-1
    complexity: float = 0.0  # 0-1
    size: float = 0.0  # metres
    orientation: float = 0.0  # degrees
    internal_features: Tuple[str, ...] = ()
    sub_total: float = 0.0

    @property
    def is_large(self) -> bool:
        return self.size >= LARGE_FEATURE_METRES


@dataclass(frozen=True)
class LandscapeContext:
    """Elevation relative to a 1 km radius (sub-total 0-2)."""
    elevation_percentile: int = 0  # bucket: 0 lowest 25%, 1 middle 50%, 2 highest 25%
    topographic_position: float = 0.0  # TPI
    viewshed_area: float = 0.0  # km²
    slope_position: SlopePosition = SlopePosition.MIDDLE
    natural_shelter: bool = False
    defensibility: float = 0.0  # 0-10
    sub_total: float = 0.0


@dataclass(frozen=True)
class HistoricalWaterSource:
    period: str = ""
    type: WaterSourceType = WaterSourceType.RIVER
    distance: float = 0.0  # metres
    certainty: float = 50.0


@dataclass(frozen=True)
class WaterAccess:
    """Modern and historical water (sub-total 0-2)."""
    modern_water: int = 0  # 1 if within 500m
    historical_water: Tuple[HistoricalWaterSource, ...] = ()
    paleochannels: bool = False
    wetland_history: bool = False
    seasonal_availability: str = ""
    sub_total: float = 0.0


@dataclass(frozen=True)
class CropMarks:
    present: bool = False
    season: str = ""
    type: str = ""
    confidence: float = 0.0


@dataclass(frozen=True)
class VegetationAnalysis:
    """Vegetation anomalies, capped by land cover (sub-total 0-2)."""
    land_cover: LandCover = LandCover.AGRICULTURAL
    anomaly_score: int = 0  # 0-2
    crop_marks: CropMarks = field(default_factory=CropMarks)
    soil_moisture: float = 0.0  # 0-100%
    land_use_history: Tuple[str, ...] = ()
    multispectral_anomaly: bool = False
    sub_total: float = 0.0


@dataclass(frozen=True)
class ArchaeologicalContext:
    """Known sites within 2km (sub-total 0-1)."""
    sites_nearby: int = 0
    site_types: Tuple[str, ...] = ()
    chronology: Tuple[str, ...] = ()
    research_history: str = ""
    threats: Tuple[str, ...] = ()
    sub_total: float = 0.0


# ═══════════════════════════════════════════════════════════════════════════
# DATA SOURCES
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class SourceInfo:
    checked: bool = False
    date: str = ""
    quality: SourceQuality = SourceQuality.FAIR
    notes: str = ""


@dataclass(frozen=True)
class HistoricalMapSource(SourceInfo):
    period: str = ""
    scale: str = ""
    georeferenced: bool = False


@dataclass(frozen=True)
class AerialPhotoSource(SourceInfo):
    year: int = 0
    season: str = ""
    resolution: str = ""


@dataclass(frozen=True)
class SatelliteSource(SourceInfo):
    sensor: str = ""
    bands: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ArchDBSource(SourceInfo):
    database: str = ""
    records_found: int = 0


@dataclass(frozen=True)
class MilitarySource(SourceInfo):
    period: str = ""
    type: str = ""


@dataclass(frozen=True)
class LandUseSource(SourceInfo):
    type: LandUseType = LandUseType.DRAINAGE


@dataclass(frozen=True)
class BibliographicSource(SourceInfo):
    reference: str = ""
    relevant_pages: str = ""


@dataclass(frozen=True)
class SourceConflict:
    source1: str
    source2: str
    conflict_type: str
    resolution: str = ""


@dataclass(frozen=True)
class DataSources:
    """Independent evidence consulted for a site."""
    lidar: SourceInfo = field(default_factory=SourceInfo)
    historical_maps: Tuple[HistoricalMapSource, ...] = ()
    aerial_photos: Tuple[AerialPhotoSource, ...] = ()
    satellite_imagery: Tuple[SatelliteSource, ...] = ()
    archaeological_db: Tuple[ArchDBSource, ...] = ()
    military_records: Tuple[MilitarySource, ...] = ()
    land_records: Tuple[LandUseSource, ...] = ()
    bibliography: Tuple[BibliographicSource, ...] = ()
    source_conflicts: Tuple[SourceConflict, ...] = ()
    minimum_sources_met: bool = False


@dataclass(frozen=True)
class AlternativeExplanation:
    type: AlternativeType
    probability: Likelihood = Likelihood.LOW
    evidence: str = ""
    checked: bool = False

    @property
    def label(self) -> str:
        return ALTERNATIVE_LABELS[self.type][0]


# ═══════════════════════════════════════════════════════════════════════════
# SITE
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class Site:
    """
    One archaeological candidate under evaluation.

    total_score and probability are derived by survey.scoring and are never
    set directly by the UI.
    """
    id: int
    coordinates: str = ""
    scoring_profile: str = "prehistoric"
    custom_weights: Optional[WeightProfile] = None

    data_quality: DataQuality = field(default_factory=DataQuality)
    data_sources: DataSources = field(default_factory=DataSources)
    morphology: Morphology = field(default_factory=Morphology)
    context: LandscapeContext = field(default_factory=LandscapeContext)
    water: WaterAccess = field(default_factory=WaterAccess)
    vegetation: VegetationAnalysis = field(default_factory=VegetationAnalysis)
    archaeology: ArchaeologicalContext = field(default_factory=ArchaeologicalContext)

    total_score: float = 0.0
    probability: Probability = Probability.LOW
    confidence_level: int = 3  # 1-5
    ml_classification: MLClass = MLClass.C

    alternative_explanations: Tuple[AlternativeExplanation, ...] = ()
    suspected_period: str = ""
    notes: str = ""
    decision_rationale: str = ""
    next_steps: str = ""

    def alternative(self, alt_type: AlternativeType) -> Optional[AlternativeExplanation]:
        for alt in self.alternative_explanations:
            if alt.type == alt_type:
                return alt
        return None


def create_site(site_id: int, profile: str = "prehistoric") -> Site:
    """Create a site with every factor group zeroed."""
    return Site(
        id=site_id,
        scoring_profile=profile,
        alternative_explanations=tuple(AlternativeExplanation(type=t) for t in AlternativeType),
    )


def elevation_bucket(percentile: float) -> int:
    """Map a 0-100 elevation percentile within 1km to the 0/1/2 bucket."""
    if percentile < 25:
        return 0
    if percentile > 75:
        return 2
    return 1


# ═══════════════════════════════════════════════════════════════════════════
# INPUT BOUNDARY
# ═══════════════════════════════════════════════════════════════════════════
# field name -> (min, max); None means unbounded
FIELD_RANGES = {
    "point_density": (0, 2),
    "confidence": (0, 100),
    "certainty": (0, 100),
    "regularity": (0, 1),
    "complexity": (0, 1),
    "size": (0, None),
    "elevation_percentile": (0, 2),
    "viewshed_area": (0, None),
    "defensibility": (0, 10),
    "modern_water": (0, 1),
    "distance": (0, None),
    "anomaly_score": (0, 2),
    "soil_moisture": (0, 100),
    "sites_nearby": (0, None),
    "records_found": (0, None),
    "confidence_level": (1, 5),
}

INT_FIELDS = {
    "point_density", "elevation_percentile", "modern_water", "anomaly_score",
    "sites_nearby", "records_found", "confidence_level", "year",
}

ENUM_FIELDS = {
    "land_cover": LandCover,
    "quality": SourceQuality,
    "slope_position": SlopePosition,
    "ml_classification": MLClass,
}


def clamp(value: float, low: Optional[float], high: Optional[float]) -> float:
    """Clamp value into [low, high]; None leaves that side open."""
    if low is not None and value < low:
        return low
    if high is not None and value > high:
        return high
    return value


def _finite(name: str, value: Any) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")
    return value


def sanitize(changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Clamp and coerce a partial update at the input boundary.

    Numeric fields are clamped to their documented ranges, integer fields
    truncated, enum fields converted from their string values, orientation
    wrapped to [0, 360), lists frozen to tuples.

    Raises:
        ValueError: on unknown enum values or NaN/infinite numbers
    """
    clean = {}
    for name, value in changes.items():
        if name in ENUM_FIELDS and not isinstance(value, Enum):
            value = ENUM_FIELDS[name](value)
        elif name == "orientation":
            value = _finite(name, value) % 360.0
        elif name in FIELD_RANGES or name in INT_FIELDS:
            if value is None or value == "":
                value = 0
            value = _finite(name, value)
            low, high = FIELD_RANGES.get(name, (None, None))
            value = clamp(value, low, high)
            if name in INT_FIELDS:
                value = int(value)
        elif isinstance(value, list):
            value = tuple(value)
        clean[name] = value
    if clean != changes:
        log.debug(f"Sanitized input {changes} -> {clean}")
    return clean
