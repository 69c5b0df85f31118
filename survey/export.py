"""
CSV export of scored sites.

One row per site in a fixed column order. Quoting follows standard CSV
rules, so values containing commas are wrapped in double quotes.
"""

import io
import logging
from datetime import date
from typing import Iterable, List, Optional

import pandas as pd

from survey.models import Site

log = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "ID",
    "Coordinates",
    "Profile",
    "TotalScore",
    "Probability",
    "DataQualitySubtotal",
    "MorphologySubtotal",
    "ContextSubtotal",
    "WaterSubtotal",
    "VegetationSubtotal",
    "ArchaeologySitesNearby",
    "MLClass",
    "ConfidenceLevel",
    "Notes",
]


def site_row(site: Site) -> List:
    return [
        site.id,
        site.coordinates,
        site.scoring_profile,
        f"{site.total_score:.2f}",
        site.probability.value,
        site.data_quality.sub_total,
        site.morphology.sub_total,
        site.context.sub_total,
        site.water.sub_total,
        site.vegetation.sub_total,
        site.archaeology.sites_nearby,
        site.ml_classification.value,
        site.confidence_level,
        site.notes,
    ]


def sites_dataframe(sites: Iterable[Site]) -> pd.DataFrame:
    """Tabular view of sites, also used by the UI table."""
    return pd.DataFrame([site_row(s) for s in sites], columns=EXPORT_COLUMNS)


def export_csv(sites: Iterable[Site]) -> str:
    """Serialize sites to CSV text with a header row."""
    df = sites_dataframe(sites)
    buffer = io.StringIO()
    df.to_csv(buffer, index=False, lineterminator="\n")
    log.info(f"Exported {len(df)} site(s) to CSV")
    return buffer.getvalue()


def read_csv(text: str) -> pd.DataFrame:
    """Parse an export back into a DataFrame."""
    return pd.read_csv(io.StringIO(text), keep_default_na=False)


def export_filename(prefix: str = "lidar_scoring_enhanced", on: Optional[date] = None) -> str:
    on = on or date.today()
    return f"{prefix}_{on.isoformat()}.csv"
