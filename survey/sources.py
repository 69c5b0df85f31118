"""
Data source checklist rules.

A site should not be scored from LIDAR alone. At least three of the four
primary source categories must be consulted.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import List, Optional

from survey.models import (
    DataSources, SourceConflict, HistoricalMapSource, AerialPhotoSource,
)

log = logging.getLogger(__name__)

MINIMUM_PRIMARY_SOURCES = 3

PRIMARY_CATEGORIES = ("lidar", "historical_maps", "aerial_photos", "archaeological_db")


def checked_primary_categories(sources: DataSources) -> List[str]:
    """Primary categories with at least one checked entry."""
    checked = []
    if sources.lidar.checked:
        checked.append("lidar")
    for category in PRIMARY_CATEGORIES[1:]:
        if any(entry.checked for entry in getattr(sources, category)):
            checked.append(category)
    return checked


def minimum_sources_met(sources: DataSources) -> bool:
    return len(checked_primary_categories(sources)) >= MINIMUM_PRIMARY_SOURCES


def detect_conflicts(sources: DataSources) -> List[SourceConflict]:
    """
    Find disagreements between LIDAR and historical maps.

    LIDAR notes reporting a "clear feature" conflict with any checked map
    whose notes say "no feature".
    """
    conflicts = []
    if not sources.lidar.checked:
        return conflicts
    if "clear feature" not in sources.lidar.notes.lower():
        return conflicts

    for idx, hist_map in enumerate(sources.historical_maps):
        if hist_map.checked and "no feature" in hist_map.notes.lower():
            conflicts.append(SourceConflict(
                source1="LIDAR",
                source2=f"Historical Map {idx + 1}",
                conflict_type="Feature presence disagreement",
            ))
    if conflicts:
        log.info(f"Detected {len(conflicts)} source conflict(s)")
    return conflicts


def refresh(sources: DataSources) -> DataSources:
    """Recompute the derived minimum_sources_met flag."""
    return replace(sources, minimum_sources_met=minimum_sources_met(sources))


def add_historical_map(sources: DataSources, today: Optional[date] = None) -> DataSources:
    today = today or date.today()
    new_map = HistoricalMapSource(date=today.isoformat())
    return refresh(replace(sources, historical_maps=sources.historical_maps + (new_map,)))


def add_aerial_photo(sources: DataSources, today: Optional[date] = None) -> DataSources:
    today = today or date.today()
    new_photo = AerialPhotoSource(date=today.isoformat(), year=today.year)
    return refresh(replace(sources, aerial_photos=sources.aerial_photos + (new_photo,)))
