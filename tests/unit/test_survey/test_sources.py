import pytest
from datetime import date
from survey.models import (
    DataSources, SourceInfo, HistoricalMapSource, AerialPhotoSource, ArchDBSource,
    SatelliteSource, SourceQuality,
)
from survey.sources import (
    minimum_sources_met, checked_primary_categories, detect_conflicts, refresh,
    add_historical_map, add_aerial_photo,
)


@pytest.fixture
def three_sources():
    return DataSources(
        lidar=SourceInfo(checked=True),
        historical_maps=(HistoricalMapSource(checked=True),),
        aerial_photos=(AerialPhotoSource(checked=True),),
    )


def test_no_sources():
    assert not minimum_sources_met(DataSources())


def test_two_categories_not_enough():
    sources = DataSources(
        lidar=SourceInfo(checked=True),
        historical_maps=(HistoricalMapSource(checked=True), HistoricalMapSource(checked=True)),
    )
    assert not minimum_sources_met(sources)


def test_three_categories_met(three_sources):
    assert minimum_sources_met(three_sources)
    assert checked_primary_categories(three_sources) == ["lidar", "historical_maps", "aerial_photos"]


def test_unchecked_entries_do_not_count():
    sources = DataSources(
        lidar=SourceInfo(checked=True),
        historical_maps=(HistoricalMapSource(checked=False),),
        aerial_photos=(AerialPhotoSource(checked=True),),
        archaeological_db=(ArchDBSource(checked=False),),
    )
    assert not minimum_sources_met(sources)


def test_secondary_sources_do_not_count():
    sources = DataSources(
        lidar=SourceInfo(checked=True),
        aerial_photos=(AerialPhotoSource(checked=True),),
        satellite_imagery=(SatelliteSource(checked=True),),
    )
    assert not minimum_sources_met(sources)


def test_refresh_sets_flag(three_sources):
    assert three_sources.minimum_sources_met is False
    assert refresh(three_sources).minimum_sources_met is True


def test_detect_conflict():
    sources = DataSources(
        lidar=SourceInfo(checked=True, notes="Clear feature visible in hillshade"),
        historical_maps=(
            HistoricalMapSource(checked=True, notes="Field shown"),
            HistoricalMapSource(checked=True, notes="No feature marked"),
        ),
    )
    conflicts = detect_conflicts(sources)
    assert len(conflicts) == 1
    assert conflicts[0].source1 == "LIDAR"
    assert conflicts[0].source2 == "Historical Map 2"
    assert conflicts[0].conflict_type == "Feature presence disagreement"


def test_no_conflict_without_clear_lidar_feature():
    sources = DataSources(
        lidar=SourceInfo(checked=True, notes="faint"),
        historical_maps=(HistoricalMapSource(checked=True, notes="no feature"),),
    )
    assert detect_conflicts(sources) == []


def test_no_conflict_with_unchecked_map():
    sources = DataSources(
        lidar=SourceInfo(checked=True, notes="clear feature"),
        historical_maps=(HistoricalMapSource(checked=False, notes="no feature"),),
    )
    assert detect_conflicts(sources) == []


def test_add_historical_map():
    sources = add_historical_map(DataSources(), today=date(2024, 5, 1))
    assert len(sources.historical_maps) == 1
    entry = sources.historical_maps[0]
    assert entry.date == "2024-05-01"
    assert entry.quality == SourceQuality.FAIR
    assert not entry.checked


def test_add_aerial_photo_uses_current_year():
    sources = add_aerial_photo(DataSources(), today=date(2023, 8, 15))
    assert sources.aerial_photos[0].year == 2023
