"""Tests for warning banners."""

import pytest
from dataclasses import replace
from survey.alerts import AlertKind, collect_alerts, high_probability_alternatives
from survey.models import (
    create_site, DataQuality, DataSources, SourceInfo, HistoricalMapSource,
    AerialPhotoSource, AlternativeType, Likelihood,
)
from survey.profiles import WeightProfile
from survey.sampling import SamplingRecord
from survey.sensitivity import SensitivityAnalyzer


def kinds(alerts):
    return {a.kind for a in alerts}


@pytest.fixture
def documented_site():
    return replace(create_site(1), data_sources=DataSources(
        lidar=SourceInfo(checked=True),
        historical_maps=(HistoricalMapSource(checked=True),),
        aerial_photos=(AerialPhotoSource(checked=True),),
        minimum_sources_met=True,
    ))


class TestCollectAlerts:
    """Tests for alert collection."""

    def test_nothing_to_report(self, documented_site):
        assert collect_alerts(site=documented_site) == []

    def test_insufficient_sources(self):
        alerts = collect_alerts(site=create_site(1))
        assert kinds(alerts) == {AlertKind.INSUFFICIENT_SOURCES}

    def test_bias_warning(self):
        alerts = collect_alerts(sampling=SamplingRecord(high=20, total=20))
        assert kinds(alerts) == {AlertKind.BIAS}
        assert alerts[0].severity == "error"

    def test_no_bias_warning_when_compliant(self):
        assert collect_alerts(sampling=SamplingRecord(high=10, medium=2, low=1, empty=1, total=14)) == []

    def test_dominant_factor(self, documented_site):
        site = replace(documented_site, data_quality=DataQuality(point_density=2, hillshade=True, lrm=True))
        result = SensitivityAnalyzer().analyze(site)
        alerts = collect_alerts(sensitivity=result)
        assert kinds(alerts) == {AlertKind.DOMINANT_FACTOR}
        assert "Data Quality" in alerts[0].message

    def test_invalid_custom_weights(self, documented_site):
        site = replace(
            documented_site,
            scoring_profile="custom",
            custom_weights=WeightProfile(0.5, 0.5, 0.5, 0, 0, 0),
        )
        alerts = collect_alerts(site=site)
        assert kinds(alerts) == {AlertKind.INVALID_WEIGHTS}
        assert alerts[0].title == "Total Weight: 150%"

    def test_high_probability_alternative(self, documented_site):
        alts = tuple(
            replace(a, checked=True, probability=Likelihood.HIGH)
            if a.type == AlternativeType.NATURAL_FORMATION else a
            for a in documented_site.alternative_explanations
        )
        site = replace(documented_site, alternative_explanations=alts)
        assert high_probability_alternatives(site) == ["Natural Formation"]
        assert kinds(collect_alerts(site=site)) == {AlertKind.HIGH_PROBABILITY_ALTERNATIVE}

    def test_unchecked_high_alternative_ignored(self, documented_site):
        alts = tuple(replace(a, probability=Likelihood.HIGH) for a in documented_site.alternative_explanations)
        site = replace(documented_site, alternative_explanations=alts)
        assert high_probability_alternatives(site) == []
