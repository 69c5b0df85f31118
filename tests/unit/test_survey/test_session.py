"""Tests for the survey session update functions."""

import pytest
from survey.session import SurveySession
from survey.errors import UnknownProfile
from survey.models import (
    AlternativeType, Likelihood, LandCover, MLClass, Probability,
    SourceInfo, HistoricalMapSource, AerialPhotoSource, HistoricalWaterSource,
)
from survey.profiles import WeightProfile


@pytest.fixture
def session():
    return SurveySession()


class TestSites:
    """Tests for adding and looking up sites."""

    def test_ids_are_sequential(self, session):
        assert session.add_site().id == 1
        assert session.add_site().id == 2
        assert [s.id for s in session.list_sites()] == [1, 2]

    def test_default_profile(self, session):
        session.set_default_profile("medieval")
        assert session.add_site().scoring_profile == "medieval"

    def test_explicit_profile(self, session):
        assert session.add_site("industrial").scoring_profile == "industrial"

    def test_unknown_profile(self, session):
        with pytest.raises(UnknownProfile):
            session.add_site("viking")
        with pytest.raises(UnknownProfile):
            SurveySession("viking")

    def test_unknown_site(self, session):
        with pytest.raises(KeyError):
            session.get_site(99)


class TestUpdates:
    """Tests for edits and automatic rescoring."""

    def test_update_rescores(self, session):
        site = session.add_site("prehistoric")
        updated = session.update_water(site.id, modern_water=1)
        assert updated.water.sub_total == 1
        assert updated.total_score == pytest.approx(2.275)
        assert session.get_site(site.id) is updated

    def test_update_clamps_input(self, session):
        site = session.add_site()
        updated = session.update_data_quality(site.id, point_density=9, hillshade=True, svf=True)
        assert updated.data_quality.point_density == 2
        assert updated.data_quality.sub_total == 3

    def test_full_site_is_high(self, session):
        site = session.add_site("roman_military")
        session.update_data_quality(site.id, point_density=2, lrm=True, slope=True)
        session.update_morphology(site.id, regularity=1, complexity=1, size=300)
        session.update_context(site.id, elevation_percentile=2)
        session.update_water(site.id, modern_water=1, historical_water=[HistoricalWaterSource()])
        session.update_vegetation(site.id, land_cover="grassland", anomaly_score=2)
        updated = session.update_archaeology(site.id, sites_nearby=4)
        assert updated.total_score == pytest.approx(13.0)
        assert updated.probability == Probability.HIGH
        assert updated.vegetation.land_cover == LandCover.GRASSLAND

    def test_morphology_shape(self, session):
        site = session.add_site()
        updated = session.update_morphology(site.id, shape={"type": "circular"}, regularity=0.5)
        assert updated.morphology.shape.type.value == "circular"
        assert updated.morphology.regularity == 0.5

    def test_non_finite_input_leaves_site_unchanged(self, session):
        site = session.add_site()
        with pytest.raises(ValueError):
            session.update_morphology(site.id, regularity=float("nan"))
        with pytest.raises(ValueError):
            session.update_data_quality(site.id, confidence=float("nan"))
        stored = session.get_site(site.id)
        assert stored.morphology.regularity == 0.0
        assert stored.morphology.sub_total == 0.0
        assert stored.data_quality.confidence == 50.0

    def test_bad_shape_leaves_site_unchanged(self, session):
        site = session.add_site()
        with pytest.raises(ValueError):
            session.update_morphology(site.id, regularity=1.0, shape={"type": "hexagonal"})
        stored = session.get_site(site.id)
        assert stored.morphology.regularity == 0.0
        assert stored.morphology.sub_total == 0.0
        assert stored is site

    def test_alternative_type_is_fixed(self, session):
        site = session.add_site()
        with pytest.raises(TypeError):
            session.update_alternative(site.id, "other", type="foo")
        with pytest.raises(TypeError):
            session.update_alternative(site.id, "other", colour="red")
        assert session.get_site(site.id).alternative(AlternativeType.OTHER).type == AlternativeType.OTHER

    def test_derived_fields_rejected(self, session):
        site = session.add_site()
        with pytest.raises(TypeError):
            session.update_data_quality(site.id, sub_total=3)
        with pytest.raises(TypeError):
            session.update_details(site.id, total_score=13)

    def test_unknown_detail_field(self, session):
        site = session.add_site()
        with pytest.raises(TypeError):
            session.update_details(site.id, colour="red")

    def test_update_details(self, session):
        site = session.add_site()
        updated = session.update_details(
            site.id, coordinates="51.5, -0.12", ml_classification="A", confidence_level=7,
        )
        assert updated.coordinates == "51.5, -0.12"
        assert updated.ml_classification == MLClass.A
        assert updated.confidence_level == 5

    def test_profile_change_rescores(self, session):
        site = session.add_site("prehistoric")
        session.update_water(site.id, modern_water=1)
        updated = session.update_details(site.id, scoring_profile="modern_military")
        # 1/2 * 0.05 * 13
        assert updated.total_score == pytest.approx(0.325)

    def test_custom_weights(self, session):
        site = session.add_site("custom")
        session.update_archaeology(site.id, sites_nearby=1)
        updated = session.update_details(
            site.id, custom_weights={"archaeology": 1.0},
        )
        assert isinstance(updated.custom_weights, WeightProfile)
        assert updated.total_score == pytest.approx(13.0)
        assert session.weights_for(site.id).archaeology == 1.0

    def test_update_sources_sets_minimum(self, session):
        site = session.add_site()
        updated = session.update_sources(
            site.id,
            lidar=SourceInfo(checked=True),
            historical_maps=[HistoricalMapSource(checked=True)],
        )
        assert not updated.data_sources.minimum_sources_met
        updated = session.update_sources(site.id, aerial_photos=[AerialPhotoSource(checked=True)])
        assert updated.data_sources.minimum_sources_met
        assert isinstance(updated.data_sources.aerial_photos, tuple)

    def test_minimum_sources_is_derived(self, session):
        site = session.add_site()
        with pytest.raises(TypeError):
            session.update_sources(site.id, minimum_sources_met=True)

    def test_detect_conflicts(self, session):
        site = session.add_site()
        session.update_sources(
            site.id,
            lidar=SourceInfo(checked=True, notes="clear feature"),
            historical_maps=[HistoricalMapSource(checked=True, notes="no feature")],
        )
        updated = session.detect_conflicts(site.id)
        assert len(updated.data_sources.source_conflicts) == 1

    def test_update_alternative(self, session):
        site = session.add_site()
        updated = session.update_alternative(
            site.id, "drainage_system", checked=True, probability="high", evidence="Parallel channels",
        )
        alt = updated.alternative(AlternativeType.DRAINAGE_SYSTEM)
        assert alt.checked
        assert alt.probability == Likelihood.HIGH
        assert alt.evidence == "Parallel channels"
        assert not updated.alternative(AlternativeType.OTHER).checked


class TestAnalysis:
    """Tests for session-level diagnostics."""

    def test_analyze(self, session):
        site = session.add_site()
        session.update_data_quality(site.id, point_density=2, hillshade=True, lrm=True)
        result = session.analyze(site.id)
        assert result.dominant_factor == "Data Quality"
        assert session.analyzer.results == {site.id: result}

    def test_repeated_analysis_keeps_latest_only(self, session):
        first = session.add_site()
        second = session.add_site()
        for _ in range(50):
            session.analyze(first.id)
        latest = session.analyze(second.id)
        assert len(session.analyzer.results) == 2
        assert session.analyzer.results[second.id] is latest

    def test_record_site(self, session):
        site = session.add_site()
        record = session.record_site(site.id)
        assert record.low == 1
        assert session.record_observation("empty").empty == 1
