"""
Survey Session

Owns the sites being evaluated in one browser session. Every edit goes
through an update function that clamps the input, rebuilds the Site and
re-runs the Score Calculator before handing the new Site back.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Union

from survey.models import (
    Site, AlternativeType, Likelihood, ShapeType, create_site, sanitize,
)
from survey.profiles import WeightProfile, ScoringProfile, resolve_profile, get_weights
from survey.sampling import SamplingTracker, SamplingRecord, bucket_for
from survey.scoring import score_site
from survey.sensitivity import SensitivityAnalyzer, SensitivityResult
from survey import sources

log = logging.getLogger(__name__)

DERIVED_FIELDS = {"id", "sub_total", "total_score", "probability", "minimum_sources_met"}

DETAIL_FIELDS = {
    "coordinates", "scoring_profile", "custom_weights", "confidence_level",
    "ml_classification", "suspected_period", "notes", "decision_rationale", "next_steps",
}

ALTERNATIVE_FIELDS = {"probability", "evidence", "checked"}


class SurveySession:
    """
    Sites and sampling state for a single user session.

    Site ids are assigned sequentially from 1 and never reused.
    """

    def __init__(self, default_profile: Union[str, ScoringProfile] = "prehistoric"):
        self.default_profile = resolve_profile(default_profile).value
        self.sites: Dict[int, Site] = {}
        self.sampling = SamplingTracker()
        self.analyzer = SensitivityAnalyzer()
        self._next_id = 1

    # ─── sites ────────────────────────────────────────────────────────────
    def add_site(self, profile: Optional[Union[str, ScoringProfile]] = None) -> Site:
        """Create a zeroed site with the next id."""
        profile = resolve_profile(profile or self.default_profile).value
        site = score_site(create_site(self._next_id, profile))
        self.sites[site.id] = site
        self._next_id += 1
        log.info(f"Added site {site.id} ({profile})")
        return site

    def get_site(self, site_id: int) -> Site:
        """Raises KeyError for unknown ids."""
        if site_id not in self.sites:
            raise KeyError(f"Site {site_id} not found")
        return self.sites[site_id]

    def list_sites(self) -> List[Site]:
        return [self.sites[k] for k in sorted(self.sites)]

    def set_default_profile(self, profile: Union[str, ScoringProfile]):
        """Profile used for sites added from now on."""
        self.default_profile = resolve_profile(profile).value

    def _store(self, site: Site) -> Site:
        scored = score_site(site)
        self.sites[scored.id] = scored
        return scored

    @staticmethod
    def _reject_derived(changes: Dict):
        derived = DERIVED_FIELDS.intersection(changes)
        if derived:
            raise TypeError(f"Derived fields cannot be set directly: {sorted(derived)}")

    def _update_group(self, site_id: int, group: str, changes: Dict) -> Site:
        self._reject_derived(changes)
        site = self.get_site(site_id)
        updated_group = replace(getattr(site, group), **sanitize(changes))
        return self._store(replace(site, **{group: updated_group}))

    # ─── factor groups ────────────────────────────────────────────────────
    def update_data_quality(self, site_id: int, **changes) -> Site:
        return self._update_group(site_id, "data_quality", changes)

    def update_morphology(self, site_id: int, **changes) -> Site:
        """Shape may be a MorphologicalShape or a dict of its fields."""
        self._reject_derived(changes)
        site = self.get_site(site_id)
        changes = sanitize(changes)
        if isinstance(changes.get("shape"), dict):
            shape_changes = sanitize(changes["shape"])
            if "type" in shape_changes:
                shape_changes["type"] = ShapeType(shape_changes["type"])
            changes["shape"] = replace(site.morphology.shape, **shape_changes)
        return self._store(replace(site, morphology=replace(site.morphology, **changes)))

    def update_context(self, site_id: int, **changes) -> Site:
        return self._update_group(site_id, "context", changes)

    def update_water(self, site_id: int, **changes) -> Site:
        return self._update_group(site_id, "water", changes)

    def update_vegetation(self, site_id: int, **changes) -> Site:
        return self._update_group(site_id, "vegetation", changes)

    def update_archaeology(self, site_id: int, **changes) -> Site:
        return self._update_group(site_id, "archaeology", changes)

    # ─── documentation ────────────────────────────────────────────────────
    def update_sources(self, site_id: int, **changes) -> Site:
        """Replace source categories; minimum_sources_met is recomputed."""
        self._reject_derived(changes)
        site = self.get_site(site_id)
        updated = sources.refresh(replace(site.data_sources, **sanitize(changes)))
        return self._store(replace(site, data_sources=updated))

    def detect_conflicts(self, site_id: int) -> Site:
        """Run conflict detection and store the result on the site."""
        site = self.get_site(site_id)
        conflicts = tuple(sources.detect_conflicts(site.data_sources))
        return self.update_sources(site_id, source_conflicts=conflicts)

    def update_alternative(
        self,
        site_id: int,
        alt_type: Union[str, AlternativeType],
        **changes
    ) -> Site:
        """Edit one alternative explanation; its type is fixed."""
        unknown = set(changes) - ALTERNATIVE_FIELDS
        if unknown:
            raise TypeError(f"Cannot set alternative fields: {sorted(unknown)}")
        alt_type = AlternativeType(alt_type)
        if "probability" in changes:
            changes["probability"] = Likelihood(changes["probability"])
        site = self.get_site(site_id)
        alternatives = tuple(
            replace(alt, **changes) if alt.type == alt_type else alt
            for alt in site.alternative_explanations
        )
        return self._store(replace(site, alternative_explanations=alternatives))

    def update_details(self, site_id: int, **changes) -> Site:
        """Coordinates, profile, labels and free-text notes."""
        self._reject_derived(changes)
        unknown = set(changes) - DETAIL_FIELDS
        if unknown:
            raise TypeError(f"Unknown site fields: {sorted(unknown)}")

        if "scoring_profile" in changes:
            changes["scoring_profile"] = resolve_profile(changes["scoring_profile"]).value
        if isinstance(changes.get("custom_weights"), dict):
            changes["custom_weights"] = WeightProfile.from_dict(changes["custom_weights"])

        site = self.get_site(site_id)
        return self._store(replace(site, **sanitize(changes)))

    # ─── analysis ─────────────────────────────────────────────────────────
    def weights_for(self, site_id: int) -> WeightProfile:
        site = self.get_site(site_id)
        return get_weights(site.scoring_profile, site.custom_weights)

    def analyze(self, site_id: int) -> SensitivityResult:
        site = self.get_site(site_id)
        return self.analyzer.analyze(site, self.weights_for(site_id))

    def record_observation(self, bucket) -> SamplingRecord:
        return self.sampling.record_observation(bucket)

    def record_site(self, site_id: int) -> SamplingRecord:
        """Count a scored site in the sampling tracker by its probability bucket."""
        return self.sampling.record_observation(bucket_for(self.get_site(site_id).probability))
