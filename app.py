"""
LIDAR Archaeological Scoring System - Main Application

Multi-page Streamlit application for recording and scoring candidate
archaeological sites detected in LIDAR survey data.
"""

import logging
from dataclasses import replace

import streamlit as st

from survey.theme import (
    get_page_config, inject_theme, render_alerts, render_footer, probability_color, APP_TITLE,
)

# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
st.set_page_config(**get_page_config("Site Scoring"), initial_sidebar_state="expanded")
inject_theme()

# ═══════════════════════════════════════════════════════════════════════════
# IMPORTS
# ═══════════════════════════════════════════════════════════════════════════
from survey.config import get_settings, configure_logging
from survey.errors import UnknownProfile
from survey.models import (
    AlternativeType, LandCover, Likelihood, MLClass, SourceQuality,
    HistoricalWaterSource, ArchDBSource, ALTERNATIVE_LABELS,
)
from survey.profiles import PROFILES, FACTORS, FACTOR_LABELS, ScoringProfile, resolve_profile
from survey.session import SurveySession
from survey.alerts import collect_alerts
from survey.export import export_csv, export_filename, sites_dataframe
from survey import sources

settings = get_settings()
configure_logging(settings)
log = logging.getLogger("app")

if "survey" not in st.session_state:
    try:
        st.session_state.survey = SurveySession(settings.default_profile)
    except UnknownProfile as e:
        log.error(f"{e}; falling back to prehistoric")
        st.session_state.survey = SurveySession()
if "disclaimer_ack" not in st.session_state:
    st.session_state.disclaimer_ack = False

survey = st.session_state.survey

# ═══════════════════════════════════════════════════════════════════════════
# DISCLAIMER
# ═══════════════════════════════════════════════════════════════════════════
if not st.session_state.disclaimer_ack:
    st.title("Important Archaeological Notice")
    st.markdown("""
**This tool provides probability assessments, NOT definitive identifications.**

High scores indicate sites that warrant further investigation through:
- Professional archaeological field survey
- Additional remote sensing analysis
- Historical research and local knowledge
- Systematic excavation where appropriate

Never make final determinations based solely on this scoring system.
This tool is designed to prioritize areas for investigation with limited resources,
not to replace traditional archaeological methods.
""")
    if st.button("I Understand - Continue to Application", type="primary"):
        st.session_state.disclaimer_ack = True
        st.rerun()
    st.stop()

# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR: PROFILE
# ═══════════════════════════════════════════════════════════════════════════
st.sidebar.title(f"🛰️ {APP_TITLE}")
st.sidebar.caption("Probability Tool Only")
st.sidebar.markdown("---")

profile_keys = [p.value for p in ScoringProfile]
selected = st.sidebar.selectbox(
    "Archaeological context",
    profile_keys,
    index=profile_keys.index(survey.default_profile),
    format_func=lambda key: PROFILES[ScoringProfile(key)].name,
)
if selected != survey.default_profile:
    survey.set_default_profile(selected)

info = PROFILES[resolve_profile(selected)]
st.sidebar.write(info.description)
for line in info.characteristics:
    st.sidebar.write(f"- {line}")
st.sidebar.info(
    "Profile selection adjusts scoring weights but does NOT determine site chronology. "
    "Always consider multiple periods and alternative explanations."
)

# ═══════════════════════════════════════════════════════════════════════════
# MAIN PAGE
# ═══════════════════════════════════════════════════════════════════════════
st.title("🛰️ Site Scoring")
st.markdown("Enhanced multi-criteria analysis with bias reduction.")

if st.button("➕ Add Site"):
    survey.add_site()
    st.rerun()

if not survey.sites:
    st.info("👋 No sites yet. Add a site to start recording observations.")
    render_footer()
    st.stop()

st.dataframe(sites_dataframe(survey.list_sites()), hide_index=True)

site_ids = [s.id for s in survey.list_sites()]
site_id = st.selectbox("Edit site", site_ids, index=len(site_ids) - 1, format_func=lambda i: f"Site #{i}")
st.session_state.selected_site = site_id
site = survey.get_site(site_id)

tab_details, tab_factors, tab_sources, tab_alternatives = st.tabs([
    "📝 Details", "📊 Factors", "📚 Data Sources", "❓ Alternatives"
])

# ═══════════════════════════════════════════════════════════════════════════
# DETAILS TAB
# ═══════════════════════════════════════════════════════════════════════════
with tab_details:
    coords = st.text_input("Coordinates", site.coordinates, key=f"coords_{site.id}")
    site_profile = st.selectbox(
        "Scoring profile", profile_keys,
        index=profile_keys.index(site.scoring_profile),
        format_func=lambda key: PROFILES[ScoringProfile(key)].name,
        key=f"profile_{site.id}",
    )
    col1, col2 = st.columns(2)
    ml_values = [c.value for c in MLClass]
    ml_class = col1.selectbox(
        "ML class", ml_values,
        index=ml_values.index(site.ml_classification.value), key=f"ml_{site.id}",
    )
    confidence_level = col2.slider("Confidence level", 1, 5, site.confidence_level, key=f"cl_{site.id}")
    period = st.text_input("Suspected period", site.suspected_period, key=f"period_{site.id}")
    notes = st.text_area("Notes", site.notes, key=f"notes_{site.id}")
    rationale = st.text_area("Decision rationale", site.decision_rationale, key=f"rationale_{site.id}")
    next_steps = st.text_area("Next steps", site.next_steps, key=f"next_{site.id}")

    changes = {}
    for name, value in [
        ("coordinates", coords), ("scoring_profile", site_profile),
        ("ml_classification", ml_class), ("confidence_level", confidence_level),
        ("suspected_period", period), ("notes", notes),
        ("decision_rationale", rationale), ("next_steps", next_steps),
    ]:
        current = getattr(site, name)
        if value != getattr(current, "value", current):
            changes[name] = value
    if changes:
        site = survey.update_details(site.id, **changes)

    if site.scoring_profile == ScoringProfile.CUSTOM.value:
        st.subheader("Custom weights")
        weights = survey.weights_for(site.id)
        new_weights = {}
        for factor in FACTORS:
            pct = st.slider(
                FACTOR_LABELS[factor], 0, 100, round(weights.weight(factor) * 100),
                key=f"w_{factor}_{site.id}",
            )
            new_weights[factor] = pct / 100
        if new_weights != weights.as_dict():
            site = survey.update_details(site.id, custom_weights=new_weights)

# ═══════════════════════════════════════════════════════════════════════════
# FACTORS TAB
# ═══════════════════════════════════════════════════════════════════════════
with tab_factors:
    col1, col2, col3 = st.columns(3)

    with col1:
        st.subheader(f"Data Quality ({site.data_quality.sub_total:g}/3)")
        dq = site.data_quality
        density = st.selectbox(
            "Point density", [0, 1, 2], index=dq.point_density, key=f"pd_{site.id}",
            format_func=lambda v: ["<1 pt/m²", "1-4 pt/m²", ">4 pt/m²"][v],
        )
        flags = {
            name: st.checkbox(label, getattr(dq, name), key=f"{name}_{site.id}")
            for name, label in [("hillshade", "Hillshade"), ("lrm", "LRM"), ("svf", "SVF"), ("slope", "Slope")]
        }
        confidence = st.slider("Data confidence (%)", 0, 100, int(dq.confidence), key=f"dqc_{site.id}")
        dq_changes = {k: v for k, v in flags.items() if v != getattr(dq, k)}
        if density != dq.point_density:
            dq_changes["point_density"] = density
        if confidence != int(dq.confidence):
            dq_changes["confidence"] = confidence
        if dq_changes:
            site = survey.update_data_quality(site.id, **dq_changes)

        st.subheader(f"Morphology ({site.morphology.sub_total:.2f}/3)")
        morph = site.morphology
        regularity = st.slider("Geometric regularity", 0.0, 1.0, float(morph.regularity), 0.05, key=f"reg_{site.id}")
        complexity = st.slider("Internal complexity", 0.0, 1.0, float(morph.complexity), 0.05, key=f"cpx_{site.id}")
        size = st.number_input("Size (m)", min_value=0.0, value=float(morph.size), key=f"size_{site.id}")
        morph_changes = {
            k: v for k, v in [("regularity", regularity), ("complexity", complexity), ("size", size)]
            if v != getattr(morph, k)
        }
        if morph_changes:
            site = survey.update_morphology(site.id, **morph_changes)

    with col2:
        st.subheader(f"Landscape Context ({site.context.sub_total:g}/2)")
        elevation = st.selectbox(
            "Elevation percentile (1km)", [0, 1, 2], index=site.context.elevation_percentile,
            key=f"elev_{site.id}",
            format_func=lambda v: ["Lowest 25%", "Middle 50%", "Highest 25%"][v],
        )
        if elevation != site.context.elevation_percentile:
            site = survey.update_context(site.id, elevation_percentile=elevation)

        st.subheader(f"Water Access ({site.water.sub_total:g}/2)")
        modern = st.checkbox("Modern water within 500m", bool(site.water.modern_water), key=f"mw_{site.id}")
        historical = st.number_input(
            "Historical water sources within 1km", min_value=0, max_value=10,
            value=len(site.water.historical_water), key=f"hw_{site.id}",
        )
        water_changes = {}
        if int(modern) != site.water.modern_water:
            water_changes["modern_water"] = int(modern)
        if historical != len(site.water.historical_water):
            existing = list(site.water.historical_water[:historical])
            existing += [HistoricalWaterSource() for _ in range(historical - len(existing))]
            water_changes["historical_water"] = existing
        if water_changes:
            site = survey.update_water(site.id, **water_changes)

    with col3:
        st.subheader(f"Vegetation ({site.vegetation.sub_total:g}/2)")
        covers = [c.value for c in LandCover]
        land_cover = st.selectbox(
            "Land cover", covers, index=covers.index(site.vegetation.land_cover.value), key=f"lc_{site.id}",
        )
        anomaly = st.selectbox("Anomaly score", [0, 1, 2], index=site.vegetation.anomaly_score, key=f"an_{site.id}")
        veg_changes = {}
        if land_cover != site.vegetation.land_cover.value:
            veg_changes["land_cover"] = land_cover
        if anomaly != site.vegetation.anomaly_score:
            veg_changes["anomaly_score"] = anomaly
        if veg_changes:
            site = survey.update_vegetation(site.id, **veg_changes)

        st.subheader(f"Archaeology ({site.archaeology.sub_total:g}/1)")
        nearby = st.number_input(
            "Known sites within 2km", min_value=0, value=site.archaeology.sites_nearby, key=f"arch_{site.id}",
        )
        if nearby != site.archaeology.sites_nearby:
            site = survey.update_archaeology(site.id, sites_nearby=nearby)

    st.markdown("---")
    col1, col2 = st.columns(2)
    col1.metric("Total Score", f"{site.total_score:.1f} / 13")
    col2.markdown(
        f"Probability<br><span style='color:{probability_color(site.probability.value)};"
        f"font-size:2rem;font-weight:600'>{site.probability.value}</span>",
        unsafe_allow_html=True,
    )
    if st.button("🎲 Count in sampling tracker", key=f"sample_{site.id}"):
        survey.record_site(site.id)
        st.toast(f"Recorded site #{site.id} as {site.probability.value.lower()}")

# ═══════════════════════════════════════════════════════════════════════════
# DATA SOURCES TAB
# ═══════════════════════════════════════════════════════════════════════════
with tab_sources:
    ds = site.data_sources
    if ds.minimum_sources_met:
        st.success("Minimum Sources Met")
    else:
        st.error("Insufficient Sources")

    qualities = [q.value for q in SourceQuality]
    lidar_checked = st.checkbox("LIDAR Data", ds.lidar.checked, key=f"lidar_{site.id}")
    lidar = ds.lidar
    if lidar_checked:
        quality = st.selectbox("LIDAR quality", qualities, index=qualities.index(lidar.quality.value), key=f"lq_{site.id}")
        lidar_notes = st.text_input("LIDAR notes", lidar.notes, key=f"ln_{site.id}")
        lidar = replace(lidar, checked=True, quality=SourceQuality(quality), notes=lidar_notes)
    elif lidar.checked:
        lidar = replace(lidar, checked=False)
    if lidar != ds.lidar:
        site = survey.update_sources(site.id, lidar=lidar)

    for category, label, adder in [
        ("historical_maps", "Historical Maps", sources.add_historical_map),
        ("aerial_photos", "Aerial Photos", sources.add_aerial_photo),
    ]:
        st.subheader(label)
        entries = list(getattr(site.data_sources, category))
        changed = False
        for idx, entry in enumerate(entries):
            c1, c2 = st.columns([1, 3])
            checked = c1.checkbox(f"#{idx + 1}", entry.checked, key=f"{category}_{idx}_{site.id}")
            entry_notes = c2.text_input("Notes", entry.notes, key=f"{category}_n_{idx}_{site.id}")
            if checked != entry.checked or entry_notes != entry.notes:
                entries[idx] = replace(entry, checked=checked, notes=entry_notes)
                changed = True
        if changed:
            site = survey.update_sources(site.id, **{category: entries})
        if st.button(f"Add {label[:-1]}", key=f"add_{category}_{site.id}"):
            updated = adder(site.data_sources)
            survey.update_sources(site.id, **{category: getattr(updated, category)})
            st.rerun()

    db_checked = st.checkbox(
        "Archaeological database consulted",
        any(e.checked for e in site.data_sources.archaeological_db), key=f"adb_{site.id}",
    )
    if db_checked != any(e.checked for e in site.data_sources.archaeological_db):
        site = survey.update_sources(site.id, archaeological_db=[ArchDBSource(checked=db_checked)])

    if st.button("Check for conflicts", key=f"conflicts_{site.id}"):
        site = survey.detect_conflicts(site.id)
    for conflict in site.data_sources.source_conflicts:
        st.warning(f"{conflict.source1} vs {conflict.source2}: {conflict.conflict_type}")

# ═══════════════════════════════════════════════════════════════════════════
# ALTERNATIVES TAB
# ═══════════════════════════════════════════════════════════════════════════
with tab_alternatives:
    st.caption(
        "Check all alternative explanations considered. This helps prevent misidentification "
        "and documents your decision-making process."
    )
    levels = [lvl.value for lvl in Likelihood]
    for alt_type in AlternativeType:
        alt = site.alternative(alt_type)
        label, description = ALTERNATIVE_LABELS[alt_type]
        checked = st.checkbox(label, alt.checked, key=f"alt_{alt_type.value}_{site.id}", help=description)
        alt_changes = {}
        if checked != alt.checked:
            alt_changes["checked"] = checked
        if checked:
            rating = st.radio(
                "Probability", levels, index=levels.index(alt.probability.value),
                horizontal=True, key=f"altp_{alt_type.value}_{site.id}",
            )
            evidence = st.text_area(
                "Evidence", alt.evidence, key=f"alte_{alt_type.value}_{site.id}",
                placeholder="Describe evidence supporting this interpretation...",
            )
            if rating != alt.probability.value:
                alt_changes["probability"] = rating
            if evidence != alt.evidence:
                alt_changes["evidence"] = evidence
        if alt_changes:
            site = survey.update_alternative(site.id, alt_type, **alt_changes)

    considered = sum(1 for a in site.alternative_explanations if a.checked)
    st.write(f"{considered} alternative explanation{'s' if considered != 1 else ''} considered")

# ═══════════════════════════════════════════════════════════════════════════
# EXPORT
# ═══════════════════════════════════════════════════════════════════════════
st.markdown("---")
st.download_button(
    "⬇️ Export Enhanced CSV",
    export_csv(survey.list_sites()),
    file_name=export_filename(settings.export_prefix),
    mime="text/csv",
)

render_alerts(collect_alerts(site=site, sampling=survey.sampling.record))
render_footer()
