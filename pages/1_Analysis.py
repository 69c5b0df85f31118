"""
Bias Analysis - sensitivity diagnostics and the random sampling protocol.
"""

import streamlit as st
import pandas as pd
import plotly.express as px

from survey.theme import get_page_config, inject_theme, render_alerts, render_footer, COLORS

st.set_page_config(**get_page_config("Bias Analysis"))
inject_theme()

from survey.config import get_settings
from survey.session import SurveySession
from survey.sampling import Bucket, TARGET_RATIO
from survey.alerts import collect_alerts
from survey.scoring import explain_score

if "survey" not in st.session_state:
    st.session_state.survey = SurveySession(get_settings().default_profile)
survey = st.session_state.survey

st.title("🧭 Bias Analysis")

tab_sensitivity, tab_sampling = st.tabs(["📉 Sensitivity", "🎲 Random Sampling"])

# ═══════════════════════════════════════════════════════════════════════════
# SENSITIVITY
# ═══════════════════════════════════════════════════════════════════════════
with tab_sensitivity:
    sites = survey.list_sites()
    if not sites:
        st.info("Add a site on the main page to run sensitivity analysis.")
    else:
        site_ids = [s.id for s in sites]
        saved = st.session_state.get("selected_site")
        default_idx = site_ids.index(saved) if saved in site_ids else 0
        site_id = st.selectbox(
            "Site", site_ids, index=default_idx, format_func=lambda i: f"Site #{i}",
        )
        site = survey.get_site(site_id)
        result = survey.analyze(site_id)

        col1, col2, col3 = st.columns(3)
        col1.metric("Base Score", f"{result.base_score:.3f}")
        low, high = result.confidence_range
        col2.metric("Confidence Range", f"{low:.2f} - {high:.2f}")
        col3.metric("Dominant Factor", result.dominant_factor or "None")

        df = pd.DataFrame([f.to_dict() for f in result.factor_impacts])
        fig = px.bar(
            df, x="percentage", y="factor", orientation="h",
            labels={"percentage": "Impact on score (%)", "factor": ""},
            color_discrete_sequence=[COLORS["primary"]],
        )
        fig.update_layout(height=300, margin=dict(l=20, r=20, t=20, b=20))
        st.plotly_chart(fig, width="stretch")

        st.dataframe(df, hide_index=True)
        st.info(f"**Recommendation:** {result.recommendation}")

        with st.expander("Score breakdown"):
            st.code(explain_score(site, survey.weights_for(site_id)))

        render_alerts(collect_alerts(sensitivity=result))

# ═══════════════════════════════════════════════════════════════════════════
# RANDOM SAMPLING
# ═══════════════════════════════════════════════════════════════════════════
with tab_sampling:
    st.markdown(
        f"Target ratio: for every **{TARGET_RATIO['high']}** high-scoring sites, sample "
        f"**{TARGET_RATIO['medium']}** medium, **{TARGET_RATIO['low']}** low and "
        f"**{TARGET_RATIO['empty']}** empty areas."
    )

    cols = st.columns(4)
    for col, bucket in zip(cols, Bucket):
        if col.button(f"+ {bucket.value.title()}", key=f"sample_{bucket.value}"):
            survey.record_observation(bucket)
            st.rerun()

    record = survey.sampling.record
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("High", record.high)
    c2.metric("Medium", record.medium)
    c3.metric("Low", record.low)
    c4.metric("Empty", record.empty)
    c5.metric("Compliance", f"{record.compliance:.0f}%", record.status, delta_color="off")

    st.progress(int(record.compliance))

    recommendation = survey.sampling.recommend()
    if any(recommendation.values()):
        st.markdown("**Sample next:**")
        for bucket, count in recommendation.items():
            if count:
                st.write(f"- {count} {bucket} area{'s' if count != 1 else ''}")
    else:
        st.success("Sampling ratio is on target.")

    if record.total and st.button("Reset sampling counts"):
        survey.sampling.reset()
        st.rerun()

    st.caption(f"Last updated: {record.last_updated}")
    render_alerts(collect_alerts(sampling=record))

render_footer()
