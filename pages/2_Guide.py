"""
Scoring Guide - methodology, profile weights and the factor rubric.
"""

import streamlit as st
import pandas as pd

from survey.theme import get_page_config, inject_theme, render_footer

st.set_page_config(**get_page_config("Scoring Guide"))
inject_theme()

from survey.profiles import PROFILES, FACTORS, FACTOR_LABELS
from survey.scoring import FACTOR_MAXIMUMS, SCORE_SCALE, HIGH_THRESHOLD, MEDIUM_THRESHOLD
from survey.sampling import TARGET_RATIO
from survey.sensitivity import DOMINANCE_THRESHOLD

st.title("📖 Scoring Guide")

# ═══════════════════════════════════════════════════════════════════════════
# FACTOR RUBRIC
# ═══════════════════════════════════════════════════════════════════════════
st.header("Factor Rubric")

RUBRIC = {
    "data_quality": "Point density (<1, 1-4, >4 pt/m²) plus 1 when at least two visualizations are used",
    "morphology": "Geometric regularity and internal complexity (0-1 each) plus 1 for features of 150 m or more",
    "elevation": "Elevation percentile within 1 km: lowest 25%, middle 50%, highest 25%",
    "water_access": "Modern water within 500 m plus historical water sources within 1 km",
    "vegetation": "Anomaly score; forest caps at 1 and urban cover scores 0",
    "archaeology": "1 if any known site lies within 2 km",
}

st.dataframe(pd.DataFrame([
    {"Factor": FACTOR_LABELS[f], "Maximum": FACTOR_MAXIMUMS[f], "How it is scored": RUBRIC[f]}
    for f in FACTORS
]), hide_index=True)

st.markdown(f"""
Each sub-total is divided by its maximum, multiplied by the profile weight, and the
weighted sum is scaled onto **0-{SCORE_SCALE}**.

| Total score | Probability |
|---|---|
| above {HIGH_THRESHOLD} | High |
| above {MEDIUM_THRESHOLD} up to {HIGH_THRESHOLD} | Medium |
| {MEDIUM_THRESHOLD} or below | Low |
""")

# ═══════════════════════════════════════════════════════════════════════════
# PROFILES
# ═══════════════════════════════════════════════════════════════════════════
st.header("Weight Profiles")

rows = []
for key, info in PROFILES.items():
    row = {"Profile": info.name}
    row.update({FACTOR_LABELS[f]: f"{info.weights.weight(f):.0%}" for f in FACTORS})
    rows.append(row)
st.dataframe(pd.DataFrame(rows), hide_index=True)

# ═══════════════════════════════════════════════════════════════════════════
# BIAS REDUCTION
# ═══════════════════════════════════════════════════════════════════════════
st.header("Bias Reduction")
st.markdown(f"""
- **Minimum sources:** at least three of LIDAR, historical maps, aerial photos and
  archaeological databases must be consulted before a score is trusted.
- **Sensitivity analysis:** each factor is removed in turn. A factor responsible for more
  than {DOMINANCE_THRESHOLD:.0f}% of the score is flagged as dominant.
- **Random sampling:** for every {TARGET_RATIO['high']} high-scoring sites, evaluate
  {TARGET_RATIO['medium']} medium, {TARGET_RATIO['low']} low and {TARGET_RATIO['empty']} empty areas.
- **Alternative explanations:** record natural formations, modern disturbance, agricultural
  features and other causes before classifying a site.
""")

render_footer()
