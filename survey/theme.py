"""
Shared theme and styling for all pages.

Provides consistent CSS, the probability palette and banner helpers.
"""

APP_TITLE = "LIDAR Archaeological Scoring System"

# Probability and status colors
COLORS = {
    'high': '#059669',      # Emerald
    'medium': '#d97706',    # Amber
    'low': '#dc2626',       # Red
    'neutral': '#64748b',   # Slate gray
    'primary': '#2563eb',   # Deep blue
}

# Shared CSS for all pages
SHARED_CSS = """
<style>
    /* Hide Streamlit chrome */
    #MainMenu, footer, .stDeployButton {
        visibility: hidden;
        display: none;
    }

    .block-container {
        padding: 1.5rem 2rem;
        max-width: 1400px;
    }

    h1 {
        font-weight: 600;
        color: #1e293b;
        letter-spacing: -0.025em;
    }

    [data-testid="stMetricValue"] {
        font-weight: 600;
    }
</style>
"""

FOOTER_WARNING = (
    "⚠️ Archaeological verification through field survey remains essential. "
    "This tool assists prioritization only."
)


def get_page_config(title: str):
    """Get consistent page configuration."""
    return {
        'page_title': f"{title} | {APP_TITLE}",
        'page_icon': "🛰️",
        'layout': "wide",
    }


def inject_theme():
    """Inject shared CSS into the page."""
    import streamlit as st
    st.markdown(SHARED_CSS, unsafe_allow_html=True)


def probability_color(label: str) -> str:
    return COLORS.get(label.lower(), COLORS['neutral'])


def render_alerts(alerts):
    """Render survey.alerts.Alert objects as banners."""
    import streamlit as st
    for alert in alerts:
        text = f"**{alert.title}** {alert.message}"
        if alert.severity == "error":
            st.error(text)
        else:
            st.warning(text)


def render_footer():
    import streamlit as st
    st.markdown("---")
    st.warning(FOOTER_WARNING)
