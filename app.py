"""Philippines Temperature Simulation -- Main Entry Point."""
import streamlit as st

st.set_page_config(
    page_title="Philippines Temperature Simulation",
    page_icon="🌡️",
    layout="wide",
    initial_sidebar_state="expanded",
)

from tempsim.config import Settings, setup_logging
from tempsim.data_loader import series_frame
from tempsim.state import LoadStatus
from tempsim.stats_helpers import descriptive_stats, warming_per_decade
from tempsim.session import ensure_loaded
from tempsim.ui_components import load_error_box, series_metrics

settings = Settings.load()
setup_logging(settings)

st.title("Philippines Temperature Simulation")
st.subheader("Join our climate change initiative")

st.markdown("""
This dashboard puts more than a century of Philippine annual mean temperatures in one place
and lets you ask a simple question of them: *if the recent trend carries on, how warm does
a given year get?*

### What You Can Do

1. **Explore** the historical record: yearly means alongside a 5-year smoothed series
2. **Pick a model**: a 2nd-degree polynomial fit over the whole record, or a projection
   of the last five years' moving average
3. **Choose a year** from 2024 onwards and run the simulation to see the projected
   trend line drawn from the last observation to your target

Predictions that land well outside anything observed are flagged. That is not a verdict
that the prediction is wrong, only that it would be a break from history.
""")

st.page_link("pages/01_Simulation_Dashboard.py", label="Go to Dashboard →")

st.divider()

st.subheader("Dataset Preview")
state = ensure_loaded(settings)
if state.load_status != LoadStatus.READY:
    load_error_box(state)
else:
    df = series_frame(state.series)
    st.dataframe(df.tail(20), use_container_width=True, hide_index=True)

    stats = descriptive_stats(df["annual_mean"])
    series_metrics(
        stats, int(df["year"].iloc[0]), int(df["year"].iloc[-1]),
        warming_per_decade(df["year"], df["five_year_smooth"]),
    )
