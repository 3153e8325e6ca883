"""Shared UI components: headers, concept boxes, simulation result blocks."""
import streamlit as st

from tempsim.prediction import SimulationStatus
from tempsim.state import LoadStatus


def page_header(title, caption=None):
    """Render a page header with an optional caption."""
    if caption:
        st.caption(caption)
    st.title(title)
    st.divider()


def concept_box(title, content):
    """Render a highlighted concept/theory box."""
    st.markdown(f"""
<div style="background-color: #EBF5FB; padding: 20px; border-radius: 10px; border-left: 5px solid #2E86C1; margin: 10px 0;">
<h4 style="color: #2E86C1; margin-top: 0;">{title}</h4>
<p style="color: #1B4F72;">{content}</p>
</div>
""", unsafe_allow_html=True)


def formula_box(title, formula, explanation=""):
    """Render a formula with explanation."""
    st.markdown(f"**{title}**")
    st.latex(formula)
    if explanation:
        st.caption(explanation)


def load_error_box(state):
    """Render the blocking message for a failed or empty data load."""
    if state.load_status == LoadStatus.EMPTY:
        st.warning(f"**No data:** {state.load_error}")
    else:
        st.error(f"**Could not load temperature data:** {state.load_error}")


def simulation_result(result):
    """Render the error/warning block followed by the explanation lines."""
    if result is None:
        return
    if result.error:
        st.error(result.error)
    if result.warning:
        st.warning(result.warning)

    with st.container(border=True):
        st.markdown("#### Simulation Results")
        for line in result.explanation:
            st.markdown(line.replace("\n", "  \n"))

    if result.status == SimulationStatus.OK:
        st.metric("Predicted Temperature", f"{result.prediction:.2f}°C")


def series_metrics(stats, first_year, last_year, per_decade):
    """Render a row of summary metric cards for the historical series."""
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Years on Record", f"{stats['count']:,}")
    col2.metric("Span", f"{first_year} to {last_year}")
    col3.metric("Mean Annual Temp", f"{stats['mean']:.2f}°C")
    col4.metric("Smoothed Change / Decade", f"{per_decade:+.3f}°C")
