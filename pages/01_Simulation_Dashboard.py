"""Simulation Dashboard -- historical temperatures and forecast models."""
import streamlit as st

from tempsim.config import Settings, setup_logging
from tempsim.constants import (
    DEFAULT_TARGET_YEAR, FIRST_FORECAST_YEAR, HISTORY_MARGIN, LAST_INPUT_YEAR, MODEL_LABELS, MODEL_LIST,
)
from tempsim.plotting import simulation_chart
from tempsim.session import current_state, dispatch, ensure_loaded
from tempsim.state import (
    LoadStatus, ModelSelected, ReloadRequested, SimulationRequested, TargetYearChanged, parse_target_year,
)
from tempsim.ui_components import (
    concept_box, formula_box, load_error_box, page_header, simulation_result,
)

settings = Settings.load()
setup_logging(settings)

state = ensure_loaded(settings)

page_header("Temperature Simulation", caption="Philippines annual mean temperature")

# ── Controls and results | chart ───────────────────────────────────────────────
col_controls, col_chart = st.columns([1, 2])

with col_controls:
    model = st.selectbox(
        "Simulation Model", MODEL_LIST,
        index=MODEL_LIST.index(state.model),
        format_func=lambda m: MODEL_LABELS[m],
        key="sim_model",
    )
    if model != state.model:
        dispatch(ModelSelected(model))

    year = st.number_input(
        "Year to Predict",
        min_value=FIRST_FORECAST_YEAR, max_value=LAST_INPUT_YEAR,
        value=min(max(parse_target_year(state.target_year_text) or DEFAULT_TARGET_YEAR, FIRST_FORECAST_YEAR),
                  LAST_INPUT_YEAR),
        step=1,
        key="sim_year",
    )
    if str(year) != current_state().target_year_text:
        dispatch(TargetYearChanged(str(year)))

    run = st.button(
        "Run Simulation", use_container_width=True,
        disabled=current_state().load_status != LoadStatus.READY,
    )
    if run:
        with st.spinner("Calculating..."):
            dispatch(SimulationRequested())

    state = current_state()
    simulation_result(state.result)

with col_chart:
    if state.load_status in (LoadStatus.FETCH_FAILED, LoadStatus.EMPTY):
        load_error_box(state)
        if st.button("Retry", key="reload_data"):
            dispatch(ReloadRequested())
            st.rerun()
    else:
        prediction = state.result.prediction if state.result is not None else None
        fig = simulation_chart(state.series, state.trend_line, prediction, stride=settings.chart_stride)
        st.plotly_chart(fig, use_container_width=True)

st.divider()

# ── How the models work ───────────────────────────────────────────────────────
st.subheader("How the Models Work")
col1, col2 = st.columns(2)
with col1:
    concept_box(
        "Polynomial Regression (2nd degree)",
        "Fits a parabola through the 5-year smoothed series. Years are counted from 1900 "
        "before fitting so the squared term stays a manageable size. The reported accuracy "
        "is adjusted R², which is R² penalized for the two predictors (x and x²).",
    )
    formula_box(
        "Fitted curve",
        r"\hat{y} = a\,(t - 1900)^2 + b\,(t - 1900) + c",
    )
with col2:
    concept_box(
        "5-Year Moving Average",
        "Averages the last five smoothed values and projects forward at their average "
        "yearly rate of change, measured from the first to the last year of the window.",
    )
    formula_box(
        "Projection",
        r"\hat{y}_t = \bar{y}_{5} + \frac{y_{last} - y_{first}}{k - 1}\,(t - t_{last})",
        "k is the number of records in the window (five once the series is long enough).",
    )

st.caption(
    f"Predictions more than {HISTORY_MARGIN}°C outside the observed annual means are flagged. "
    f"Forecasts start at {FIRST_FORECAST_YEAR}."
)
