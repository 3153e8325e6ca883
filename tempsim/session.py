"""Per-session dashboard state held in ``st.session_state``."""
import logging

import streamlit as st

from tempsim.data_loader import DataFetchError, EmptyDatasetError, load_series, open_source
from tempsim.state import DashboardState, DataLoaded, DataLoadFailed, LoadStatus, reduce

logger = logging.getLogger(__name__)


def current_state():
    return st.session_state.dashboard


def dispatch(event):
    """Advance the session's state snapshot with ``event``."""
    st.session_state.dashboard = reduce(st.session_state.dashboard, event)
    return st.session_state.dashboard


def ensure_loaded(settings):
    """Create the session state and fetch the series once per session."""
    if "dashboard" not in st.session_state:
        st.session_state.dashboard = DashboardState(
            suppress_trend_when_out_of_range=settings.suppress_trend_when_out_of_range,
        )

    if st.session_state.dashboard.load_status == LoadStatus.LOADING:
        with st.spinner("Loading temperature data..."):
            try:
                with open_source(settings) as source:
                    dispatch(DataLoaded(load_series(source)))
            except EmptyDatasetError as e:
                dispatch(DataLoadFailed(str(e), empty=True))
            except DataFetchError as e:
                logger.error("Temperature data fetch failed: %s", e)
                dispatch(DataLoadFailed("Failed to load temperature data. Please try again later."))

    return st.session_state.dashboard
