"""Dashboard state snapshot and the pure reducer that advances it."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union

from tempsim.constants import DEFAULT_TARGET_YEAR, MODEL_LABELS, POLYNOMIAL
from tempsim.prediction import (
    ObservedYear, PredictionRequest, PredictionResult, invalid_year_result, run_simulation,
)


class LoadStatus(Enum):
    LOADING = "loading"
    READY = "ready"
    FETCH_FAILED = "fetch_failed"
    EMPTY = "empty"


@dataclass(frozen=True)
class DashboardState:
    load_status: LoadStatus = LoadStatus.LOADING
    series: Tuple[ObservedYear, ...] = ()
    load_error: Optional[str] = None
    model: str = POLYNOMIAL
    target_year_text: str = str(DEFAULT_TARGET_YEAR)
    result: Optional[PredictionResult] = None
    suppress_trend_when_out_of_range: bool = False

    @property
    def trend_line(self):
        return self.result.trend_line if self.result is not None else ()


@dataclass(frozen=True)
class DataLoaded:
    series: Tuple[ObservedYear, ...]


@dataclass(frozen=True)
class DataLoadFailed:
    message: str
    empty: bool = False


@dataclass(frozen=True)
class ModelSelected:
    model: str


@dataclass(frozen=True)
class TargetYearChanged:
    text: str


@dataclass(frozen=True)
class SimulationRequested:
    pass


@dataclass(frozen=True)
class ReloadRequested:
    pass


Event = Union[DataLoaded, DataLoadFailed, ModelSelected, TargetYearChanged, SimulationRequested, ReloadRequested]


def parse_target_year(text):
    """Parse the year input; ``None`` when it is not a whole number."""
    try:
        return int(str(text).strip())
    except ValueError:
        return None


def reduce(state: DashboardState, event: Event) -> DashboardState:
    """Return the state that follows ``event``. ``state`` is never modified."""
    if isinstance(event, DataLoaded):
        if not event.series:
            return replace(state, load_status=LoadStatus.EMPTY, series=(),
                           load_error="No temperature records were found.")
        return replace(state, load_status=LoadStatus.READY, series=tuple(event.series), load_error=None)

    if isinstance(event, DataLoadFailed):
        status = LoadStatus.EMPTY if event.empty else LoadStatus.FETCH_FAILED
        return replace(state, load_status=status, series=(), load_error=event.message)

    if isinstance(event, ReloadRequested):
        return replace(state, load_status=LoadStatus.LOADING, series=(), load_error=None, result=None)

    if isinstance(event, ModelSelected):
        if event.model not in MODEL_LABELS:
            raise ValueError(f"Unknown model: {event.model!r}")
        return replace(state, model=event.model)

    if isinstance(event, TargetYearChanged):
        return replace(state, target_year_text=event.text)

    if isinstance(event, SimulationRequested):
        year = parse_target_year(state.target_year_text)
        if year is None:
            return replace(state, result=invalid_year_result("Please enter a whole year, for example 2030."))
        result = run_simulation(
            state.series, PredictionRequest(model=state.model, target_year=year),
            suppress_trend_when_out_of_range=state.suppress_trend_when_out_of_range,
        )
        return replace(state, result=result)

    raise TypeError(f"Unhandled event: {event!r}")
