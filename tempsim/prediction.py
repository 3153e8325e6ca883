"""Temperature prediction engine: polynomial and moving-average forecasts.

Everything here is pure. The historical series is a tuple of ``ObservedYear``
sorted by year; each simulation run returns a fresh ``PredictionResult``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from tempsim.constants import (
    BASE_YEAR, FIRST_FORECAST_YEAR, HISTORY_MARGIN, MODEL_LABELS, MOVING_AVERAGE,
    MOVING_AVERAGE_WINDOW, POLYNOMIAL, POLYNOMIAL_PREDICTORS, TREND_SEGMENTS,
)
from tempsim.ml_helpers import polynomial_coefficients, polynomial_model, regression_metrics
from tempsim.stats_helpers import adjusted_r_squared

logger = logging.getLogger(__name__)

TrendPoint = Tuple[str, float]


@dataclass(frozen=True)
class ObservedYear:
    """One historical record."""
    year: int
    annual_mean: float
    five_year_smooth: float


@dataclass(frozen=True)
class PredictionRequest:
    model: str
    target_year: int


class SimulationStatus(Enum):
    OK = "ok"
    OUT_OF_RANGE = "out_of_range"
    INVALID_YEAR = "invalid_year"
    EMPTY_DATASET = "empty_dataset"
    CALCULATION_ERROR = "calculation_error"


@dataclass(frozen=True)
class PredictionResult:
    prediction: float
    explanation: Tuple[str, ...]
    warning: Optional[str] = None
    trend_line: Tuple[TrendPoint, ...] = ()
    error: Optional[str] = None
    status: SimulationStatus = SimulationStatus.OK


@dataclass(frozen=True)
class PolynomialFit:
    coefficients: Tuple[float, float, float]
    r_squared: float
    r_squared_adjusted: float
    n: int
    adjusted: bool = True
    fitted_values: Tuple[float, ...] = field(default=(), repr=False)

    @property
    def equation(self) -> str:
        a, b, c = self.coefficients
        return f"y = {a:.6e}x² + {b:.6f}x + {c:.4f}"


@dataclass(frozen=True)
class MovingAverageForecast:
    prediction: float
    avg_temp: float
    yearly_change: float
    window_size: int


@dataclass(frozen=True)
class RangeCheck:
    in_range: bool
    allowed_min: float
    allowed_max: float
    observed_min: float
    observed_max: float


# ---------------------------------------------------------------------------
# Single-point models
# ---------------------------------------------------------------------------
def fit_polynomial(series: Sequence[ObservedYear], base_year: int = BASE_YEAR) -> PolynomialFit:
    """Least-squares quadratic of the 5-year smoothed mean against ``year - base_year``.

    An empty series yields an all-zero fit.
    """
    n = len(series)
    if n == 0:
        return PolynomialFit(coefficients=(0.0, 0.0, 0.0), r_squared=0.0,
                             r_squared_adjusted=0.0, n=0, adjusted=False)

    x = np.array([r.year - base_year for r in series], dtype=float).reshape(-1, 1)
    y = np.array([r.five_year_smooth for r in series], dtype=float)

    model = polynomial_model(degree=2)
    model.fit(x, y)
    fitted = model.predict(x)

    r2 = regression_metrics(y, fitted)["r2"]
    r2_adj, adjusted = adjusted_r_squared(r2, n, POLYNOMIAL_PREDICTORS)
    return PolynomialFit(
        coefficients=polynomial_coefficients(model),
        r_squared=r2,
        r_squared_adjusted=r2_adj,
        n=n,
        adjusted=adjusted,
        fitted_values=tuple(float(v) for v in fitted),
    )


def predict_polynomial(coefficients, target_year: int, base_year: int = BASE_YEAR) -> float:
    """Evaluate ``a·x² + b·x + c`` at ``x = target_year - base_year``."""
    a, b, c = coefficients
    x = target_year - base_year
    return a * x * x + b * x + c


def predict_moving_average(series: Sequence[ObservedYear], target_year: int,
                           window: int = MOVING_AVERAGE_WINDOW) -> MovingAverageForecast:
    """Project the recent smoothed average forward at its average yearly rate of change."""
    if not series:
        return MovingAverageForecast(prediction=0.0, avg_temp=0.0, yearly_change=0.0, window_size=0)

    recent = series[-window:]
    size = len(recent)
    avg_temp = sum(r.five_year_smooth for r in recent) / size
    # size - 1 intervals between the first and last record of the window
    yearly_change = (recent[-1].five_year_smooth - recent[0].five_year_smooth) / (size - 1) if size > 1 else 0.0

    years_ahead = target_year - series[-1].year
    return MovingAverageForecast(
        prediction=avg_temp + yearly_change * years_ahead,
        avg_temp=avg_temp,
        yearly_change=yearly_change,
        window_size=size,
    )


# ---------------------------------------------------------------------------
# Trend line and validation
# ---------------------------------------------------------------------------
def generate_trend_line(series: Sequence[ObservedYear], prediction: float, target_year: int, model: str,
                        num_segments: int = TREND_SEGMENTS,
                        base_year: int = BASE_YEAR) -> Tuple[TrendPoint, ...]:
    """Points from the last observed year to ``target_year`` for plotting.

    Intermediate points are recomputed with the model, not interpolated. The
    line always ends exactly on ``(str(target_year), prediction)``.
    """
    if not series:
        return ()
    if model not in MODEL_LABELS:
        raise ValueError(f"Unknown model: {model!r}")

    last = series[-1]
    points = [(str(last.year), last.five_year_smooth)]

    if target_year > last.year:
        if model == POLYNOMIAL:
            coefficients = fit_polynomial(series, base_year).coefficients

            def point_at(year):
                return predict_polynomial(coefficients, year, base_year)
        else:
            def point_at(year):
                return predict_moving_average(series, year).prediction

        step = math.ceil((target_year - last.year) / num_segments)
        year = last.year + step
        while year <= target_year:
            points.append((str(year), point_at(year)))
            year += step

    if points[-1][0] != str(target_year):
        points.append((str(target_year), prediction))

    return tuple(points)


def validate_against_history(prediction: float, series: Sequence[ObservedYear],
                             margin: float = HISTORY_MARGIN) -> RangeCheck:
    """Check ``prediction`` against the raw annual-mean extremes widened by ``margin``."""
    if not series:
        return RangeCheck(in_range=True, allowed_min=0.0, allowed_max=0.0, observed_min=0.0, observed_max=0.0)

    observed_min = min(r.annual_mean for r in series)
    observed_max = max(r.annual_mean for r in series)
    allowed_min = observed_min - margin
    allowed_max = observed_max + margin
    return RangeCheck(
        in_range=allowed_min <= prediction <= allowed_max,
        allowed_min=allowed_min,
        allowed_max=allowed_max,
        observed_min=observed_min,
        observed_max=observed_max,
    )


def out_of_range_warning(prediction: float, check: RangeCheck, margin: float = HISTORY_MARGIN) -> str:
    return (
        f"Note: The predicted temperature ({prediction:.2f}°C) is outside our historical observations.\n\n"
        f"Historical Range: {check.observed_min:.2f}°C to {check.observed_max:.2f}°C\n"
        f"Allowed Range: {check.allowed_min:.2f}°C to {check.allowed_max:.2f}°C (±{margin}°C margin)\n\n"
        "This doesn't necessarily mean the prediction is wrong, but it suggests a significant "
        "change from historical patterns."
    )


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------
def invalid_year_result(message: str = f"Please select a year from {FIRST_FORECAST_YEAR} onwards for predictions.") -> PredictionResult:
    return PredictionResult(
        prediction=0.0,
        explanation=("Invalid year selected",),
        error=message,
        status=SimulationStatus.INVALID_YEAR,
    )


def _polynomial_explanation(series, request):
    fit = fit_polynomial(series)
    prediction = predict_polynomial(fit.coefficients, request.target_year)
    accuracy = f"Model Accuracy (R²): {fit.r_squared_adjusted:.4f}"
    if not fit.adjusted:
        accuracy += " (unadjusted, too few records to adjust)"
    return prediction, (
        f"Prediction Model: {MODEL_LABELS[POLYNOMIAL]}",
        f"Target Year: {request.target_year}",
        f"Predicted Temperature: {prediction:.2f}°C",
        f"Mathematical Model: {fit.equation}",
        accuracy,
        "Note: Using 5-year smoothed data for stability",
    )


def _moving_average_explanation(series, request):
    forecast = predict_moving_average(series, request.target_year)
    sign = "+" if forecast.yearly_change > 0 else ""
    return forecast.prediction, (
        f"Prediction Model: {MODEL_LABELS[MOVING_AVERAGE]}",
        f"Target Year: {request.target_year}",
        f"Predicted Temperature: {forecast.prediction:.2f}°C",
        f"Based on {forecast.window_size}-year moving average:",
        f"Last {forecast.window_size} years average: {forecast.avg_temp:.2f}°C",
        f"Rate of change: {sign}{forecast.yearly_change:.4f}°C per year",
    )


def run_simulation(series: Sequence[ObservedYear], request: PredictionRequest,
                   suppress_trend_when_out_of_range: bool = False) -> PredictionResult:
    """Validate the request, predict, check against history and build the trend line."""
    if request.target_year < FIRST_FORECAST_YEAR:
        logger.info("Rejected target year %s", request.target_year)
        return invalid_year_result()

    if request.model not in MODEL_LABELS:
        raise ValueError(f"Unknown model: {request.model!r}")

    if not series:
        return PredictionResult(
            prediction=0.0,
            explanation=("No temperature records available",),
            error="No historical temperature data was found, so no prediction can be made.",
            status=SimulationStatus.EMPTY_DATASET,
        )

    try:
        if request.model == POLYNOMIAL:
            prediction, details = _polynomial_explanation(series, request)
        else:
            prediction, details = _moving_average_explanation(series, request)

        check = validate_against_history(prediction, series)
        if not check.in_range:
            logger.info("Prediction %.2f for %s outside [%.2f, %.2f]", prediction,
                        request.target_year, check.allowed_min, check.allowed_max)
            trend = () if suppress_trend_when_out_of_range else generate_trend_line(
                series, prediction, request.target_year, request.model)
            return PredictionResult(
                prediction=prediction,
                explanation=details,
                warning=out_of_range_warning(prediction, check),
                trend_line=trend,
                status=SimulationStatus.OUT_OF_RANGE,
            )

        trend = generate_trend_line(series, prediction, request.target_year, request.model)
    except (ArithmeticError, ValueError, np.linalg.LinAlgError):
        logger.exception("Simulation failed for %s", request)
        return PredictionResult(
            prediction=0.0,
            explanation=("Error in calculation. Please try again.",),
            error="Calculation error occurred",
            status=SimulationStatus.CALCULATION_ERROR,
        )

    return PredictionResult(prediction=prediction, explanation=details, trend_line=trend)
