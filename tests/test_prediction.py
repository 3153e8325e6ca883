import numpy as np
import pytest

from tempsim import prediction
from tempsim.constants import MOVING_AVERAGE, POLYNOMIAL
from tempsim.prediction import (
    PredictionRequest, SimulationStatus, fit_polynomial, generate_trend_line, predict_moving_average,
    predict_polynomial, run_simulation, validate_against_history,
)

from conftest import make_series


# ---------------------------------------------------------------------------
# Empty series
# ---------------------------------------------------------------------------
def test_empty_series_degrades_to_zero():
    fit = fit_polynomial(())
    assert fit.coefficients == (0.0, 0.0, 0.0)
    assert fit.r_squared_adjusted == 0.0
    assert predict_polynomial(fit.coefficients, 2030) == 0.0

    forecast = predict_moving_average((), 2030)
    assert forecast.prediction == 0.0
    assert forecast.avg_temp == 0.0
    assert forecast.yearly_change == 0.0

    assert generate_trend_line((), 0.0, 2030, POLYNOMIAL) == ()
    assert validate_against_history(27.0, ()).in_range


@pytest.mark.parametrize("model", [POLYNOMIAL, MOVING_AVERAGE])
def test_run_simulation_empty_series(model):
    result = run_simulation((), PredictionRequest(model=model, target_year=2030))
    assert result.status == SimulationStatus.EMPTY_DATASET
    assert result.prediction == 0.0
    assert result.error
    assert result.trend_line == ()


# ---------------------------------------------------------------------------
# Polynomial
# ---------------------------------------------------------------------------
def test_fit_recovers_exact_quadratic(warming_series):
    fit = fit_polynomial(warming_series)
    a, b, c = fit.coefficients
    assert a == pytest.approx(0.0002, abs=1e-8)
    assert b == pytest.approx(0.005, abs=1e-6)
    assert c == pytest.approx(25.0, abs=1e-4)
    assert fit.r_squared == pytest.approx(1.0)
    assert fit.adjusted
    assert fit.n == len(warming_series)


def test_predict_polynomial_matches_fitted_curve():
    series = make_series([
        (1990, 26.1, 26.0), (1995, 26.0, 26.3), (2000, 26.6, 26.2),
        (2005, 26.4, 26.6), (2010, 26.9, 26.7), (2015, 27.0, 27.1),
    ])
    fit = fit_polynomial(series)
    assert predict_polynomial(fit.coefficients, series[-1].year) == pytest.approx(fit.fitted_values[-1])
    assert predict_polynomial(fit.coefficients, series[0].year) == pytest.approx(fit.fitted_values[0])


def test_adjusted_r_squared_formula():
    series = make_series([
        (2000 + i, 26.0, 26.0 + 0.1 * i + (0.05 if i % 2 else -0.05)) for i in range(10)
    ])
    fit = fit_polynomial(series)
    expected = 1 - (1 - fit.r_squared) * (10 - 1) / (10 - 2 - 1)
    assert fit.adjusted
    assert fit.r_squared_adjusted == pytest.approx(expected)
    assert fit.r_squared_adjusted < fit.r_squared


def test_adjusted_r_squared_falls_back_with_three_records():
    series = make_series([(2020, 26.0, 26.0), (2021, 26.5, 26.3), (2022, 26.4, 26.9)])
    fit = fit_polynomial(series)
    assert not fit.adjusted
    assert fit.r_squared_adjusted == fit.r_squared


def test_single_record_fit_does_not_raise():
    fit = fit_polynomial(make_series([(2022, 26.8, 26.8)]))
    assert fit.r_squared == 0.0
    assert not fit.adjusted


def test_equation_format():
    fit = prediction.PolynomialFit(coefficients=(0.0001, 0.005, 25.0), r_squared=1.0,
                                   r_squared_adjusted=1.0, n=10)
    assert fit.equation == "y = 1.000000e-04x² + 0.005000x + 25.0000"


# ---------------------------------------------------------------------------
# Moving average
# ---------------------------------------------------------------------------
def test_moving_average_ramp(ramp_series):
    forecast = predict_moving_average(ramp_series, 2030)
    assert forecast.avg_temp == pytest.approx(26.4)
    assert forecast.yearly_change == pytest.approx(0.2)
    assert forecast.prediction == pytest.approx(28.0)
    assert forecast.window_size == 5


def test_moving_average_uses_last_five_only(ramp_series):
    series = make_series([(2010, 20.0, 20.0), (2011, 30.0, 30.0)]) + ramp_series
    assert predict_moving_average(series, 2030).prediction == pytest.approx(28.0)


def test_moving_average_short_window_divisor():
    series = make_series([(2020, 26.0, 26.0), (2021, 26.3, 26.3), (2022, 26.6, 26.6)])
    forecast = predict_moving_average(series, 2024)
    assert forecast.window_size == 3
    assert forecast.yearly_change == pytest.approx(0.3)
    assert forecast.prediction == pytest.approx(26.3 + 0.3 * 2)


def test_moving_average_single_record_is_flat():
    forecast = predict_moving_average(make_series([(2022, 26.8, 26.7)]), 2030)
    assert forecast.yearly_change == 0.0
    assert forecast.prediction == pytest.approx(26.7)


# ---------------------------------------------------------------------------
# Trend line
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("target", [2023, 2024, 2027, 2030, 2033, 2051, 2100])
@pytest.mark.parametrize("model", [POLYNOMIAL, MOVING_AVERAGE])
def test_trend_line_endpoints(ramp_series, model, target):
    line = generate_trend_line(ramp_series, 99.0, target, model)
    assert line[0] == ("2022", 26.8)
    assert line[-1][0] == str(target)


def test_trend_line_steps_and_final_point(ramp_series):
    line = generate_trend_line(ramp_series, 28.6, 2033, MOVING_AVERAGE)
    assert [label for label, _ in line] == ["2022", "2025", "2028", "2031", "2033"]
    assert line[1][1] == pytest.approx(predict_moving_average(ramp_series, 2025).prediction)
    assert line[-1][1] == 28.6


def test_trend_line_exact_step_does_not_duplicate_target(ramp_series):
    line = generate_trend_line(ramp_series, 28.0, 2030, MOVING_AVERAGE)
    assert [label for label, _ in line] == ["2022", "2024", "2026", "2028", "2030"]
    assert line[-1][1] == pytest.approx(28.0)


def test_trend_line_target_equals_last_year(ramp_series):
    assert generate_trend_line(ramp_series, 26.8, 2022, POLYNOMIAL) == (("2022", 26.8),)


def test_trend_line_target_before_last_year(ramp_series):
    line = generate_trend_line(ramp_series, 26.0, 2020, MOVING_AVERAGE)
    assert line == (("2022", 26.8), ("2020", 26.0))


def test_trend_line_unknown_model(ramp_series):
    with pytest.raises(ValueError):
        generate_trend_line(ramp_series, 26.0, 2030, "arima")


# ---------------------------------------------------------------------------
# Validation against history
# ---------------------------------------------------------------------------
def test_validate_bounds_inclusive():
    series = make_series([(2020, 26.0, 26.5), (2021, 27.0, 26.5), (2022, 26.5, 26.5)])
    check = validate_against_history(28.5, series)
    assert check.in_range
    assert check.allowed_max == 28.5
    assert check.allowed_min == 24.5
    assert validate_against_history(24.5, series).in_range
    assert not validate_against_history(28.5 + 1e-9, series).in_range
    assert not validate_against_history(24.5 - 1e-9, series).in_range


def test_validate_uses_annual_mean_not_smooth():
    series = make_series([(2021, 26.0, 20.0), (2022, 26.0, 30.0)])
    check = validate_against_history(27.6, series)
    assert check.observed_max == 26.0
    assert not check.in_range


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------
def test_invalid_year_rejected_before_computation(ramp_series, monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("should not compute")

    monkeypatch.setattr(prediction, "fit_polynomial", boom)
    monkeypatch.setattr(prediction, "predict_moving_average", boom)

    result = run_simulation(ramp_series, PredictionRequest(model=POLYNOMIAL, target_year=2020))
    assert result.status == SimulationStatus.INVALID_YEAR
    assert result.prediction == 0.0
    assert result.error == "Please select a year from 2024 onwards for predictions."
    assert result.explanation == ("Invalid year selected",)
    assert result.trend_line == ()


def test_first_forecast_year_accepted(ramp_series):
    result = run_simulation(ramp_series, PredictionRequest(model=MOVING_AVERAGE, target_year=2024))
    assert result.status == SimulationStatus.OK


def test_moving_average_simulation(ramp_series):
    result = run_simulation(ramp_series, PredictionRequest(model=MOVING_AVERAGE, target_year=2030))
    assert result.status == SimulationStatus.OK
    assert result.prediction == pytest.approx(28.0)
    assert result.warning is None
    assert result.error is None
    assert result.explanation[0] == "Prediction Model: 5-Year Moving Average"
    assert "Target Year: 2030" in result.explanation
    assert "Predicted Temperature: 28.00°C" in result.explanation
    assert "Last 5 years average: 26.40°C" in result.explanation
    assert "Rate of change: +0.2000°C per year" in result.explanation
    assert result.trend_line[-1][0] == "2030"


def test_polynomial_simulation_trend_is_increasing(warming_series):
    result = run_simulation(warming_series, PredictionRequest(model=POLYNOMIAL, target_year=2035))
    assert result.status == SimulationStatus.OK
    assert result.explanation[0] == "Prediction Model: Polynomial Regression (2nd degree)"
    assert any(line.startswith("Mathematical Model: y = ") for line in result.explanation)
    assert any(line.startswith("Model Accuracy (R²): ") for line in result.explanation)

    temps = [temp for _, temp in result.trend_line]
    assert result.trend_line[0][0] == "2022"
    assert result.trend_line[-1] == ("2035", result.prediction)
    assert all(later > earlier for earlier, later in zip(temps, temps[1:]))


def test_out_of_range_keeps_trend_line_by_default(ramp_series):
    result = run_simulation(ramp_series, PredictionRequest(model=MOVING_AVERAGE, target_year=2060))
    assert result.prediction == pytest.approx(26.4 + 0.2 * 38)
    assert result.status == SimulationStatus.OUT_OF_RANGE
    assert "outside our historical observations" in result.warning
    assert "Allowed Range: 24.50°C to 28.30°C" in result.warning
    assert result.trend_line[-1][0] == "2060"


def test_out_of_range_can_suppress_trend_line(ramp_series):
    result = run_simulation(ramp_series, PredictionRequest(model=MOVING_AVERAGE, target_year=2060),
                            suppress_trend_when_out_of_range=True)
    assert result.status == SimulationStatus.OUT_OF_RANGE
    assert result.warning
    assert result.trend_line == ()
    assert result.explanation


def test_numeric_failure_becomes_calculation_error(ramp_series, monkeypatch):
    def singular(*args, **kwargs):
        raise np.linalg.LinAlgError("singular matrix")

    monkeypatch.setattr(prediction, "fit_polynomial", singular)
    result = run_simulation(ramp_series, PredictionRequest(model=POLYNOMIAL, target_year=2030))
    assert result.status == SimulationStatus.CALCULATION_ERROR
    assert result.error == "Calculation error occurred"
    assert result.prediction == 0.0


def test_unknown_model_is_a_programming_error(ramp_series):
    with pytest.raises(ValueError):
        run_simulation(ramp_series, PredictionRequest(model="arima", target_year=2030))
