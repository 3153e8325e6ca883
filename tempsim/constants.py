"""Shared constants: model keys, series colors, labels, forecast bounds."""

POLYNOMIAL = "polynomial"
MOVING_AVERAGE = "moving-average"

MODEL_LABELS = {
    POLYNOMIAL: "Polynomial Regression (2nd degree)",
    MOVING_AVERAGE: "5-Year Moving Average",
}

MODEL_LIST = list(MODEL_LABELS.keys())

SERIES_COLORS = {
    "annual_mean": "rgb(75, 192, 192)",
    "five_year_smooth": "rgb(255, 99, 132)",
    "trend": "rgb(255, 206, 86)",
}

SERIES_LABELS = {
    "year": "Year",
    "annual_mean": "Annual Mean Temperature",
    "five_year_smooth": "5-Year Smooth",
    "trend": "Prediction Trend",
}

TEMPERATURE_UNIT = "°C"

BASE_YEAR = 1900
FIRST_FORECAST_YEAR = 2024
LAST_INPUT_YEAR = 2100
DEFAULT_TARGET_YEAR = 2030

HISTORY_MARGIN = 1.5
MOVING_AVERAGE_WINDOW = 5
TREND_SEGMENTS = 5
POLYNOMIAL_PREDICTORS = 2

Y_AXIS_BASE_MIN = 24
Y_AXIS_BASE_MAX = 28

TEMPERATURE_TABLE = "philippines_temperature_trends"
FEED_COLUMNS = ["year", "annual_mean", "five_year_smooth"]
