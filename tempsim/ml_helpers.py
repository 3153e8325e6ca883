"""Regression model construction and evaluation wrappers."""
import numpy as np
from sklearn.linear_model import LinearRegression
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import PolynomialFeatures


def polynomial_model(degree=2):
    """Build an unfitted polynomial regression pipeline (no bias column; the intercept lives in LinearRegression)."""
    return make_pipeline(PolynomialFeatures(degree, include_bias=False), LinearRegression())


def polynomial_coefficients(model):
    """Return (highest-order, ..., linear, intercept) coefficients of a fitted polynomial pipeline."""
    linear = model[-1]
    return tuple(float(c) for c in linear.coef_[::-1]) + (float(linear.intercept_),)


def regression_metrics(y_true, y_pred):
    """Compute regression metrics; R-squared is 0.0 when fewer than two points are available."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if len(y_true) == 0:
        return {"mse": 0.0, "rmse": 0.0, "mae": 0.0, "r2": 0.0}
    mse = mean_squared_error(y_true, y_pred)
    return {
        "mse": float(mse),
        "rmse": float(np.sqrt(mse)),
        "mae": float(mean_absolute_error(y_true, y_pred)),
        "r2": float(r2_score(y_true, y_pred)) if len(y_true) >= 2 else 0.0,
    }
