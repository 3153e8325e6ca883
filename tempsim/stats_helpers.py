"""Reusable statistics computation helpers."""
import pandas as pd


def descriptive_stats(series):
    """Compute descriptive statistics for a numeric series."""
    series = pd.Series(series, dtype=float)
    if series.empty:
        return {"count": 0, "mean": 0.0, "median": 0.0, "std": 0.0, "min": 0.0, "max": 0.0}
    return {
        "count": len(series),
        "mean": series.mean(),
        "median": series.median(),
        "std": series.std() if len(series) > 1 else 0.0,
        "min": series.min(),
        "max": series.max(),
    }


def adjusted_r_squared(r2, n, predictors):
    """Penalize R-squared for model complexity.

    Returns ``(value, adjusted)``. With ``n - predictors - 1 <= 0`` the
    correction is undefined, so the unadjusted value comes back with
    ``adjusted=False``.
    """
    dof = n - predictors - 1
    if dof <= 0:
        return r2, False
    return 1 - (1 - r2) * (n - 1) / dof, True


def warming_per_decade(years, temps):
    """Average change per decade between the first and last observation."""
    years = list(years)
    temps = list(temps)
    if len(years) < 2 or years[-1] == years[0]:
        return 0.0
    return (temps[-1] - temps[0]) / (years[-1] - years[0]) * 10
