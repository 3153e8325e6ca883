import pytest

from tempsim.config import Settings
from tempsim.prediction import ObservedYear


def make_series(rows):
    return tuple(ObservedYear(year=y, annual_mean=a, five_year_smooth=s) for y, a, s in rows)


@pytest.fixture
def ramp_series():
    """Five years rising 0.2°C per year in both columns."""
    return make_series([
        (2018, 26.0, 26.0),
        (2019, 26.2, 26.2),
        (2020, 26.4, 26.4),
        (2021, 26.6, 26.6),
        (2022, 26.8, 26.8),
    ])


def convex_smooth(year):
    x = year - 1900
    return 25.0 + 0.0002 * x * x + 0.005 * x


@pytest.fixture
def warming_series():
    """1901-2022 on an exact, increasing quadratic."""
    return make_series([(y, convex_smooth(y), convex_smooth(y)) for y in range(1901, 2023)])


@pytest.fixture(autouse=True)
def clear_settings(monkeypatch):
    for name in ("TEMPSIM_SUPABASE_URL", "TEMPSIM_SUPABASE_KEY", "TEMPSIM_ACCESS_TOKEN", "TEMPSIM_TABLE",
                 "TEMPSIM_CSV_PATH", "TEMPSIM_TIMEOUT", "TEMPSIM_CHART_STRIDE",
                 "TEMPSIM_SUPPRESS_TREND_OUT_OF_RANGE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    Settings.load.cache_clear()
    yield
    Settings.load.cache_clear()
