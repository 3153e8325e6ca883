"""Historical temperature data access: explicit source handles and record parsing."""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import pandas as pd
import requests

from tempsim.config import Settings
from tempsim.constants import FEED_COLUMNS, TEMPERATURE_TABLE
from tempsim.prediction import ObservedYear

logger = logging.getLogger(__name__)


class TemperatureDataError(Exception):
    """Base exception for temperature data access."""


class DataFetchError(TemperatureDataError):
    """Raised when the data source is unavailable or returns an error."""


class EmptyDatasetError(TemperatureDataError):
    """Raised when a fetch succeeds but returns no records."""


def parse_records(rows: Iterable[Dict[str, Any]]) -> Tuple[ObservedYear, ...]:
    """Convert feed rows into a sorted, de-duplicated series.

    ``year`` may arrive as text. A later row for an already seen year
    replaces the earlier one.
    """
    by_year = {}
    try:
        for row in rows:
            record = ObservedYear(
                year=int(str(row["year"]).strip()),
                annual_mean=float(row["annual_mean"]),
                five_year_smooth=float(row["five_year_smooth"]),
            )
            if not (math.isfinite(record.annual_mean) and math.isfinite(record.five_year_smooth)):
                raise ValueError(f"missing temperature for {record.year}")
            by_year[record.year] = record
    except (KeyError, TypeError, ValueError) as e:
        raise DataFetchError(f"Invalid temperature record format: {e}") from e
    return tuple(by_year[year] for year in sorted(by_year))


def series_frame(series) -> pd.DataFrame:
    """Return the series as a DataFrame with feed column names."""
    return pd.DataFrame(
        [(r.year, r.annual_mean, r.five_year_smooth) for r in series],
        columns=FEED_COLUMNS,
    )


class TemperatureSource:
    """Data-access handle. Open before fetching, close when the session is done."""

    def __init__(self):
        self._opened = False

    def __enter__(self) -> "TemperatureSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        self._opened = True

    def close(self) -> None:
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    def fetch(self) -> Tuple[ObservedYear, ...]:
        if not self._opened:
            raise DataFetchError(f"{type(self).__name__} is not open")
        return self._fetch()

    def _fetch(self) -> Tuple[ObservedYear, ...]:
        raise NotImplementedError


class RestTemperatureSource(TemperatureSource):
    """Reads the temperature table through a PostgREST-style endpoint."""

    def __init__(self, base_url: str, api_key: str, table: str = TEMPERATURE_TABLE,
                 access_token: Optional[str] = None, timeout: int = 30):
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.access_token = access_token
        self.timeout = timeout
        self._session: Optional[requests.Session] = None

    @property
    def url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def open(self) -> None:
        if not self.base_url:
            raise DataFetchError("No data source URL configured")
        self._session = requests.Session()
        self._session.headers.update({
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Accept": "application/json",
        })
        super().open()

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        super().close()

    def _fetch(self) -> Tuple[ObservedYear, ...]:
        params = {"select": "*", "order": "year.asc"}
        logger.info("Fetching %s", self.url)
        try:
            resp = self._session.get(self.url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            rows = resp.json()
        except requests.RequestException as e:
            raise DataFetchError(f"Failed to fetch temperature data: {e}") from e
        except ValueError as e:
            raise DataFetchError(f"Temperature data response was not JSON: {e}") from e

        if not isinstance(rows, list):
            raise DataFetchError("Temperature data response was not a list of records")
        return parse_records(rows)


class CsvTemperatureSource(TemperatureSource):
    """Reads a CSV snapshot exported from the temperature table."""

    def __init__(self, path):
        super().__init__()
        self.path = Path(path)

    def _fetch(self) -> Tuple[ObservedYear, ...]:
        logger.info("Reading %s", self.path)
        try:
            df = pd.read_csv(self.path, dtype={"year": str})
        except pd.errors.EmptyDataError:
            return ()
        except (OSError, ValueError) as e:
            raise DataFetchError(f"Failed to read {self.path}: {e}") from e

        missing = [c for c in FEED_COLUMNS if c not in df.columns]
        if missing:
            raise DataFetchError(f"{self.path} is missing columns: {', '.join(missing)}")
        return parse_records(df[FEED_COLUMNS].to_dict(orient="records"))


def open_source(settings: Settings) -> TemperatureSource:
    """Build (unopened) the source the settings point at: CSV when configured, REST otherwise."""
    if settings.csv_path is not None:
        return CsvTemperatureSource(settings.csv_path)
    return RestTemperatureSource(
        settings.supabase_url, settings.supabase_key, table=settings.table,
        access_token=settings.access_token, timeout=settings.timeout,
    )


def load_series(source: TemperatureSource) -> Tuple[ObservedYear, ...]:
    """Fetch the series, treating an empty result as an error distinct from a failed fetch."""
    series = source.fetch()
    if not series:
        raise EmptyDatasetError("The temperature data source returned no records")
    logger.info("Loaded %d records (%d-%d)", len(series), series[0].year, series[-1].year)
    return series
