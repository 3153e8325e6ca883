"""Configuration management and logging setup for the simulation dashboard."""
from dataclasses import dataclass
from functools import lru_cache
import logging
import os
from pathlib import Path
from typing import Optional

from tempsim.constants import TEMPERATURE_TABLE

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Application settings."""
    supabase_url: str = ""
    supabase_key: str = ""
    access_token: Optional[str] = None
    table: str = TEMPERATURE_TABLE
    csv_path: Optional[Path] = None
    timeout: int = 30
    log_level: str = "INFO"
    log_format: str = LOG_FORMAT
    chart_stride: int = 10
    suppress_trend_when_out_of_range: bool = False

    @classmethod
    @lru_cache(maxsize=1)
    def load(cls) -> "Settings":
        """Load settings from the environment and defaults."""
        csv_path = os.getenv("TEMPSIM_CSV_PATH")
        return cls(
            supabase_url=os.getenv("TEMPSIM_SUPABASE_URL", "").rstrip("/"),
            supabase_key=os.getenv("TEMPSIM_SUPABASE_KEY", ""),
            access_token=os.getenv("TEMPSIM_ACCESS_TOKEN") or None,
            table=os.getenv("TEMPSIM_TABLE", TEMPERATURE_TABLE),
            csv_path=Path(csv_path) if csv_path else None,
            timeout=int(os.getenv("TEMPSIM_TIMEOUT", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            chart_stride=max(1, int(os.getenv("TEMPSIM_CHART_STRIDE", "10"))),
            suppress_trend_when_out_of_range=_env_flag("TEMPSIM_SUPPRESS_TREND_OUT_OF_RANGE"),
        )


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure the package logger once per process."""
    logger = logging.getLogger("tempsim")
    logger.setLevel(settings.log_level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.log_format))
        logger.addHandler(handler)

    return logger
