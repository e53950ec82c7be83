"""Configuration for the backyard ultra analytics package.

Runtime settings come from the environment (prefix ``BYU_``) through
Pydantic Settings. Analysis constants that shape the charts live here too so
the CLI, the dashboard and the tests share one source.
"""

import sys
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Lap split threshold (minutes) for the cohort fatigue analysis
THRESHOLD_MINUTES = 55.0

EMA_WINDOW = 6

# Valid y range of the lap chart, in minutes
CHART_MIN_MINUTES = 30.0
CHART_MAX_MINUTES = 60.0

# Overlays are suppressed as more runners are selected
TREND_MAX_RUNNERS = 3
BAND_MAX_RUNNERS = 2


class Terrain(str, Enum):
    """Course terrain of a section."""

    TRAIL = "Trail"
    ROAD = "Road"


EXCEPTION_LABEL = "Road — exception"

# edition -> {section number: (terrain, label)}
# 2025 section 3 ran on the road loop because of rain.
SECTION_OVERRIDES: Dict[str, Dict[int, tuple]] = {
    "2025": {3: (Terrain.ROAD, EXCEPTION_LABEL)},
}


class Settings(BaseSettings):
    """Runtime settings with validation."""

    model_config = SettingsConfigDict(env_prefix="BYU_", env_file=".env", extra="ignore")

    data_root: Path = Field(default=PROJECT_ROOT, description="Directory holding data_<edition> folders")
    editions: List[str] = Field(default_factory=lambda: ["2025", "2023"])
    default_edition: str = Field(default="2025")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
