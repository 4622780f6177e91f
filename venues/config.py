"""Application configuration helpers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DATA_SOURCE = str(ROOT_DIR / "data" / "pontevedra.xlsx")
DEFAULT_SHEET_NAMES = ("Sheet1", "Hoja1", "Pontevedra")
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def _csv_env(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    values = tuple(v.strip() for v in raw.split(",") if v.strip())
    return values or default


@dataclass(frozen=True)
class Settings:
    data_source: str = DEFAULT_DATA_SOURCE
    sheet_names: Tuple[str, ...] = DEFAULT_SHEET_NAMES
    http_timeout: float = 30.0
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    data_source = os.getenv("VENUES_DATA_SOURCE", "").strip() or DEFAULT_DATA_SOURCE
    sheet_names = _csv_env("VENUES_SHEET_NAMES", DEFAULT_SHEET_NAMES)
    cors_origins = _csv_env("VENUES_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)

    raw_timeout = os.getenv("VENUES_HTTP_TIMEOUT", "30")
    try:
        http_timeout = float(raw_timeout)
    except ValueError:
        logger.warning("VENUES_HTTP_TIMEOUT=%r is not a number; using 30s.", raw_timeout)
        http_timeout = 30.0

    if data_source == DEFAULT_DATA_SOURCE and not Path(data_source).exists():
        logger.warning("VENUES_DATA_SOURCE is not set and %s does not exist; loading will fail.", data_source)

    return Settings(
        data_source=data_source,
        sheet_names=sheet_names,
        http_timeout=http_timeout,
        cors_origins=cors_origins,
    )
