"""Centralized configuration loading.

Loads environment variables once and provides a typed Settings object
for the rest of the codebase. Values are read from the process
environment (and a local .env file, if present) at import time.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from dotenv import load_dotenv


# Load .env once at import time
load_dotenv()

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass
class Settings:
    # Data provider
    api_base: str = os.getenv("FOLKLORE_API_BASE", "http://localhost:8000")
    request_timeout: Optional[float] = _optional_float(
        os.getenv("FOLKLORE_REQUEST_TIMEOUT")
    )

    # Identity provider
    auth_base: str = os.getenv("FOLKLORE_AUTH_BASE", "http://localhost:8000/api/auth")
    session_file: str = os.getenv(
        "FOLKLORE_SESSION_FILE", os.path.join(_PROJECT_ROOT, ".folklore_user.json")
    )

    # Table pagination
    items_per_page: int = int(os.getenv("FOLKLORE_ITEMS_PER_PAGE", "20"))
    prefetch_pages: int = int(os.getenv("FOLKLORE_PREFETCH_PAGES", "5"))
    prefetch_page_size: int = int(os.getenv("FOLKLORE_PREFETCH_PAGE_SIZE", "20"))

    # Map time slider
    map_start_year: int = int(os.getenv("FOLKLORE_MAP_START_YEAR", "1960"))
    map_time_window: int = int(os.getenv("FOLKLORE_MAP_TIME_WINDOW", "500"))
    map_end_year: int = datetime.now().year

    # Logging
    log_level: str = os.getenv("FOLKLORE_LOG_LEVEL", "INFO")


def get_settings() -> Settings:
    """Return a new Settings instance (cheap dataclass construction)."""
    return Settings()
