import os
from pathlib import Path

# Basic settings helper to read environment configuration.

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "campus_coffee.db"


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    return float(val)


class Settings:
    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")
        self.OSM_API_BASE_URL: str = os.getenv(
            "OSM_API_BASE_URL", "https://api.openstreetmap.org/api/0.6"
        )
        self.OSM_TIMEOUT_SECONDS: float = _as_float(os.getenv("OSM_TIMEOUT_SECONDS"), 10.0)
        self.OSM_USER_AGENT: str = os.getenv("OSM_USER_AGENT", "campus-coffee/0.1")
        self.OSM_FIXTURES_ENABLED: bool = _as_bool(os.getenv("OSM_FIXTURES_ENABLED"), True)


settings = Settings()
