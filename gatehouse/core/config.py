"""
Application configuration, loaded from environment / .env file.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # ── App ──
    app_name: str = "gatehouse"
    app_env: str = "development"
    log_level: str = "INFO"

    # ── Database ──
    # Filesystem path, or ":memory:" for a throwaway store
    database_path: str = "./data/gatehouse.db"
    sqlite_busy_timeout_seconds: float = 5.0

    # ── Facility ──
    # IANA zone used for every staff schedule check
    facility_timezone: str = "Asia/Kolkata"
    delivery_access_ttl_minutes: int = 120

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
