from functools import lru_cache
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings read from the environment (or a local .env file)"""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_title: str = "Ride Ledger - Shared Car Expenses"
    database_url: str = "sqlite:///./ride_ledger.db"
    # JSON list in the environment, e.g. PARTICIPANTS='["Anne", "Bram", "Cas"]'
    participants: List[str] = Field(default_factory=lambda: ["Anne", "Bram"])
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
