import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    ATTRACTIONS_TABLE: str = "attractions"
    CATALOG_TTL_SEC: int = 300

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:8081",
    ]

    ROUTE_STORAGE_DIR: str = os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
        "storage",
        "routes",
    )

    # Packing
    DEFAULT_VISIT_MINUTES: int = 60
    AVERAGE_SPEED_KMH: float = 40.0
    TIME_FILL_THRESHOLD: float = 0.9
    MAX_ALTERNATIVES: int = 2

    LOG_LEVEL: str = "INFO"


settings = Settings()
