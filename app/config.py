#config.py
import os
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from typing import List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")
    # Application Settings
    APP_NAME: str = "Vet Clinic API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True  # Can disable in production
    API_PREFIX: str = ""  # e.g. "/api" when served behind the website

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Database Settings
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./vetclinic.db")
    DB_TIMEOUT_SECONDS: float = 10.0  # pool checkout, connect and statement timeout
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    SEED_ON_STARTUP: bool = False

    # Booking Settings
    BOOKING_CODE_PREFIX: str = "BK"
    BOOKING_CODE_MAX_ATTEMPTS: int = 50

    # CORS Settings (accept comma-separated strings to avoid JSON parsing in env)
    ALLOWED_ORIGINS: str = os.environ.get("ALLOWED_ORIGINS", "*")
    CORS_ALLOW_CREDENTIALS: bool = True

    # Middleware settings
    GZIP_MIN_SIZE: int = 500  # bytes

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Accept comma-separated strings for list envs in addition to JSON arrays
    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    s = Settings()
    # Normalize ALLOWED_ORIGINS if provided as comma-separated string env var CORS_ORIGINS
    cors_env = os.environ.get("CORS_ORIGINS")
    if cors_env:
        s.ALLOWED_ORIGINS = cors_env
    return s

settings: Settings = get_settings()
