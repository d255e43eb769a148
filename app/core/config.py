import os
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # REQUIRED
    BACKEND_API_URL: str

    # App
    APP_NAME: str = "solarops-dashboard"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    INIT_DB_ON_START: bool = True

    # Draft store
    DATABASE_URL: str = "sqlite+aiosqlite:///./drafts.db"

    # Upstream REST backend
    BACKEND_TIMEOUT_SECONDS: float = 10.0

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    class Config:
        case_sensitive = True
        # Load .env ONLY when not production
        env_file = ".env" if os.getenv("ENVIRONMENT") != "production" else None


settings = Settings()
