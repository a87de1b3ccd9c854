# /webbot/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


class Settings(BaseModel):
    API_KEY: str | None = os.getenv("API_KEY")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Fetching
    DEFAULT_TIMEOUT_SECONDS: float = float(os.getenv("DEFAULT_TIMEOUT_SECONDS", "30"))
    DELAY_BETWEEN_FETCHES_SECONDS: float = float(os.getenv("DELAY_BETWEEN_FETCHES_SECONDS", "0"))
    FORCE_HTTPS: bool = os.getenv("FORCE_HTTPS", "false").lower() == "true"
    USER_AGENT: str = os.getenv("USER_AGENT", "webbot/1.0 (+https://github.com/webbot)")

    # Response safety
    MAX_BYTES: int = int(os.getenv("MAX_BYTES", "2097152"))  # 2 MB

    # Extraction / storage
    INCLUDE_RAW_FIELD_VALUES: bool = os.getenv("INCLUDE_RAW_FIELD_VALUES", "false").lower() == "true"
    STORE_DIR: str = os.getenv("STORE_DIR", "./data/")

    # Celery / Redis
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    RESULT_TTL_SECONDS: int = int(os.getenv("RESULT_TTL_SECONDS", "86400"))


settings = Settings()
