"""
Core configuration for the service process.

Environment variables:
- APP_NAME / APP_VERSION
- LOG_LEVEL
- CORS_ORIGINS (comma separated, "*" allowed)
- HINDSIGHT_* / MEMORY_* (see core.memory_adapter.config)
"""
from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

# Auto-load .env if present
load_dotenv(dotenv_path=".env", override=False)


class Settings:
    """Process-level settings loader."""

    def __init__(self) -> None:
        # App
        self.APP_NAME: str = os.getenv("APP_NAME", "memory-hindsight")
        self.APP_VERSION: str = os.getenv("APP_VERSION", "0.1.0")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        # CORS
        cors_origins_env = os.getenv("CORS_ORIGINS", "*")
        self.CORS_ORIGINS: List[str] = (
            ["*"]
            if cors_origins_env.strip() == "*"
            else [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
        )


settings = Settings()
