"""
Application configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Settings from environment variables"""

    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "crease.db")

    # Comma-separated extra origins for the scoring frontends
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Match defaults
    DEFAULT_OVERS: int = int(os.getenv("DEFAULT_OVERS", "20"))


settings = Settings()
