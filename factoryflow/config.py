"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "FactoryFlow Accounting"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./factoryflow.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Accounting
    ACCOUNTING_TOLERANCE: Decimal = Decimal(
        os.getenv("ACCOUNTING_TOLERANCE", "0.0001")
    )
    MAX_AMOUNT: Decimal = Decimal(os.getenv("MAX_AMOUNT", "999999999"))
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "JOD")

    # Upper bound on records loaded by the integrity verifier
    VERIFICATION_QUERY_LIMIT: int = int(
        os.getenv("VERIFICATION_QUERY_LIMIT", "10000")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
