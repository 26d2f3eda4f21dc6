"""
Development environment configuration.
"""

from typing import List

from ..base_config import BaseConfig, Environment, LogLevel


class DevelopmentConfig(BaseConfig):
    """
    Development environment configuration.

    Human-readable console logs, permissive CORS and a local SQLite database.
    """

    ENVIRONMENT: Environment = Environment.DEVELOPMENT
    DEBUG: bool = True

    LOG_LEVEL: LogLevel = LogLevel.DEBUG
    LOG_JSON: bool = False

    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False
