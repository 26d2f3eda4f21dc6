"""
Production environment configuration.
"""

from ..base_config import BaseConfig, Environment, LogLevel


class ProductionConfig(BaseConfig):
    """
    Production environment configuration.

    JSON logs, no debug output, and a Postgres database assembled from the
    POSTGRES_* variables unless DATABASE_URL is provided.
    """

    ENVIRONMENT: Environment = Environment.PRODUCTION
    DEBUG: bool = False

    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_JSON: bool = True

    DOCS_URL: str = ""
    REDOC_URL: str = ""

    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10
    CREATE_TABLES_ON_STARTUP: bool = False
