"""
Testing environment configuration.
Optimized for automated testing with fast execution and isolation.
"""

from typing import List

from ..base_config import BaseConfig, Environment, LogLevel


class TestingConfig(BaseConfig):
    """
    Testing environment configuration.

    Features:
    - In-memory database for isolation
    - Mock service URLs
    - Minimal logging to reduce noise
    - Small batches so chunked scoring is exercised
    """

    __test__ = False  # not a pytest test class

    ENVIRONMENT: Environment = Environment.TESTING
    DEBUG: bool = False

    LOG_LEVEL: LogLevel = LogLevel.WARNING
    LOG_JSON: bool = False

    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False

    SECRET_KEY: str = "test-secret-key-not-for-production"

    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    CREATE_TABLES_ON_STARTUP: bool = False

    JOBS_SERVICE_URL: str = "http://mock-jobs-service"
    PROFILE_SERVICE_URL: str = "http://mock-profile-service"
    SERVICE_TIMEOUT_SECONDS: float = 2.0

    MATCH_MAX_CONCURRENCY: int = 2
    MATCH_CHUNK_SIZE: int = 3
