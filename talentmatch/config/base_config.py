"""
Base configuration class for the matching engine.
This provides the foundation for environment-specific configurations.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.pool import StaticPool


class Environment(str, Enum):
    """Application environment enumeration."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BaseConfig(BaseSettings):
    """
    Base configuration class containing common settings across all environments.
    Environment-specific configurations should inherit from this class.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Information
    APP_NAME: str = "Talent Match API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = (
        "Candidate-job matching and application lifecycle engine"
    )
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # API Configuration
    API_V1_STR: str = "/api/v1"
    OPENAPI_URL: str = "/api/v1/openapi.json"
    DOCS_URL: str = "/api/v1/docs"
    REDOC_URL: str = "/api/v1/redoc"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # Security Configuration
    SECRET_KEY: str = "development-secret-key-change-in-production"

    # Database Configuration
    POSTGRES_SERVER: str = ""
    POSTGRES_USER: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = ""
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_ECHO: bool = False
    CREATE_TABLES_ON_STARTUP: bool = True

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["GET", "POST", "PUT", "OPTIONS"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # Logging Configuration
    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_JSON: bool = True
    LOG_FILE: Optional[str] = None

    # Service URLs
    JOBS_SERVICE_URL: str = "http://localhost:8001"
    PROFILE_SERVICE_URL: str = "http://localhost:8003"
    SERVICE_TIMEOUT_SECONDS: float = 10.0

    # Matching policy
    MATCH_SKILLS_WEIGHT: float = 0.4
    MATCH_EXPERIENCE_WEIGHT: float = 0.25
    MATCH_LOCATION_WEIGHT: float = 0.15
    MATCH_SALARY_WEIGHT: float = 0.2
    MATCH_EXPERIENCE_GRACE_YEARS: int = 5
    MATCH_SALARY_TOLERANCE_RATIO: float = 0.5
    MATCH_PARTIAL_LOCATION_SCORE: int = 50
    MATCH_DEFAULT_TOP_N: int = 20
    MATCH_MAX_TOP_N: int = 500
    MATCH_MAX_CONCURRENCY: int = 8
    MATCH_CHUNK_SIZE: int = 50
    MATCH_PERSIST_RESULTS: bool = True
    MATCH_PERSIST_MIN_SCORE: int = 0

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info) -> Optional[str]:
        """Build database URL from components if not provided directly."""
        if isinstance(v, str) and v:
            return v

        values = info.data
        user = values.get("POSTGRES_USER")
        password = values.get("POSTGRES_PASSWORD")
        host = values.get("POSTGRES_SERVER")
        port = values.get("POSTGRES_PORT")
        db = values.get("POSTGRES_DB")

        if not (user and host and db):
            # Not enough components; fall back to a local SQLite file
            return "sqlite+aiosqlite:///./talentmatch.db"

        auth = user if password in (None, "") else f"{user}:{password}"
        port_part = f":{port}" if port else ""
        return f"postgresql+asyncpg://{auth}@{host}{port_part}/{db}"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    def get_database_config(self) -> Dict[str, Any]:
        """Get engine keyword arguments for the configured database."""
        config: Dict[str, Any] = {"echo": self.DATABASE_ECHO, "pool_pre_ping": True}
        if ":memory:" in self.DATABASE_URL:
            # One shared connection, otherwise every session sees an empty database
            config.update(
                {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
            )
        elif not self.DATABASE_URL.startswith("sqlite"):
            config.update(
                {
                    "pool_size": self.DATABASE_POOL_SIZE,
                    "max_overflow": self.DATABASE_MAX_OVERFLOW,
                    "pool_timeout": self.DATABASE_POOL_TIMEOUT,
                }
            )
        return config

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration dictionary."""
        return {
            "allow_origins": self.CORS_ORIGINS,
            "allow_credentials": self.CORS_ALLOW_CREDENTIALS,
            "allow_methods": self.CORS_ALLOW_METHODS,
            "allow_headers": self.CORS_ALLOW_HEADERS,
        }

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_testing(self) -> bool:
        return self.ENVIRONMENT == Environment.TESTING
