"""
Configuration validation and factory module.
Ensures configuration integrity and provides environment-specific config instances.
"""

import os
from functools import lru_cache
from typing import Dict, List, Type

from .base_config import BaseConfig, Environment
from .environments.development import DevelopmentConfig
from .environments.production import ProductionConfig
from .environments.testing import TestingConfig


class ConfigurationError(Exception):
    """Configuration-related error."""
    pass


CONFIG_CLASSES: Dict[Environment, Type[BaseConfig]] = {
    Environment.DEVELOPMENT: DevelopmentConfig,
    Environment.TESTING: TestingConfig,
    Environment.PRODUCTION: ProductionConfig,
}


class ConfigValidator:
    """Configuration validation utility."""

    @staticmethod
    def validate_required_settings(config: BaseConfig) -> List[str]:
        """
        Validate settings that must be provided outside development.
        Returns list of problems found.
        """
        problems = []

        if config.ENVIRONMENT == Environment.PRODUCTION:
            if not config.SECRET_KEY or "change-in-production" in config.SECRET_KEY:
                problems.append("SECRET_KEY must be set in production")
            if not config.DATABASE_URL or config.DATABASE_URL.startswith("sqlite"):
                problems.append("DATABASE_URL must point at Postgres in production")

        return problems

    @staticmethod
    def validate_network_settings(config: BaseConfig) -> List[str]:
        """
        Validate network-related settings.
        Returns list of validation errors.
        """
        errors = []

        if not (1 <= config.PORT <= 65535):
            errors.append(f"Invalid port number: {config.PORT}")

        for name, url in (
            ("JOBS_SERVICE_URL", config.JOBS_SERVICE_URL),
            ("PROFILE_SERVICE_URL", config.PROFILE_SERVICE_URL),
        ):
            if not url.startswith(("http://", "https://")):
                errors.append(f"{name} must be an http(s) URL: {url}")

        if config.SERVICE_TIMEOUT_SECONDS <= 0:
            errors.append("SERVICE_TIMEOUT_SECONDS must be positive")

        return errors

    @classmethod
    def validate(cls, config: BaseConfig) -> None:
        """Run every check and raise ConfigurationError listing all problems."""
        problems = cls.validate_required_settings(config) + cls.validate_network_settings(config)
        if problems:
            raise ConfigurationError("; ".join(problems))


def load_config(environment: str) -> BaseConfig:
    """Instantiate and validate the config class for ``environment``."""
    try:
        env = Environment(environment.lower())
    except ValueError as e:
        raise ConfigurationError(f"Unknown ENVIRONMENT: {environment}") from e

    # Pinned so an ENVIRONMENT env var cannot relabel the class being validated
    config = CONFIG_CLASSES[env](ENVIRONMENT=env)
    ConfigValidator.validate(config)
    return config


@lru_cache()
def get_config() -> BaseConfig:
    """Cached configuration for the environment named by ENVIRONMENT."""
    return load_config(os.getenv("ENVIRONMENT", Environment.DEVELOPMENT.value))
