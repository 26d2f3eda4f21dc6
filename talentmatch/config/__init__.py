from .base_config import BaseConfig, Environment, LogLevel
from .config_validator import ConfigurationError, ConfigValidator, get_config, load_config
from .matching_config import MatchingConfig, MatchWeights, get_matching_config

__all__ = [
    "BaseConfig",
    "Environment",
    "LogLevel",
    "ConfigurationError",
    "ConfigValidator",
    "get_config",
    "load_config",
    "MatchingConfig",
    "MatchWeights",
    "get_matching_config",
]
