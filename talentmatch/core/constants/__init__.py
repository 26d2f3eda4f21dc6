"""
Centralized constants for the matching engine: API responses, business
rules, scoring defaults and error codes.
"""

from .api_constants import APIConstants, ResponseFields
from .business_constants import BusinessRules, ProcessingLimits, ScoringDefaults
from .error_constants import ErrorCodes, ErrorMessages

__all__ = [
    "APIConstants",
    "ResponseFields",
    "BusinessRules",
    "ProcessingLimits",
    "ScoringDefaults",
    "ErrorCodes",
    "ErrorMessages",
]
