"""
Unified error handling utilities for the matching engine.

Every domain failure is raised as a subclass of ``BaseApplicationError`` so the
API layer can map it 1:1 onto an error code, an HTTP status and a user-facing
message. Bulk operations never raise these per item; they collect them into
per-item outcomes instead.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from talentmatch.core.constants import ErrorCodes, ErrorMessages

logger = logging.getLogger(__name__)


class BaseApplicationError(Exception):
    """
    Base exception class for all application-specific errors.

    Provides structured error information with error codes, correlation IDs,
    and additional context for debugging and user feedback.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCodes.SYSTEM_INTERNAL_ERROR,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
        user_message: Optional[str] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.correlation_id = correlation_id
        self.details = details or {}
        self.original_error = original_error
        self.user_message = user_message or message
        self.timestamp = datetime.now(timezone.utc)

        super().__init__(self.message)


class ValidationError(BaseApplicationError):
    """Malformed candidate or job snapshot. Names the offending field."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Any = None,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if field_name:
            details["field_name"] = field_name
        if field_value is not None:
            details["field_value"] = str(field_value)

        super().__init__(
            message=message,
            error_code=ErrorCodes.VALIDATION_INVALID_FORMAT,
            correlation_id=correlation_id,
            details=details,
        )
        self.field_name = field_name
        self.field_value = field_value


class InvalidArgumentError(BaseApplicationError):
    """Bad batch or query parameter, e.g. ``top_n <= 0``."""

    def __init__(
        self,
        message: str,
        argument_name: Optional[str] = None,
        argument_value: Any = None,
        correlation_id: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if argument_name:
            details["argument_name"] = argument_name
        if argument_value is not None:
            details["argument_value"] = str(argument_value)

        super().__init__(
            message=message,
            error_code=ErrorCodes.VALIDATION_INVALID_ARGUMENT,
            correlation_id=correlation_id,
            details=details,
        )
        self.argument_name = argument_name
        self.argument_value = argument_value


class InvalidTransitionError(BaseApplicationError):
    """Illegal application lifecycle transition."""

    def __init__(
        self,
        current_status: str,
        requested_status: str,
        application_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ):
        details: Dict[str, Any] = {
            "current_status": current_status,
            "requested_status": requested_status,
        }
        if application_id:
            details["application_id"] = application_id

        super().__init__(
            message=ErrorMessages.get_message(
                ErrorCodes.BUSINESS_INVALID_TRANSITION,
                current=current_status,
                requested=requested_status,
            ),
            error_code=ErrorCodes.BUSINESS_INVALID_TRANSITION,
            correlation_id=correlation_id,
            details=details,
        )
        self.current_status = current_status
        self.requested_status = requested_status
        self.application_id = application_id


class ResourceNotFoundError(BaseApplicationError):
    """Exception for resource not found errors."""

    _CODES = {
        "application": ErrorCodes.RESOURCE_APPLICATION_NOT_FOUND,
        "candidate": ErrorCodes.RESOURCE_CANDIDATE_NOT_FOUND,
        "job": ErrorCodes.RESOURCE_JOB_NOT_FOUND,
    }

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ):
        if resource_id:
            message = f"{resource_type} with ID '{resource_id}' not found"
        else:
            message = f"{resource_type} not found"

        super().__init__(
            message=message,
            error_code=self._CODES.get(
                resource_type.lower(), ErrorCodes.RESOURCE_ENDPOINT_NOT_FOUND
            ),
            correlation_id=correlation_id,
            details={"resource_type": resource_type, "resource_id": resource_id},
            user_message=f"The requested {resource_type.lower()} could not be found.",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(BaseApplicationError):
    """Operation conflicts with current state (duplicate application, closed job)."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCodes.BUSINESS_DUPLICATE_APPLICATION,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
        )


class MatchCancelledError(BaseApplicationError):
    """Batch match was cancelled through its cancellation token."""

    def __init__(self, scored: int = 0, total: int = 0, correlation_id: Optional[str] = None):
        super().__init__(
            message=ErrorMessages.get_message(ErrorCodes.PROCESSING_MATCH_CANCELLED),
            error_code=ErrorCodes.PROCESSING_MATCH_CANCELLED,
            correlation_id=correlation_id,
            details={"scored": scored, "total": total},
        )


class BulkOperationError(BaseApplicationError):
    """Every item of a bulk operation failed."""

    def __init__(self, results: List[Dict[str, Any]], correlation_id: Optional[str] = None):
        super().__init__(
            message=ErrorMessages.get_message(ErrorCodes.BUSINESS_BULK_ALL_FAILED),
            error_code=ErrorCodes.BUSINESS_BULK_ALL_FAILED,
            correlation_id=correlation_id,
            details={"results": results},
        )


class ServiceError(BaseApplicationError):
    """Exception for external service-related errors."""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        error_code: str = ErrorCodes.SERVICE_PROFILE_SERVICE_UNAVAILABLE,
        correlation_id: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if service_name:
            details["service_name"] = service_name

        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            original_error=original_error,
            user_message="A dependent service is temporarily unavailable. Please try again later.",
        )
        self.service_name = service_name


class ErrorHandler:
    """
    Centralized error handling utility class.

    Provides methods for error classification, logging, and status mapping.
    """

    _STATUS_CODES = {
        ErrorCodes.VALIDATION_REQUIRED_FIELD_MISSING: 400,
        ErrorCodes.VALIDATION_INVALID_FORMAT: 400,
        ErrorCodes.VALIDATION_INVALID_ARGUMENT: 400,
        ErrorCodes.VALIDATION_INVALID_REQUEST: 422,
        ErrorCodes.RESOURCE_APPLICATION_NOT_FOUND: 404,
        ErrorCodes.RESOURCE_CANDIDATE_NOT_FOUND: 404,
        ErrorCodes.RESOURCE_JOB_NOT_FOUND: 404,
        ErrorCodes.RESOURCE_ENDPOINT_NOT_FOUND: 404,
        ErrorCodes.PROCESSING_MATCH_CANCELLED: 409,
        ErrorCodes.SERVICE_DATABASE_UNAVAILABLE: 503,
        ErrorCodes.SERVICE_PROFILE_SERVICE_UNAVAILABLE: 503,
        ErrorCodes.SERVICE_JOB_SERVICE_UNAVAILABLE: 503,
        ErrorCodes.SYSTEM_INTERNAL_ERROR: 500,
        ErrorCodes.SYSTEM_CONFIGURATION_ERROR: 500,
        ErrorCodes.BUSINESS_DUPLICATE_APPLICATION: 409,
        ErrorCodes.BUSINESS_JOB_CLOSED: 409,
        ErrorCodes.BUSINESS_INVALID_TRANSITION: 409,
        ErrorCodes.BUSINESS_BULK_ALL_FAILED: 422,
    }

    @staticmethod
    def get_status_code(error_code: str) -> int:
        """Map an error code onto an HTTP status code."""
        return ErrorHandler._STATUS_CODES.get(error_code, 500)

    @staticmethod
    def classify_error(error: Exception) -> Dict[str, Any]:
        """
        Classify error and determine appropriate response information.

        Args:
            error: Exception to classify

        Returns:
            Dictionary with error classification information
        """
        if isinstance(error, BaseApplicationError):
            status_code = ErrorHandler.get_status_code(error.error_code)
            return {
                "type": "application_error",
                "error_code": error.error_code,
                "message": error.message,
                "user_message": error.user_message,
                "status_code": status_code,
                "details": error.details,
                "log_level": "error" if status_code >= 500 else "warning",
            }

        return {
            "type": "system_error",
            "error_code": ErrorCodes.SYSTEM_INTERNAL_ERROR,
            "message": ErrorMessages.get_message(ErrorCodes.SYSTEM_INTERNAL_ERROR),
            "user_message": "An unexpected error occurred. Please try again later.",
            "status_code": 500,
            "details": {"error_type": type(error).__name__},
            "log_level": "error",
        }

    @staticmethod
    def log_error(
        error: Exception,
        correlation_id: Optional[str] = None,
        additional_context: Optional[Dict[str, Any]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ) -> None:
        """Log error with the level chosen by ``classify_error``."""
        log = logger_instance or logger
        error_info = ErrorHandler.classify_error(error)

        log_context = {
            "error_type": error_info["type"],
            "error_code": error_info["error_code"],
            "correlation_id": correlation_id,
            "details": error_info["details"],
        }
        if additional_context:
            log_context.update(additional_context)

        log_message = f"Error occurred: {error_info['message']}"
        if error_info["log_level"] == "error":
            log.error(log_message, extra=log_context, exc_info=error)
        else:
            log.warning(log_message, extra=log_context)


def describe_error(error: Exception) -> Dict[str, Any]:
    """Compact, JSON-safe description of an error for per-item bulk outcomes."""
    error_info = ErrorHandler.classify_error(error)
    return {
        "code": error_info["error_code"],
        "message": error_info["message"],
        "details": error_info["details"],
    }
