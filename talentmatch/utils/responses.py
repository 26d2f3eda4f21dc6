"""
Standardized API response utilities.

Every endpoint returns the same envelope, so the UI can read ``success``,
``data`` and ``error`` without knowing which operation produced them.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder

from talentmatch.core.constants import (
    APIConstants,
    ErrorCodes,
    ErrorMessages,
    ResponseFields,
)
from talentmatch.core.monitoring.correlation_tracker import get_current_correlation_id


class APIResponse:
    """
    Standardized API response builder.

    Provides consistent response format across all API endpoints with
    correlation IDs and metadata.
    """

    @staticmethod
    def success(
        data: Any = None,
        message: str = APIConstants.SUCCESS_DEFAULT,
        meta: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a standardized success response.

        Args:
            data: Response data (pydantic models are dumped by alias)
            message: Success message
            meta: Additional metadata
            correlation_id: Request correlation ID

        Returns:
            Standardized success response dictionary
        """
        return {
            ResponseFields.SUCCESS: True,
            ResponseFields.MESSAGE: message,
            ResponseFields.DATA: jsonable_encoder(data, by_alias=True) if data is not None else None,
            ResponseFields.META: meta or {},
            ResponseFields.TIMESTAMP: datetime.now(timezone.utc).isoformat(),
            ResponseFields.CORRELATION_ID: correlation_id or str(uuid.uuid4()),
            ResponseFields.VERSION: APIConstants.API_VERSION,
        }

    @staticmethod
    def error(
        error_code: str,
        message: Optional[str] = None,
        details: Any = None,
        correlation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a standardized error response.

        Args:
            error_code: Standardized error code
            message: Error message (looked up from the code if not provided)
            details: Additional error details
            correlation_id: Request correlation ID

        Returns:
            Standardized error response dictionary
        """
        if not message:
            message = ErrorMessages.get_message(error_code)

        return {
            ResponseFields.SUCCESS: False,
            ResponseFields.ERROR: {
                ResponseFields.ERROR_CODE: error_code,
                ResponseFields.ERROR_MESSAGE: message,
                ResponseFields.ERROR_DETAILS: jsonable_encoder(details) if details is not None else None,
            },
            ResponseFields.TIMESTAMP: datetime.now(timezone.utc).isoformat(),
            ResponseFields.CORRELATION_ID: correlation_id or str(uuid.uuid4()),
            ResponseFields.VERSION: APIConstants.API_VERSION,
        }

    @staticmethod
    def validation_error(
        validation_errors: Any, correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create a standardized request validation error response."""
        return APIResponse.error(
            error_code=ErrorCodes.VALIDATION_INVALID_REQUEST,
            message="Request validation failed",
            details={"validation_errors": validation_errors},
            correlation_id=correlation_id,
        )


class ResponseHelper:
    """Helpers shared by the endpoint modules."""

    @staticmethod
    def get_correlation_id(request: Optional[Request] = None) -> str:
        """Correlation id of the current request, generating one if absent."""
        correlation_id = get_current_correlation_id()
        if correlation_id:
            return correlation_id
        if request is not None:
            header_value = request.headers.get("X-Correlation-ID")
            if header_value:
                return header_value
        return str(uuid.uuid4())


def success_response(
    data: Any = None,
    message: str = APIConstants.SUCCESS_DEFAULT,
    meta: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Convenience function for creating success responses."""
    return APIResponse.success(data, message, meta, correlation_id)

