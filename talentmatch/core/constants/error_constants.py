"""
Error codes and standardized error messages for the matching engine.
"""


class ErrorCodes:
    """Standardized error codes following conventional patterns."""

    # Input Validation (1100-1199)
    VALIDATION_REQUIRED_FIELD_MISSING = "VAL_1101"
    VALIDATION_INVALID_FORMAT = "VAL_1102"
    VALIDATION_INVALID_ARGUMENT = "VAL_1103"
    VALIDATION_INVALID_REQUEST = "VAL_1104"

    # Resource Not Found (1200-1299)
    RESOURCE_APPLICATION_NOT_FOUND = "RES_1201"
    RESOURCE_CANDIDATE_NOT_FOUND = "RES_1202"
    RESOURCE_JOB_NOT_FOUND = "RES_1203"
    RESOURCE_ENDPOINT_NOT_FOUND = "RES_1206"

    # Processing Errors (1300-1399)
    PROCESSING_MATCH_CANCELLED = "PROC_1311"

    # External Service Errors (1400-1499)
    SERVICE_DATABASE_UNAVAILABLE = "SVC_1403"
    SERVICE_PROFILE_SERVICE_UNAVAILABLE = "SVC_1404"
    SERVICE_JOB_SERVICE_UNAVAILABLE = "SVC_1405"

    # System Errors (1500-1599)
    SYSTEM_INTERNAL_ERROR = "SYS_1501"
    SYSTEM_CONFIGURATION_ERROR = "SYS_1504"

    # Business Logic Errors (1600-1699)
    BUSINESS_DUPLICATE_APPLICATION = "BIZ_1602"
    BUSINESS_JOB_CLOSED = "BIZ_1606"
    BUSINESS_INVALID_TRANSITION = "BIZ_1608"
    BUSINESS_BULK_ALL_FAILED = "BIZ_1609"


class ErrorMessages:
    """Standardized error messages corresponding to error codes."""

    VALIDATION_MESSAGES = {
        ErrorCodes.VALIDATION_REQUIRED_FIELD_MISSING: "Required field '{field}' is missing",
        ErrorCodes.VALIDATION_INVALID_FORMAT: "Field '{field}' has invalid value: {details}",
        ErrorCodes.VALIDATION_INVALID_ARGUMENT: "Argument '{argument}' is invalid: {details}",
        ErrorCodes.VALIDATION_INVALID_REQUEST: "Request validation failed",
    }

    RESOURCE_MESSAGES = {
        ErrorCodes.RESOURCE_APPLICATION_NOT_FOUND: "Application with ID '{resource_id}' not found",
        ErrorCodes.RESOURCE_CANDIDATE_NOT_FOUND: "Candidate with ID '{resource_id}' not found",
        ErrorCodes.RESOURCE_JOB_NOT_FOUND: "Job with ID '{resource_id}' not found",
        ErrorCodes.RESOURCE_ENDPOINT_NOT_FOUND: "API endpoint '{endpoint}' not found",
    }

    PROCESSING_MESSAGES = {
        ErrorCodes.PROCESSING_MATCH_CANCELLED: "Batch match was cancelled before completion",
    }

    SERVICE_MESSAGES = {
        ErrorCodes.SERVICE_DATABASE_UNAVAILABLE: "Database service is unavailable",
        ErrorCodes.SERVICE_PROFILE_SERVICE_UNAVAILABLE: "Profile service is temporarily unavailable",
        ErrorCodes.SERVICE_JOB_SERVICE_UNAVAILABLE: "Job service is temporarily unavailable",
    }

    SYSTEM_MESSAGES = {
        ErrorCodes.SYSTEM_INTERNAL_ERROR: "An internal system error occurred",
        ErrorCodes.SYSTEM_CONFIGURATION_ERROR: "System configuration error: {details}",
    }

    BUSINESS_MESSAGES = {
        ErrorCodes.BUSINESS_DUPLICATE_APPLICATION: "Candidate has already applied to this job",
        ErrorCodes.BUSINESS_JOB_CLOSED: "Job is not open for applications",
        ErrorCodes.BUSINESS_INVALID_TRANSITION: "Cannot move application from '{current}' to '{requested}'",
        ErrorCodes.BUSINESS_BULK_ALL_FAILED: "All items in the bulk operation failed",
    }

    DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"

    @classmethod
    def get_message(cls, error_code: str, **kwargs) -> str:
        """Get formatted error message for given error code."""
        all_messages = {
            **cls.VALIDATION_MESSAGES,
            **cls.RESOURCE_MESSAGES,
            **cls.PROCESSING_MESSAGES,
            **cls.SERVICE_MESSAGES,
            **cls.SYSTEM_MESSAGES,
            **cls.BUSINESS_MESSAGES,
        }

        message_template = all_messages.get(error_code, cls.DEFAULT_ERROR_MESSAGE)

        try:
            return message_template.format(**kwargs)
        except KeyError:
            # Missing placeholders: return the template unformatted
            return message_template
