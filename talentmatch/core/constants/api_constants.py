"""
API-related constants for standardized responses.
"""


class APIConstants:
    """API response constants and standardized messages."""

    API_VERSION = "1.0"

    SUCCESS_DEFAULT = "Operation completed successfully"
    MATCH_COMPLETED = "Match completed successfully"
    APPLICATION_CREATED = "Application created successfully"
    APPLICATION_RETRIEVED = "Application retrieved successfully"
    APPLICATIONS_RETRIEVED = "Applicants retrieved successfully"
    SUMMARY_RETRIEVED = "Application summary retrieved successfully"
    STATUS_UPDATED = "Application status updated successfully"
    BULK_STATUS_UPDATED = "Bulk status update processed"
    REMATCH_COMPLETED = "Application re-matched successfully"


class ResponseFields:
    """Standard field names used in API responses."""

    SUCCESS = "success"
    MESSAGE = "message"
    DATA = "data"
    META = "meta"
    ERROR = "error"
    ERROR_CODE = "code"
    ERROR_MESSAGE = "message"
    ERROR_DETAILS = "details"
    TIMESTAMP = "timestamp"
    CORRELATION_ID = "correlation_id"
    VERSION = "version"
