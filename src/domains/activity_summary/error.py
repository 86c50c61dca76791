from utils.error.base_custom_error import BaseCustomError, ErrorCode


class ActivitySummaryError(BaseCustomError):
    """Base class for all activity summary errors."""

    default_code = ErrorCode.INTERNAL_ERROR


class ProcessingDataRequiredError(ActivitySummaryError):
    """Raised when a summary is requested without processing data."""

    default_code = ErrorCode.DATA_MISSING

    def __init__(self):
        super().__init__("processing data is required")


class ActivityValidationError(ActivitySummaryError):
    """Raised when a raw issue payload cannot become an Activity."""

    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, key: str | None = None, field: str | None = None, cause: Exception | None = None):
        super().__init__(message, cause=cause, key=key or "unknown", field=field or "unknown")
        self.key = key
        self.field = field


class ActivityLoadError(ActivitySummaryError):
    """Raised when an activities file cannot be read or has an unexpected layout."""

    default_code = ErrorCode.PARSE_ERROR

    def __init__(self, file_path: str, reason: str, cause: Exception | None = None):
        super().__init__(f"Failed to load activities from '{file_path}': {reason}", cause=cause, file_path=file_path)
        self.file_path = file_path
