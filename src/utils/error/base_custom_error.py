from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes shared by every domain."""

    CONFIG_INVALID = "CONFIG_INVALID"
    DATA_INVALID = "DATA_INVALID"
    DATA_MISSING = "DATA_MISSING"
    PARSE_ERROR = "PARSE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    API_TIMEOUT = "API_TIMEOUT"
    API_RATE_LIMIT = "API_RATE_LIMIT"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN = "UNKNOWN"


RETRYABLE_CODES = frozenset(
    {
        ErrorCode.API_TIMEOUT,
        ErrorCode.API_RATE_LIMIT,
        ErrorCode.API_SERVER_ERROR,
        ErrorCode.NETWORK_ERROR,
        ErrorCode.TIMEOUT_ERROR,
    }
)


class BaseCustomError(Exception):
    """Base class for custom exceptions with a code, an optional cause and metadata support."""

    default_code = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        cause: Exception | None = None,
        **metadata,
    ):
        """Initializes the exception with a message and optional metadata.

        :param message: Human readable error message.
        :param code: Machine-readable code; falls back to the class default.
        :param cause: Underlying exception, if any.
        :param metadata: Additional context or metadata for debugging.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.cause = cause
        self.metadata = metadata

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "retryable": self.retryable,
            "metadata": {k: str(v) for k, v in self.metadata.items()},
        }

    def __str__(self):
        text = f"{self.code.value}: {self.message}"
        if self.cause is not None:
            text = f"{text} (caused by: {self.cause})"
        if self.metadata:
            metadata_info = ", ".join(f"{k}={v}" for k, v in self.metadata.items())
            text = f"{text} | Metadata: {metadata_info}"
        return text
