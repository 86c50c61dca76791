from utils.error.base_custom_error import BaseCustomError, ErrorCode
from utils.logging.logging_manager import LogManager


def handle_generic_exception(exception: Exception, context_message: str, metadata: dict | None = None):
    """Logs an unexpected exception with its traceback and re-raises it as a BaseCustomError.

    :param exception: The exception raised.
    :param context_message: Custom message providing context for the error.
    :param metadata: Additional metadata (optional) for debugging purposes.
    """
    logger = LogManager.get_instance().get_logger("ErrorManager")
    metadata = metadata or {}
    metadata_info = f" | Metadata: {metadata}" if metadata else ""
    logger.error(
        f"An error occurred: {context_message}{metadata_info} - {exception}",
        exc_info=True,
    )
    if isinstance(exception, BaseCustomError):
        raise exception
    raise BaseCustomError(
        context_message, code=ErrorCode.INTERNAL_ERROR, cause=exception, **metadata
    ) from exception
