"""Custom exceptions for sadehpy."""

from sadehpy.core import config

logger = config.get_logger()


class LoggedException(Exception):
    """Base class that automatically logs messages."""

    def __init__(self, message: str) -> None:
        """Initialize a new instance of the LoggedException class.

        Args:
            message: The message to display.
        """
        logger.exception(message)
        super().__init__(message)


class PreconditionError(LoggedException):
    """Epoch data did not satisfy the requirements of the scoring algorithm."""

    pass


class InvalidFileTypeError(LoggedException):
    """Sadehpy did not expect this file extension."""

    pass


class EmptyDirectoryError(LoggedException):
    """No .csv or .parquet files were found in the directory."""

    pass
