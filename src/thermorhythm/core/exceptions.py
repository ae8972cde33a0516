"""Custom exceptions for thermorhythm."""

from thermorhythm.core import config

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


class EmptySeriesError(LoggedException):
    """The temperature series contains no readings."""

    pass


class MalformedSeriesError(LoggedException):
    """The input table does not have the expected shape or contents."""

    pass


class InvalidFileTypeError(LoggedException):
    """Thermorhythm did not expect this file extension."""

    pass
