import logging
import sys
from typing import Optional

from .errors import ResponseError, render_message

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ResponseErrorFilter(logging.Filter):
    """Attach a readable explanation to records logged with a ResponseError."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "response_error_rendered", False):
            return True
        if record.exc_info and isinstance(record.exc_info[1], ResponseError):
            record.response_error_rendered = True
            detail = render_message(record.exc_info[1])
            if record.args:
                detail = detail.replace("%", "%%")
            record.msg = f"{record.msg} ({detail})"
        return True


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the wirerecord logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging output
        format_string: Optional custom format string for log messages
        force: If True, reconfigure even if handlers exist

    Returns:
        The configured 'wirerecord' logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("wirerecord")
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        logger.handlers.clear()
        formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if log_file:
            handlers.append(logging.FileHandler(log_file))

        for handler in handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
            handler.addFilter(ResponseErrorFilter())
            logger.addHandler(handler)

    # Keep records out of the root logger
    logger.propagate = False

    return logger
