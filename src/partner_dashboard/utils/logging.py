"""
Rich logging utility for colored terminal output
"""
import logging
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console
from partner_dashboard.core.config import settings

# Create a shared console instance
_console = Console(stderr=True)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance with Rich formatting and colors.
    All loggers share the same console for consistent output.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override (defaults to settings.log_level)

    Returns:
        Configured logger instance with RichHandler
    """
    logger = logging.getLogger(name)

    log_level = level.upper() if level else settings.log_level.upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Avoid adding multiple handlers
    if not logger.handlers:
        handler = RichHandler(
            console=_console,
            show_time=True,
            show_path=True,
            show_level=True,
            rich_tracebacks=True,
            markup=True,  # Enable rich markup in log messages
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
        handler.setFormatter(
            logging.Formatter(
                fmt="%(message)s",
                datefmt="[%Y-%m-%d %H:%M:%S]"
            )
        )
        logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate messages
    logger.propagate = False

    return logger


def get_shared_logger() -> logging.Logger:
    """
    Get the shared application logger for actions that don't belong
    to a specific module (startup, shutdown).
    """
    return get_logger("partner_dashboard")


# Create a shared application logger instance
app_logger = get_shared_logger()
