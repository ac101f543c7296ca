"""loguru setup for the analyzers, the scoring engine and the CLI.

Every record goes to stderr so `proof-of-place score --json` keeps stdout
for the response alone.
"""

import sys
from loguru import logger

from proof_of_place.config.settings import settings

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | <level>{message}</level>"
)


def configure_logging() -> None:
    """
    Install the single loguru sink.

    An interactive terminal with LOG_FORMAT=console gets colorized lines
    tagged with the bound component; anything else gets one JSON object per
    record. LOG_LEVEL applies to both.
    """
    logger.remove()

    # Fallback for records logged without a bound component
    logger.configure(extra={"component": "proof_of_place"})

    if sys.stderr.isatty() and settings.log_format.lower() == "console":
        logger.add(sys.stderr, format=_CONSOLE_FORMAT, level=settings.log_level, colorize=True)
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level,
            serialize=True,
            diagnose=False,  # no local variable values in tracebacks
        )


def get_logger(component: str):
    """Logger tagged with a component name, e.g. get_logger("cli")."""
    return logger.bind(component=component)


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
