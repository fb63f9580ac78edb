"""
ghssh logging utilities.

Every module logs through a child of the "ghssh" logger. Nothing is
configured on import; the CLI calls configure_logging() when --verbose is
given, and library users can attach their own handlers.
"""

import logging

_root_logger = logging.getLogger("ghssh")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(
    level: int = logging.INFO,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> logging.Handler:
    """
    Configure ghssh logging.

    Args:
        level: Level for the "ghssh" logger and its children (default: INFO)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: timestamp, logger name, level)

    Returns:
        The handler that was attached, so callers can remove it again.
    """
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a ghssh logger.

    Args:
        name: Logger name suffix (e.g. "runner", "probe"). None returns the package logger.
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"ghssh.{name}")


def format_argv(args: list[str]) -> str:
    """Render argv for a log line; empty arguments show as ''."""
    return " ".join(a if a else "''" for a in args)


__all__ = ["configure_logging", "get_logger", "format_argv", "DEFAULT_FORMAT"]
