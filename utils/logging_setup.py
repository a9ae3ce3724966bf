"""App-wide logging.

``main.py`` calls ``configure_logging`` once at startup. Other modules take a
``finance_tracker.*`` logger from ``get_logger("services.recurring")`` and the
like, and never attach handlers of their own.
"""
import logging
import os

_ROOT_LOGGER_NAME = "finance_tracker"
_ENV_VAR = "FINANCE_TRACKER_LOG_LEVEL"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _level_from(value: int | str | None) -> int | None:
    """Numeric level for an int, a digit string or a level name; else None."""
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None, fallback: int | str | None = None) -> int:
    """First usable of: level, $FINANCE_TRACKER_LOG_LEVEL, fallback, INFO."""
    for candidate in (level, os.getenv(_ENV_VAR), fallback):
        numeric = _level_from(candidate)
        if numeric is not None:
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fallback: int | str | None = None,
) -> None:
    """Attach one stderr handler to the app root logger. Later calls are no-ops.

    ``fallback`` is the level saved in config.json; the environment variable
    wins over it.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    for h in [h for h in root.handlers if isinstance(h, logging.NullHandler)]:
        root.removeHandler(h)

    numeric = _parse_level(level, fallback)
    handler = logging.StreamHandler()
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root.setLevel(numeric)
    root.addHandler(handler)
    root.propagate = False
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return ``finance_tracker.<name>``, silent until configure_logging() runs."""
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    if name != _ROOT_LOGGER_NAME and not name.startswith(_ROOT_LOGGER_NAME + "."):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
