"""Logger access for Chromatic Tuner modules.

Every logger lives under the ``chromatic_tuner`` namespace, so the levels in
:mod:`chromatic_tuner.logging_config` apply to it. Handlers are only attached by
``setup_logging``; until then the package logger has a NullHandler and library use
of the engine prints nothing.
"""
import logging
from functools import lru_cache

PACKAGE_LOGGER = "chromatic_tuner"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """
    Get the logger for a module.

    Args:
        name: Module name, usually ``__name__``. Names outside the package
            (``__main__``, scripts) are nested under ``chromatic_tuner``.

    Returns:
        The logger
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
