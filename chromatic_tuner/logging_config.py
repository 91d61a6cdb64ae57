"""Centralized logging configuration for Chromatic Tuner.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "chromatic_tuner": logging.INFO,
    "chromatic_tuner.tuner_engine": logging.INFO,
    "chromatic_tuner.detection": logging.INFO,  # Set to DEBUG for per-block correlation info
    "chromatic_tuner.core": logging.INFO,
    "chromatic_tuner.audio": logging.INFO,
    "chromatic_tuner.cli": logging.WARNING,  # Readout goes to stdout, keep the log quiet
    "chromatic_tuner.logger": logging.WARNING,
    # Libraries/third-party
    "aubio": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'chromatic_tuner' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler, replacing it if stderr was swapped
    if _console_handler is None or _console_handler.stream is not sys.stderr:
        _console_handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("chromatic_tuner"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels. Only the top of each subtree gets the handler;
    # child loggers inherit it through propagation.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if module_name in ("chromatic_tuner", "aubio", ""):
            logger.addHandler(_console_handler)
            logger.propagate = False

    logging.getLogger("chromatic_tuner").info("Logging configuration complete")
