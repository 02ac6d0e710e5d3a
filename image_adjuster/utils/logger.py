import logging
import sys
from image_adjuster.config import settings # Use absolute import

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}


def _resolve_level(level):
    """Accepts a level name or a logging constant, defaults to INFO."""
    if isinstance(level, int):
        return level
    return LOG_LEVEL_MAP.get(str(level).upper(), logging.INFO)


# Get the desired level from settings, default to INFO if invalid or not found
log_level = _resolve_level(getattr(settings, 'LOGGING_LEVEL', 'INFO'))

log_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# Console Handler
console_handler = logging.StreamHandler(sys.stdout) # Use stdout for console output
console_handler.setFormatter(log_formatter)

# Loggers handed out by get_logger, so set_log_level can reach all of them
_loggers = {}


def get_logger(name):
    """
    Gets a logger instance configured with the application's settings.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Prevent adding handlers multiple times if get_logger is called repeatedly for the same name
    if console_handler not in logger.handlers:
        logger.addHandler(console_handler)

    # Prevent messages from propagating to the root logger if handlers are added
    logger.propagate = False

    _loggers[name] = logger
    return logger


def set_log_level(level):
    """Changes the level of every logger created through get_logger."""
    global log_level
    log_level = _resolve_level(level)
    for logger in _loggers.values():
        logger.setLevel(log_level)
    return log_level
