# Centralized error handling utilities
"""
Error types and helpers shared by the analysis and adjustment workflow.

The numeric core (luminance, histogram, limits, lookup tables) only raises
ProcessingError for malformed buffers, histograms or tables; everything that touches files raises
FileIOError so the command line can report the offending path.
"""

import functools
from typing import Any, Callable, Optional, TypeVar, Union
from enum import Enum

from .logger import get_logger

logger = get_logger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


class ErrorCategory(Enum):
    """Categories of errors for consistent handling."""
    RECOVERABLE = "recoverable"      # Can continue with fallback
    FILE_IO = "file_io"              # Unreadable images, failed moves or writes
    PROCESSING = "processing"        # Histogram / lookup table errors
    CONFIGURATION = "configuration"  # user_settings.json problems


class AppError(Exception):
    """Base exception for application-specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.RECOVERABLE,
        original_error: Optional[Exception] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.category = category
        self.original_error = original_error
        self.user_message = user_message or message

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.args[0]} (caused by: {type(self.original_error).__name__})"
        return self.args[0]


class FileIOError(AppError):
    """An image or report file could not be read, written or moved."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.FILE_IO, **kwargs)
        self.file_path = file_path


class ProcessingError(AppError):
    """A pixel buffer or lookup table is not in the expected layout."""

    def __init__(self, message: str, step: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.PROCESSING, **kwargs)
        self.step = step


class ConfigurationError(AppError):
    """A setting holds a value the workflow cannot use."""

    def __init__(self, message: str, setting_name: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)
        self.setting_name = setting_name


def handle_errors(
    fallback_value: Any = None,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    log_level: str = "warning",
) -> Callable[[F], F]:
    """
    Decorator for loaders that report failure by returning ``fallback_value``.

    AppError subclasses always propagate unchanged. Any other exception is
    logged at ``log_level`` together with the category and the failing
    function, and ``fallback_value`` is returned instead.
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except AppError:
                raise
            except Exception as e:
                log_func = getattr(logger, log_level, logger.warning)
                log_func(
                    "%s failed in %s.%s: %s",
                    category.value,
                    func.__module__,
                    func.__name__,
                    str(e),
                )
                return fallback_value

        return wrapper  # type: ignore
    return decorator


def log_and_continue(
    message: str,
    category: ErrorCategory = ErrorCategory.RECOVERABLE,
    level: str = "warning",
) -> None:
    """Log a non-critical problem and keep going."""
    log_func = getattr(logger, level, logger.warning)
    log_func("[%s] %s", category.value, message)


def format_user_error(error: Union[Exception, str]) -> str:
    """
    Format an error message for console display.

    AppErrors carry their own user message; OS errors are shortened to the
    part a user can act on.
    """
    if isinstance(error, AppError):
        return error.user_message

    error_str = str(error)
    if "No such file or directory" in error_str:
        return "File not found"
    if "Permission denied" in error_str:
        return "Permission denied"
    return f"An error occurred: {error_str}"
