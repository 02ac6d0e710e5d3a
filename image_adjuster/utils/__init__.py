# This file makes the 'utils' directory a Python package.

from .errors import (
    AppError,
    FileIOError,
    ProcessingError,
    ConfigurationError,
    ErrorCategory,
    handle_errors,
    log_and_continue,
    format_user_error,
)

__all__ = [
    'AppError',
    'FileIOError',
    'ProcessingError',
    'ConfigurationError',
    'ErrorCategory',
    'handle_errors',
    'log_and_continue',
    'format_user_error',
]
