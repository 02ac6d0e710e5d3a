"""Tests for the error types and helpers the workflow relies on."""

import logging

import pytest
from image_adjuster.utils.errors import (
    AppError,
    FileIOError,
    ProcessingError,
    ConfigurationError,
    ErrorCategory,
    handle_errors,
    log_and_continue,
    format_user_error,
)


class TestErrorTypes:

    def test_defaults(self):
        error = AppError("Limits out of range")
        assert str(error) == "Limits out of range"
        assert error.category is ErrorCategory.RECOVERABLE
        assert error.user_message == "Limits out of range"
        assert error.original_error is None

    def test_cause_is_named(self):
        error = FileIOError("Could not move a.png", file_path="a.png",
                            original_error=PermissionError("denied"))
        assert str(error) == "Could not move a.png (caused by: PermissionError)"

    @pytest.mark.parametrize("error, category, attribute, value", [
        (FileIOError("Invalid image file: a.png", file_path="/images/a.png"),
         ErrorCategory.FILE_IO, "file_path", "/images/a.png"),
        (ProcessingError("Bad buffer", step="histogram"),
         ErrorCategory.PROCESSING, "step", "histogram"),
        (ConfigurationError("Unknown mode", setting_name="luminance_mode"),
         ErrorCategory.CONFIGURATION, "setting_name", "luminance_mode"),
    ])
    def test_subclasses(self, error, category, attribute, value):
        assert isinstance(error, AppError)
        assert error.category is category
        assert getattr(error, attribute) == value


class TestHandleErrors:
    """Loaders decorated with handle_errors return a fallback instead of raising."""

    def test_result_passes_through(self):
        @handle_errors(fallback_value=None, category=ErrorCategory.FILE_IO)
        def decode():
            return "pixels"

        assert decode() == "pixels"

    def test_unexpected_error_gives_fallback(self, caplog):
        @handle_errors(fallback_value=None, category=ErrorCategory.FILE_IO, log_level="error")
        def decode():
            raise OSError("truncated file")

        logger = logging.getLogger("image_adjuster.utils.errors")
        logger.addHandler(caplog.handler)
        try:
            assert decode() is None
        finally:
            logger.removeHandler(caplog.handler)
        assert "file_io failed" in caplog.text
        assert "truncated file" in caplog.text

    def test_app_errors_propagate(self):
        @handle_errors(fallback_value=None)
        def decode():
            raise FileIOError("nope", file_path="x.png")

        with pytest.raises(FileIOError):
            decode()

    def test_keeps_name_and_docstring(self):
        from image_adjuster.io.image_loader import load_image
        assert load_image.__name__ == "load_image"
        assert "EXIF" in load_image.__doc__


class TestFormatUserError:

    def test_app_error_uses_user_message(self):
        error = FileIOError("Invalid image file: /x/a.png", file_path="/x/a.png",
                            user_message="File not found: /x/a.png")
        assert format_user_error(error) == "File not found: /x/a.png"

    def test_missing_file(self):
        error = FileNotFoundError(2, "No such file or directory", "/x/a.png")
        assert format_user_error(error) == "File not found"

    def test_permission_denied(self):
        error = PermissionError(13, "Permission denied", "/x/Adjusted")
        assert format_user_error(error) == "Permission denied"

    def test_other_errors(self):
        assert format_user_error(OSError("disk full")) == "An error occurred: disk full"


class TestLogAndContinue:

    def test_logs_category(self, caplog):
        logger = logging.getLogger("image_adjuster.utils.errors")
        logger.addHandler(caplog.handler)
        try:
            log_and_continue("histogram sum mismatch", ErrorCategory.PROCESSING)
            log_and_continue("fallback level", level="not-a-level")
        finally:
            logger.removeHandler(caplog.handler)
        assert "[processing] histogram sum mismatch" in caplog.text
        assert "[recoverable] fallback level" in caplog.text
