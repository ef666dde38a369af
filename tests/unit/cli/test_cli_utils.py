"""Unit tests for CLI utilities."""

import logging

import pytest

from sasswatch.cli_utils import (
    EXIT_FATAL,
    EXIT_INTERRUPTED,
    ColorFormatter,
    ErrorFormatter,
    PathValidator,
    setup_logging,
)
from sasswatch.errors import CompileError, ConfigError


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    root.setLevel(level)
    root.handlers[:] = handlers
    logging.captureWarnings(False)


def make_record(level, message):
    return logging.LogRecord("sasswatch", level, __file__, 1, message, None, None)


class TestColorFormatter:
    """Tests for ColorFormatter."""

    def test_plain_output(self):
        formatter = ColorFormatter(use_color=False)

        assert formatter.format(make_record(logging.ERROR, "boom")) == "boom"

    def test_colored_output(self):
        formatter = ColorFormatter(use_color=True)

        result = formatter.format(make_record(logging.WARNING, "careful"))

        assert result.startswith("\033[1;33m")
        assert result.endswith(ColorFormatter.RESET)
        assert "careful" in result


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_levels(self, root_logger):
        setup_logging(verbose=False)
        assert root_logger.level == logging.INFO

        setup_logging(verbose=True)
        assert root_logger.level == logging.DEBUG

    def test_repeat_calls_replace_handler(self, root_logger):
        setup_logging()
        setup_logging()

        ours = [h for h in root_logger.handlers if getattr(h, "_sasswatch", False)]
        assert len(ours) == 1


class TestErrorFormatter:
    """Tests for error reporting and exit codes."""

    def test_print_compile_errors(self, capsys):
        ErrorFormatter.print_compile_errors([
            CompileError("/s/app.scss", "Undefined variable: $x"),
            CompileError("/s/admin.scss", "Invalid CSS"),
        ])

        out = capsys.readouterr().out
        assert "(2)" in out
        assert "/s/app.scss: Undefined variable: $x" in out
        assert "/s/admin.scss: Invalid CSS" in out

    def test_fatal_error_exits_1(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_fatal_error(ConfigError("bad style"))

        assert exc_info.value.code == EXIT_FATAL
        assert "bad style" in capsys.readouterr().out

    def test_keyboard_interrupt_exit_code(self):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_keyboard_interrupt()

        assert exc_info.value.code == EXIT_INTERRUPTED

    def test_unexpected_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_unexpected_error(ValueError("nope"))

        assert exc_info.value.code == EXIT_FATAL
        assert "ValueError: nope" in capsys.readouterr().out


class TestPathValidator:
    """Tests for context directory validation."""

    def test_valid_dir(self, tmp_path):
        PathValidator.validate_context_dir(tmp_path)

    def test_missing_dir(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            PathValidator.validate_context_dir(tmp_path / "missing")

        assert exc_info.value.code == EXIT_FATAL

    def test_file_is_not_dir(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("")

        with pytest.raises(SystemExit):
            PathValidator.validate_context_dir(target)
