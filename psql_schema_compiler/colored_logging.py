"""
Colored logging formatter for the PSQL schema compiler.

This module provides colored console output for better visibility of log
messages while compiling schemas.
"""

import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """
    Colored logging formatter that adds ANSI color codes to log messages.

    Different log levels get different colors for better visual distinction.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }

    SPECIAL_COLORS = {
        'success': '\033[92m',    # Bright Green
        'progress': '\033[94m',   # Bright Blue
    }

    RESET = '\033[0m'
    BOLD = '\033[1m'

    SUCCESS_MARKER = '✓'
    PROGRESS_MARKER = '→'

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        """
        Initialize the colored formatter.

        Args:
            fmt: Log format string (uses default if None)
            use_colors: Whether to use colors (disabled automatically off a TTY)
        """
        if fmt is None:
            fmt = "%(levelname)s: %(message)s"
        super().__init__(fmt)

        self.use_colors = use_colors and hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        formatted_message = super().format(record)
        if not self.use_colors:
            return formatted_message

        message = record.getMessage()

        if record.levelname in ('ERROR', 'CRITICAL', 'WARNING', 'DEBUG'):
            level_color = self.COLORS.get(record.levelname, '')
            return f"{level_color}{formatted_message}{self.RESET}"

        if message.startswith(self.SUCCESS_MARKER):
            return f"{self.SPECIAL_COLORS['success']}{self.BOLD}{formatted_message}{self.RESET}"
        if message.startswith(self.PROGRESS_MARKER):
            return f"{self.SPECIAL_COLORS['progress']}{formatted_message}{self.RESET}"
        if self._is_section_message(message):
            return f"{self.BOLD}{formatted_message}{self.RESET}"

        return formatted_message

    def _is_section_message(self, message: str) -> bool:
        """Check if message is a section header."""
        return '=' in message and len(message.strip()) > 20


def setup_colored_logging(level: int = logging.INFO, use_colors: bool = True) -> None:
    """
    Set up colored logging for the application.

    Args:
        level: Logging level (default: INFO)
        use_colors: Whether to use colors (default: True)
    """
    formatter = ColoredFormatter(use_colors=use_colors)

    root_logger = logging.getLogger()

    # Remove existing handlers to avoid duplication
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)


def log_success(logger: logging.Logger, message: str) -> None:
    """Log a success message with special formatting."""
    logger.info(f"{ColoredFormatter.SUCCESS_MARKER} {message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    """Log a progress message with special formatting."""
    logger.info(f"{ColoredFormatter.PROGRESS_MARKER} {message}")


def log_section(logger: logging.Logger, section_name: str) -> None:
    """Log a section header with special formatting."""
    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {section_name.upper()}")
    logger.info(separator)
