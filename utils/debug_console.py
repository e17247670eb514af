"""Console and logging setup for octopat.

Provides a Rich console that mirrors its output into the debug log when
``--debug`` is given, and a logging filter that masks secret values should
one ever reach a log record.
"""

import io
import logging
import re
from typing import Iterable, Optional, Set

from rich.console import Console as RichConsole

_ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

REDACTED = "[REDACTED]"


class SecretRedactingFilter(logging.Filter):
    """Replace registered secret values in log records with a placeholder"""

    def __init__(self, secrets: Optional[Iterable[str]] = None):
        super().__init__()
        self._secrets: Set[str] = set()
        for secret in secrets or ():
            self.add_secret(secret)

    def add_secret(self, secret: Optional[str]) -> None:
        # Very short values would mask unrelated text
        if secret and len(secret) >= 4:
            self._secrets.add(secret)

    def redact(self, text: str) -> str:
        for secret in sorted(self._secrets, key=len, reverse=True):
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class DebugCapturingConsole(RichConsole):
    """
    Rich Console that also writes a plain text copy of its output to the
    debug log.
    """

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_to_plain_text(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_to_plain_text(self, *objects, **kwargs) -> str:
        """Render the objects without Rich markup or ANSI codes"""
        string_buffer = io.StringIO()
        temp_console = RichConsole(
            file=string_buffer,
            force_terminal=False,
            width=self.width,
            legacy_windows=False
        )
        temp_console.print(*objects, **kwargs)
        return _ANSI_ESCAPE.sub('', string_buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create appropriate console instance based on debug mode.

    Returns:
        DebugCapturingConsole if debug enabled, regular Console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    return RichConsole()


def configure_logging(level: str = "warning",
                      redactor: Optional[SecretRedactingFilter] = None) -> None:
    """
    Configure the root logger for terminal output.

    Args:
        level: Level name (debug, info, warning, error)
        redactor: Filter attached to the handler, if given
    """
    level_value = getattr(logging, str(level).upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level_value)
    handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
    if redactor is not None:
        handler.addFilter(redactor)
    root_logger.addHandler(handler)


def setup_debug_logger(log_file: str = "octopat_debug.log",
                       redactor: Optional[SecretRedactingFilter] = None) -> logging.Logger:
    """
    Send all log records, at DEBUG level, to an appended log file.

    Args:
        log_file: Path to debug log file
        redactor: Filter attached to the file handler, if given

    Returns:
        Logger the debug console writes captured output to
    """
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    if redactor is not None:
        file_handler.addFilter(redactor)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    return logging.getLogger("octopat.console")
