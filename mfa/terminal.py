"""
Author: Ian Young
Purpose: Output sinks that an MFA device writes its codes and messages to.
"""

import sys
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional, TextIO

from colorama import Fore, Style

from mfa.custom_exceptions import ConfigurationError, SinkError

TERMINAL_COLORS = {
    "red": Fore.RED,
    "green": Fore.GREEN,
    "yellow": Fore.YELLOW,
    "blue": Fore.BLUE,
    "purple": Fore.MAGENTA,
    "cyan": Fore.CYAN,
    "gray": Fore.WHITE,
    "white": Fore.LIGHTWHITE_EX,
}


def lookup_color(name: Optional[str], default: str) -> str:
    """
    Translate a color name into a terminal escape sequence.

    Args:
        name (str): One of the keys of TERMINAL_COLORS, or empty.
        default (str): Escape sequence to use when no name was given.

    Returns:
        str: The terminal escape sequence.

    Raises:
        ConfigurationError: If the name is not a known color.
    """
    if not name:
        return default
    try:
        return TERMINAL_COLORS[name.strip().lower()]
    except KeyError as e:
        valid = ", ".join(TERMINAL_COLORS)
        raise ConfigurationError(
            f"Unknown color {name!r}. Valid colors are {valid}"
        ) from e


class OutputSink(ABC):
    """
    Anything an MFA device can write to. Each method raises SinkError if
    the text could not be written.
    """

    @abstractmethod
    def write(self, text: str) -> None:
        """Write text with normal severity."""

    @abstractmethod
    def warn(self, text: str) -> None:
        """Write text with warning severity."""

    @abstractmethod
    def error(self, text: str) -> None:
        """Write an error message."""


class Terminal(OutputSink):
    """
    Writes OTP codes and messages to the terminal in color. Every line
    starts with a carriage return so each new code overwrites the last.

    Attributes:
        prefix (str): Identifies the OTP when several devices are running.
        default_color (str): Escape sequence for normal output.
        warning_color (str): Escape sequence for codes close to expiry.
        error_color (str): Escape sequence for errors.
    """

    PATTERN = "\r{color}{prefix} [{timestamp}] {text}{reset}"

    def __init__(
        self,
        prefix: str = "mfa",
        default_color: str = Fore.GREEN,
        warning_color: str = Fore.CYAN,
        error_color: str = Fore.RED,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.prefix = prefix or "mfa"
        self.default_color = default_color
        self.warning_color = warning_color
        self.error_color = error_color
        self._stdout = stdout
        self._stderr = stderr
        self._now = now or (lambda: datetime.now().astimezone())

    def format(self, color: str, text: str) -> str:
        """Render a line the way it will appear on screen."""
        return self.PATTERN.format(
            color=color,
            prefix=self.prefix,
            timestamp=self._now().isoformat(timespec="seconds"),
            text=text,
            reset=Style.RESET_ALL,
        )

    def _emit(self, stream: TextIO, color: str, text: str) -> None:
        try:
            stream.write(self.format(color, text))
            stream.flush()
        except (OSError, ValueError) as e:
            # ValueError is raised when writing to a closed file
            raise SinkError(f"Could not write to terminal: {e}") from e

    def write(self, text: str) -> None:
        """Writes in the default color of the Terminal."""
        self._emit(self._stdout or sys.stdout, self.default_color, text)

    def warn(self, text: str) -> None:
        """Writes in the warning color of the Terminal."""
        self._emit(self._stdout or sys.stdout, self.warning_color, text)

    def error(self, text: str) -> None:
        """Writes in the error color of the Terminal to stderr."""
        self._emit(self._stderr or sys.stderr, self.error_color, text)
