# ============================================================================
# CONFIRMATION PROMPTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Interactive yes/no/all prompts
# PURPOSE: Ask before overwriting or moving schema files
# CREATED: 17 OCT 2026
# ============================================================================
"""
Confirmation Prompts

Writers ask through a Confirmer so the interactive terminal can be
swapped for a scripted one in tests.

TerminalConfirmer reads a single keystroke without waiting for Enter
when stdin is a TTY:

    y            -> YES
    a            -> ALL (only when allowed)
    n, Enter     -> NO
    anything else-> NO (reported as invalid input)
    Ctrl-C       -> KeyboardInterrupt (aborts the run)

When stdin is not a TTY (pipes, CI), one line is read instead and its
first character is interpreted the same way.

Usage:
    from services.confirmation import TerminalConfirmer

    confirmer = TerminalConfirmer()
    if confirmer.ask("Overwrite users.sql?", allow_all=True).approved:
        ...
"""

import os
import sys
from typing import IO, Iterable, List, Optional, Protocol, Tuple

from core.contracts import ConfirmResponse

try:
    import termios
    import tty
except ImportError:  # Windows: no raw mode, line input only
    termios = None
    tty = None

CTRL_C = "\x03"


class Confirmer(Protocol):
    """Anything that can answer an overwrite prompt."""

    def ask(self, message: str, allow_all: bool = False) -> ConfirmResponse:
        ...


def interpret_key(key: str, allow_all: bool = False) -> Tuple[ConfirmResponse, str]:
    """
    Map one keystroke to a response.

    Args:
        key: Single character read from the terminal
        allow_all: Whether "a" is a valid answer

    Returns:
        (response, echo text)

    Raises:
        KeyboardInterrupt: On Ctrl-C
    """
    if key == CTRL_C:
        raise KeyboardInterrupt
    lowered = key.lower()
    if lowered == "y":
        return ConfirmResponse.YES, "y"
    if allow_all and lowered == "a":
        return ConfirmResponse.ALL, "a"
    if lowered == "n":
        return ConfirmResponse.NO, "n"
    if key in ("\r", "\n", ""):
        return ConfirmResponse.NO, "N"
    return ConfirmResponse.NO, f"{key} (invalid input, treating as N)"


class TerminalConfirmer:
    """
    Confirmer backed by the process terminal.
    """

    def __init__(self, stdin: Optional[IO[str]] = None, stdout: Optional[IO[str]] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def ask(self, message: str, allow_all: bool = False) -> ConfirmResponse:
        """
        Prompt and read a single answer.

        Args:
            message: Question to show
            allow_all: Offer the "a" (approve all) answer

        Returns:
            ConfirmResponse
        """
        suffix = "(y/N/a[all]): " if allow_all else "(y/N): "
        self.stdout.write(f"{message} {suffix}")
        self.stdout.flush()

        try:
            key = self._read_key()
        except KeyboardInterrupt:
            self.stdout.write("\n")
            raise

        response, echo = interpret_key(key, allow_all)
        self.stdout.write(echo + "\n")
        self.stdout.flush()
        return response

    def _is_tty(self) -> bool:
        try:
            return termios is not None and self.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def _read_key(self) -> str:
        if self._is_tty():
            fd = self.stdin.fileno()
            previous = termios.tcgetattr(fd)
            try:
                tty.setraw(fd)
                data = os.read(fd, 1)
            finally:
                termios.tcsetattr(fd, termios.TCSADRAIN, previous)
            return data.decode("utf-8", errors="ignore")

        line = self.stdin.readline()
        if not line:
            return ""
        stripped = line.rstrip("\r\n")
        return stripped[:1] if stripped else "\n"


class ScriptedConfirmer:
    """
    Confirmer that replays canned answers.

    Records every prompt it was shown. Runs out of answers -> NO.
    """

    def __init__(self, answers: Iterable[ConfirmResponse] = ()):
        self._answers = list(answers)
        self.prompts: List[str] = []

    def ask(self, message: str, allow_all: bool = False) -> ConfirmResponse:
        self.prompts.append(message)
        if not self._answers:
            return ConfirmResponse.NO
        response = self._answers.pop(0)
        if response is ConfirmResponse.ALL and not allow_all:
            return ConfirmResponse.NO
        return response


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "Confirmer",
    "interpret_key",
    "TerminalConfirmer",
    "ScriptedConfirmer",
]
