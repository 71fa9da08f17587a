"""Clipboard write capability.

Hides how text reaches the system clipboard. The session only ever calls
`write(text)` and gets back whether it worked.
"""

import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

import pyperclip

logger = logging.getLogger(__name__)


class Clipboard(ABC):
    """Injected clipboard capability: a single write that reports success."""

    @abstractmethod
    def write(self, text: str) -> bool:
        """Copy text to the clipboard. Returns False on failure, never raises."""


class CommandClipboard(Clipboard):
    """Pipe text into a platform clipboard command (pbcopy, xclip).

    Each write spawns a short-lived process that is waited for and released
    on every exit path.
    """

    def __init__(self, command: Sequence[str], env: dict[str, str] | None = None) -> None:
        self._command = list(command)
        self._env = env

    @property
    def command(self) -> list[str]:
        return list(self._command)

    def write(self, text: str) -> bool:
        try:
            with subprocess.Popen(
                self._command,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                env=self._env,
            ) as process:
                process.communicate(text.encode("utf-8"))
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Clipboard command %s failed: %s", self._command[0], e)
            return False
        return process.returncode == 0


class PyperclipClipboard(Clipboard):
    """Clipboard access through pyperclip."""

    def write(self, text: str) -> bool:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.debug("pyperclip copy failed: %s", e)
            return False
        return True


class CallableClipboard(Clipboard):
    """Adapter for a plain copy function, e.g. Textual's `App.copy_to_clipboard` (OSC 52)."""

    def __init__(self, copy: Callable[[str], None]) -> None:
        self._copy = copy

    def write(self, text: str) -> bool:
        try:
            self._copy(text)
        except Exception as e:
            logger.debug("Clipboard callable failed: %s", e)
            return False
        return True


class FallbackClipboard(Clipboard):
    """Try several clipboards in order until one accepts the text."""

    def __init__(self, *clipboards: Clipboard) -> None:
        if not clipboards:
            raise ValueError("FallbackClipboard needs at least one clipboard")
        self._clipboards = clipboards

    @property
    def clipboards(self) -> tuple[Clipboard, ...]:
        return self._clipboards

    def write(self, text: str) -> bool:
        for clipboard in self._clipboards:
            if clipboard.write(text):
                return True
        logger.warning("All clipboard backends failed")
        return False


def default_clipboard(terminal_copy: Callable[[str], None] | None = None) -> Clipboard:
    """Build the clipboard chain for the current platform.

    Uses pbcopy on macOS, xclip on Linux, then pyperclip, and finally the
    terminal's OSC 52 channel when a copy function is supplied.
    """
    chain: list[Clipboard] = []
    if sys.platform == "darwin":
        chain.append(CommandClipboard(["pbcopy"], env={"LANG": "en_US.UTF-8"}))
    elif sys.platform.startswith("linux"):
        chain.append(CommandClipboard(["xclip", "-selection", "clipboard"]))
    chain.append(PyperclipClipboard())
    if terminal_copy is not None:
        chain.append(CallableClipboard(terminal_copy))
    return FallbackClipboard(*chain)
