"""Terminal interface using Blessed for display and Curtsies for input."""

from __future__ import annotations

import logging
import sys
import termios
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

import blessed

logger = logging.getLogger(__name__)


class TerminalSurface:
    """Primitive terminal operations the editor renders with.

    Output is buffered and only written on flush(). Input comes from a
    curtsies Input in raw mode, entered on the main thread by setup() and
    read from the keyboard thread by read_keys().
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None, stream=None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.stream = stream or sys.stdout
        self.is_fullscreen = False
        self._pending: List[str] = []
        self._input: Optional[object] = None
        self._old_tty_settings: Optional[list] = None

    @contextmanager
    def session(self) -> Iterator["TerminalSurface"]:
        """Enter fullscreen raw mode; always restore the terminal on exit."""
        self.setup()
        try:
            yield self
        finally:
            self.cleanup()

    def setup(self) -> None:
        """Enter fullscreen mode and prepare raw input."""
        from curtsies import Input  # type: ignore

        self.write(self.term.enter_fullscreen + self.term.clear)
        self.flush()
        self.is_fullscreen = True
        self._input = Input(keynames='curtsies')
        self._input.__enter__()  # type: ignore
        self._enter_raw_keys()

    def cleanup(self) -> None:
        """Exit fullscreen mode and restore the terminal."""
        self._restore_tty()
        if self._input is not None:
            try:
                self._input.__exit__(None, None, None)  # type: ignore
            finally:
                self._input = None
        if self.is_fullscreen:
            self.write(self.term.normal + self.term.normal_cursor + self.term.exit_fullscreen)
            self.flush()
            self.is_fullscreen = False

    def _enter_raw_keys(self) -> None:
        """Deliver every control key to the editor as input.

        curtsies only enters cbreak mode. Turning off IXON/IXOFF lets Ctrl-S
        and Ctrl-Q through, and turning off ISIG stops Ctrl-C, Ctrl-Z and
        Ctrl-\\ from raising signals.
        """
        try:
            old_settings = termios.tcgetattr(sys.stdin)
            new_settings = list(old_settings)
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            new_settings[3] &= ~termios.ISIG
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
            self._old_tty_settings = old_settings
        except (termios.error, AttributeError, OSError, ValueError) as e:
            logger.warning(f"Could not put terminal in raw key mode: {e}")

    def _restore_tty(self) -> None:
        if self._old_tty_settings is None:
            return
        try:
            termios.tcsetattr(sys.stdin, termios.TCSANOW, self._old_tty_settings)
        except (termios.error, OSError, ValueError) as e:
            logger.warning(f"Could not restore terminal settings: {e}")
        finally:
            self._old_tty_settings = None

    # Input

    def read_keys(self) -> Optional[List[str]]:
        """Block until the next input event and return its key tokens.

        A paste arrives as one event holding many keys. Returns None when
        input is not available.
        """
        if self._input is None:
            return None
        evt = next(self._input)  # type: ignore  # blocks
        if evt is None:
            return None
        events = getattr(evt, 'events', None)
        if events is not None:
            return [str(e) for e in events]
        return [str(evt)]

    # Output primitives

    def write(self, text: str) -> None:
        self._pending.append(text)

    def hide_cursor(self) -> None:
        self.write(self.term.hide_cursor)

    def show_cursor(self) -> None:
        self.write(self.term.normal_cursor)

    def move_to(self, x: int, y: int) -> None:
        self.write(self.term.move_xy(x, y))

    def clear_line(self) -> None:
        self.write(self.term.clear_eol)

    def set_colors(self, fg: Tuple[int, int, int], bg: Tuple[int, int, int]) -> None:
        self.write(self.term.color_rgb(*fg) + self.term.on_color_rgb(*bg))

    def reset_colors(self) -> None:
        self.write(self.term.normal)

    def size(self) -> Tuple[int, int]:
        """Terminal size as (width, height) in cells."""
        return self.term.width, self.term.height

    def flush(self) -> None:
        """Write buffered output to the terminal."""
        if self._pending:
            self.stream.write(''.join(self._pending))
            self._pending.clear()
        self.stream.flush()
