"""Main editor controller."""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass
from typing import List, Optional

from .buffer import TextBuffer
from .config import RenderConfig
from .constants import EditorConstants
from .events import Event, EventKind, EventMultiplexer
from .keyboard import KeyboardSource, KeyEvent, KeyKind
from .resize import ResizeSource
from .terminal import TerminalSurface

logger = logging.getLogger(__name__)


@dataclass
class CursorPosition:
    x: int = 0  # column
    y: int = 0  # row

    def __str__(self):
        return f"({self.x}|{self.y})"


@dataclass
class ViewportOffset:
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class TerminalSize:
    width: int
    height: int  # rows available for text


class Editor:
    """Single-threaded state machine driving the buffer and the screen.

    The editor pulls one event at a time from the multiplexer, applies it
    to the buffer and cursor, then re-renders. Cursor and viewport offset
    are only ever touched from the thread running the loop.
    """

    def __init__(self, buffer: TextBuffer, surface, events=None,
                 config: Optional[RenderConfig] = None):
        self.buffer = buffer
        self.surface = surface
        self.events = events
        self.config = config or RenderConfig()
        self.cursor = CursorPosition()
        self.offset = ViewportOffset()
        self.exited = False
        self.status_message: Optional[str] = None
        self.size = self._query_size()

    def _query_size(self) -> TerminalSize:
        width, height = self.surface.size()
        return TerminalSize(
            width=max(1, width),
            height=max(1, height - EditorConstants.CHROME_ROWS),
        )

    def run(self) -> None:
        """Run the main editor loop until an exit event is processed."""
        while not self.exited:
            self.scroll()
            self.render(self.config)
            self.process_event(self.events.next_event())

    # Viewport

    def scroll(self) -> None:
        """Move the viewport so the cursor lies inside it."""
        self.offset.y = self._scroll_axis(self.cursor.y, self.offset.y, self.size.height)
        self.offset.x = self._scroll_axis(self.cursor.x, self.offset.x, self.size.width)

    @staticmethod
    def _scroll_axis(cursor: int, offset: int, visible: int) -> int:
        if cursor < offset:
            return cursor
        if cursor >= offset + visible:
            return cursor - visible + 1
        return offset

    # Rendering

    def render(self, config: RenderConfig) -> None:
        """Draw the visible rows, the status bar and the message bar."""
        surface = self.surface
        surface.hide_cursor()

        for screen_row in range(self.size.height):
            surface.move_to(0, screen_row)
            surface.clear_line()
            line = self.buffer.line(self.offset.y + screen_row)
            if line is not None:
                surface.write(line[self.offset.x:self.offset.x + self.size.width])

        self._render_status_bar(config)
        self._render_message_bar(config)

        surface.move_to(self.cursor.x - self.offset.x, self.cursor.y - self.offset.y)
        surface.show_cursor()
        surface.flush()

    def status_text(self, config: RenderConfig) -> str:
        flag = config.modified_flag if self.buffer.modified else ""
        status = f"{flag}{self.buffer.path or '[No Name]'} {self.cursor}"
        return status[:self.size.width].ljust(self.size.width)

    def _render_status_bar(self, config: RenderConfig) -> None:
        self.surface.move_to(0, self.size.height)
        self.surface.clear_line()
        self.surface.set_colors(config.status_fg, config.status_bg)
        self.surface.write(self.status_text(config))
        self.surface.reset_colors()

    def _render_message_bar(self, config: RenderConfig) -> None:
        self.surface.move_to(0, self.size.height + 1)
        self.surface.clear_line()
        message = self.status_message or config.help_text
        self.surface.write(message[:self.size.width])

    # Event dispatch

    def process_event(self, event: Event) -> None:
        """Apply one event to the editor state."""
        logger.debug(f"event {event.kind}")
        if event.kind == EventKind.KEY:
            self.process_key(event.key)
        elif event.kind == EventKind.RESIZE:
            self.resize()
        elif event.kind == EventKind.EMPTY:
            pass
        else:
            raise ValueError(f"Unhandled event kind: {event.kind}")

    def process_key(self, key: KeyEvent) -> None:
        """Apply a key press."""
        # Transient messages last until the next key press
        self.status_message = None

        kind = key.kind
        if kind == KeyKind.CHAR:
            self.insert_char(key.char)
        elif kind == KeyKind.BACKSPACE:
            self.backspace()
        elif kind == KeyKind.UP:
            self.move_up()
        elif kind == KeyKind.DOWN:
            self.move_down()
        elif kind == KeyKind.LEFT:
            self.move_left()
        elif kind == KeyKind.RIGHT:
            self.move_right()
        elif kind == KeyKind.SAVE:
            self.save()
        elif kind == KeyKind.EXIT:
            logger.info("Exit requested")
            self.exited = True
        elif kind == KeyKind.UNSUPPORTED:
            pass
        else:
            raise ValueError(f"Unhandled key kind: {kind}")

    def resize(self) -> None:
        """Re-query the terminal size; the next loop iteration redraws."""
        self.size = self._query_size()
        logger.debug(f"resized to {self.size.width}x{self.size.height}")

    # Editing

    def insert_char(self, ch: str) -> None:
        self.buffer.insert_char(self.cursor.y, self.cursor.x, ch)
        self.move_right()

    def backspace(self) -> None:
        """Delete the character left of the cursor, joining rows at column 0."""
        if self.cursor.x > 0:
            self.buffer.delete_char(self.cursor.y, self.cursor.x - 1)
            self.move_left()
        elif self.cursor.y > 0:
            row = self.cursor.y
            self.move_left()
            self.buffer.join_with_previous(row)

    def save(self) -> None:
        """Save the buffer, reporting the outcome in the message bar."""
        path = self.buffer.path
        try:
            self.buffer.save()
        except PermissionError as e:
            logger.error(f"Could not save {path}: {e}")
            self.status_message = EditorConstants.PERMISSION_ERROR_MESSAGE.format(path)
        except OSError as e:
            logger.error(f"Could not save {path}: {e}")
            if e.errno == errno.ENOSPC:
                self.status_message = EditorConstants.NO_SPACE_MESSAGE
            else:
                self.status_message = EditorConstants.SAVE_ERROR_MESSAGE.format(path)
        else:
            self.status_message = EditorConstants.SAVED_MESSAGE.format(path)

    # Cursor movement

    def move_up(self) -> None:
        if self.cursor.y > 0:
            self.cursor.y -= 1
        self._clamp_column()

    def move_down(self) -> None:
        if self.cursor.y < len(self.buffer) - 1:
            self.cursor.y += 1
        self._clamp_column()

    def move_left(self) -> None:
        if self.cursor.x > 0:
            self.cursor.x -= 1
        elif self.cursor.y > 0:
            self.cursor.y -= 1
            self.cursor.x = self.buffer.line_length(self.cursor.y)

    def move_right(self) -> None:
        if self.cursor.x < self.buffer.line_length(self.cursor.y):
            self.cursor.x += 1
        elif self.cursor.y < len(self.buffer) - 1:
            self.cursor.y += 1
            self.cursor.x = 0

    def _clamp_column(self) -> None:
        self.cursor.x = min(self.cursor.x, self.buffer.line_length(self.cursor.y))


def run_editor(buffer: TextBuffer, config: Optional[RenderConfig] = None,
               surface: Optional[TerminalSurface] = None) -> List[BaseException]:
    """Run an interactive session on buffer.

    Starts the keyboard and resize threads, runs the editor loop, and always
    shuts the threads down afterwards, even when setup or the loop raises.

    Returns:
        Errors the producer threads stopped with, already logged.
    """
    surface = surface or TerminalSurface()
    with surface.session():
        events = EventMultiplexer(KeyboardSource(surface), ResizeSource())
        try:
            editor = Editor(buffer, surface, events, config)
            events.start()
            editor.run()
        finally:
            errors = events.shutdown(surface)
    return errors
