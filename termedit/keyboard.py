"""Keyboard input handling using curtsies-style tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .channel import EventSource
from .constants import EditorConstants

logger = logging.getLogger(__name__)


class KeyKind(Enum):
    """Semantic key kinds the editor understands."""
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    BACKSPACE = "backspace"
    SAVE = "save"
    EXIT = "exit"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press."""
    kind: KeyKind
    char: Optional[str] = None  # Only set for CHAR
    raw: str = ""  # The raw token from curtsies


ARROWS = {
    'up': KeyKind.UP,
    'down': KeyKind.DOWN,
    'left': KeyKind.LEFT,
    'right': KeyKind.RIGHT,
}

# Ctrl-<letter> combinations bound to commands
CTRL_BINDINGS = {
    EditorConstants.SAVE_KEY: KeyKind.SAVE,
    EditorConstants.EXIT_KEY: KeyKind.EXIT,
}


def _char(ch: str, raw: str) -> KeyEvent:
    return KeyEvent(KeyKind.CHAR, char=ch, raw=raw)


def _ctrl(letter: str, raw: str) -> KeyEvent:
    # Ctrl-J / Ctrl-M are what terminals send for Enter
    if letter in ('j', 'm'):
        return _char('\n', raw)
    if letter == 'h':
        return KeyEvent(KeyKind.BACKSPACE, raw=raw)
    return KeyEvent(CTRL_BINDINGS.get(letter, KeyKind.UNSUPPORTED), raw=raw)


def parse_key(token: str) -> KeyEvent:
    """Map a curtsies key token (or a raw character) to a KeyEvent."""
    # Curtsies-style key names like '<UP>', '<Ctrl-s>', '<SPACE>'
    if len(token) > 2 and token.startswith('<') and token.endswith('>'):
        name = token[1:-1].lower().replace('+', '-')
        parts = name.split('-')
        base = parts[-1]
        mods = set(parts[:-1])

        if not mods:
            if base in ARROWS:
                return KeyEvent(ARROWS[base], raw=token)
            if base == 'backspace':
                return KeyEvent(KeyKind.BACKSPACE, raw=token)
            if base in ('space', 'spacebar', 'spc'):
                return _char(' ', token)
            if base == 'tab':
                return _char('\t', token)
            if base in ('enter', 'return'):
                return _char('\n', token)
        if mods == {'ctrl'} and len(base) == 1:
            return _ctrl(base, token)
        return KeyEvent(KeyKind.UNSUPPORTED, raw=token)

    if len(token) == 1:
        o = ord(token)
        if token in ('\n', '\r'):
            return _char('\n', token)
        if token in ('\x7f', '\x08'):
            return KeyEvent(KeyKind.BACKSPACE, raw=token)
        if token == '\t':
            return _char('\t', token)
        if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
            return _ctrl(chr(ord('a') + o - 1), token)
        if token.isprintable():
            return _char(token, token)

    return KeyEvent(KeyKind.UNSUPPORTED, raw=token)


class KeyboardSource(EventSource):
    """Reads keys on a background thread and forwards them as KeyEvents.

    The thread stops by itself after forwarding an EXIT event. An error on
    the input stream also stops it; the error is returned by join().
    """

    name = "keyboard"

    def __init__(self, surface):
        super().__init__()
        self.surface = surface

    def produce(self) -> None:
        while True:
            tokens = self.surface.read_keys()
            if tokens is None:
                raise EOFError("input stream closed")
            for token in tokens:
                event = parse_key(token)
                logger.debug(f"key {token!r} -> {event.kind.value}")
                self.channel.send(event)
                if event.kind == KeyKind.EXIT:
                    self.delivered_exit = True
                    return
