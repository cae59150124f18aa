"""termedit - A small terminal line editor."""

from .buffer import TextBuffer
from .config import RenderConfig, load_render_config
from .editor import CursorPosition, Editor, TerminalSize, ViewportOffset, run_editor
from .events import Event, EventKind, EventMultiplexer
from .keyboard import KeyboardSource, KeyEvent, KeyKind, parse_key
from .resize import ResizeSource

__all__ = [
    'TextBuffer',
    'RenderConfig',
    'load_render_config',
    'CursorPosition',
    'Editor',
    'TerminalSize',
    'ViewportOffset',
    'run_editor',
    'Event',
    'EventKind',
    'EventMultiplexer',
    'KeyboardSource',
    'KeyEvent',
    'KeyKind',
    'parse_key',
    'ResizeSource',
]
