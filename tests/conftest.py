import threading
from typing import List, Optional, Tuple

import pytest

from termedit.channel import EventSource


class FakeSurface:
    """Records render calls instead of writing escape sequences."""

    def __init__(self, width: int = 80, height: int = 24):
        self.width = width
        self.height = height
        self.calls: List[Tuple] = []
        self.flushes = 0
        self._keys: List[Optional[List[str]]] = []
        self._keys_ready = threading.Condition()

    # Input

    def feed(self, *tokens: str) -> None:
        with self._keys_ready:
            for token in tokens:
                self._keys.append([token])
            self._keys_ready.notify_all()

    def feed_eof(self) -> None:
        with self._keys_ready:
            self._keys.append(None)
            self._keys_ready.notify_all()

    def read_keys(self):
        with self._keys_ready:
            while not self._keys:
                self._keys_ready.wait()
            return self._keys.pop(0)

    # Output

    def write(self, text):
        self.calls.append(('write', text))

    def hide_cursor(self):
        self.calls.append(('hide_cursor',))

    def show_cursor(self):
        self.calls.append(('show_cursor',))

    def move_to(self, x, y):
        self.calls.append(('move_to', x, y))

    def clear_line(self):
        self.calls.append(('clear_line',))

    def set_colors(self, fg, bg):
        self.calls.append(('set_colors', fg, bg))

    def reset_colors(self):
        self.calls.append(('reset_colors',))

    def size(self):
        return self.width, self.height

    def flush(self):
        self.flushes += 1
        self.calls.append(('flush',))

    @property
    def written(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == 'write']


class ScriptedSource(EventSource):
    """Producer whose thread sends a fixed list of items, then finishes."""

    name = "scripted"

    def __init__(self, items=(), error: Optional[Exception] = None,
                 delivered_exit: bool = False):
        super().__init__()
        self.items = list(items)
        self.raise_error = error
        self.mark_exit = delivered_exit
        self.revoked = False

    def produce(self):
        for item in self.items:
            self.channel.send(item)
        if self.mark_exit:
            self.delivered_exit = True
        if self.raise_error is not None:
            raise self.raise_error

    def revoke(self):
        self.revoked = True


class IdleSource(EventSource):
    """Producer that stays alive until revoked, like the resize source."""

    name = "idle"

    def __init__(self):
        super().__init__()
        self._stop = threading.Event()
        self.revoked = False

    def produce(self):
        self._stop.wait()

    def revoke(self):
        self.revoked = True
        self._stop.set()


@pytest.fixture
def surface():
    return FakeSurface()
