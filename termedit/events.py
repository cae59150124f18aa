"""Event multiplexing for the editor loop.

Two producer threads feed the controller: the keyboard and the resize
notifications. EventMultiplexer merges their channels and a timeout into a
single blocking next_event() call, and owns the producers' teardown.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .channel import Channel, EventSource
from .constants import EditorConstants
from .keyboard import KeyEvent, KeyKind
from .resize import ResizeSource

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kinds of events delivered to the editor."""
    KEY = "key"
    RESIZE = "resize"
    EMPTY = "empty"


@dataclass(frozen=True)
class Event:
    """A single event for the controller. Only KEY events carry a key."""
    kind: EventKind
    key: Optional[KeyEvent] = None

    @classmethod
    def from_key(cls, key: KeyEvent) -> "Event":
        return cls(EventKind.KEY, key)

    @classmethod
    def resize(cls) -> "Event":
        return cls(EventKind.RESIZE)

    @classmethod
    def empty(cls) -> "Event":
        return cls(EventKind.EMPTY)

    @classmethod
    def exit(cls) -> "Event":
        return cls(EventKind.KEY, KeyEvent(KeyKind.EXIT))


class EventMultiplexer:
    """Merges the keyboard and resize channels into one event stream.

    The channel examined first alternates between calls, so neither
    producer can starve the other. Within a channel, events arrive in the
    order they were produced.

    If nothing arrives within ``timeout`` seconds, next_event() returns an
    EMPTY event, unless a producer has died without delivering an exit key,
    in which case an exit key is synthesized so the loop cannot block
    forever. A closed and drained channel counts as a dead producer.
    """

    def __init__(self, keyboard: EventSource, resize: ResizeSource,
                 timeout: float = EditorConstants.EVENT_TIMEOUT):
        self.keyboard = keyboard
        self.resize = resize
        self.timeout = timeout
        self._cond = threading.Condition()
        self._channels: List[Tuple[Channel, Callable[[Any], Event]]] = [
            (keyboard.channel, Event.from_key),
            (resize.channel, lambda _signum: Event.resize()),
        ]
        for channel, _ in self._channels:
            channel.attach(self._cond)
        self._first = 0
        self._shut_down = False

    def start(self) -> None:
        """Start both producer threads."""
        self.keyboard.start()
        self.resize.start()

    def next_event(self) -> Event:
        """Block until an event is ready or the timeout expires."""
        deadline = time.monotonic() + self.timeout
        with self._cond:
            while True:
                event = self._poll()
                if event is not None:
                    return event
                if any(channel.disconnected for channel, _ in self._channels):
                    logger.warning("Event channel disconnected, synthesizing exit")
                    return Event.exit()
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._cond.wait(remaining)

        for source in (self.keyboard, self.resize):
            if source.is_finished() and not source.delivered_exit:
                logger.warning(f"{source.name} source died, synthesizing exit")
                return Event.exit()
        return Event.empty()

    def _poll(self) -> Optional[Event]:
        """Take one item from the channels, rotating which goes first."""
        count = len(self._channels)
        start = self._first
        self._first = (start + 1) % count
        for i in range(count):
            channel, wrap = self._channels[(start + i) % count]
            ready, item = channel.pop()
            if ready:
                return wrap(item)
        return None

    def shutdown(self, surface) -> List[BaseException]:
        """Tear down the producers: revoke, flush, then join.

        Must be called exactly once. Producer errors are logged and
        returned, never raised, so shutdown always completes.
        """
        if self._shut_down:
            raise RuntimeError("shutdown() already called")
        self._shut_down = True

        self.resize.revoke()
        try:
            surface.flush()
        except OSError as e:
            logger.error(f"Could not flush terminal output: {e}")

        errors: List[BaseException] = []
        for source in (self.keyboard, self.resize):
            error = source.join(EditorConstants.JOIN_TIMEOUT)
            if source.is_alive():
                logger.warning(f"{source.name} thread did not stop, leaving it behind")
            if error is not None:
                logger.error(f"{source.name} thread failed: {error!r}")
                errors.append(error)
        logger.info("Event sources shut down")
        return errors
