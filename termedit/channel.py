"""Producer threads and the channels they feed.

Each event source runs on its own thread and owns one unbounded channel.
The multiplexer is the only consumer; it shares a Condition with every
channel so a send wakes it up.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Optional, Tuple

logger = logging.getLogger(__name__)


class ChannelClosed(Exception):
    """Raised when sending on a channel that has been closed."""


class Channel:
    """Unbounded FIFO from one producer thread to the multiplexer."""

    def __init__(self, name: str):
        self.name = name
        self._items: Deque[Any] = deque()
        self._closed = False
        self._cond = threading.Condition()

    def attach(self, condition: threading.Condition) -> None:
        """Share the consumer's condition. Must happen before the producer starts."""
        self._cond = condition

    def send(self, item: Any) -> None:
        """Queue item and wake the consumer. Never blocks on capacity."""
        cond = self._cond
        with cond:
            if self._closed:
                raise ChannelClosed(f"{self.name} channel is closed")
            self._items.append(item)
            cond.notify_all()

    def close(self) -> None:
        """Mark the producer side as gone. Queued items stay readable."""
        cond = self._cond
        with cond:
            self._closed = True
            cond.notify_all()

    # Consumer side; callers hold the shared condition

    def pop(self) -> Tuple[bool, Any]:
        if self._items:
            return True, self._items.popleft()
        return False, None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def disconnected(self) -> bool:
        """True once the producer closed the channel and it is drained."""
        return self._closed and not self._items

    def __len__(self) -> int:
        return len(self._items)


class EventSource(ABC):
    """Base class for a producer thread that feeds one channel.

    Subclasses implement produce(), which runs on the thread. Any exception
    it raises is kept for join() rather than re-raised, and the channel is
    closed when the thread ends for whatever reason.
    """

    name = "source"

    def __init__(self):
        self.channel = Channel(self.name)
        self.error: Optional[BaseException] = None
        self.delivered_exit = False
        self._thread = threading.Thread(
            target=self._run, name=f"termedit-{self.name}", daemon=True
        )

    @abstractmethod
    def produce(self) -> None:
        """Block on the underlying source and send events until done."""

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        try:
            self.produce()
        except Exception as e:
            self.error = e
            logger.error(f"{self.name} source stopped with an error: {e!r}")
        finally:
            self.channel.close()
            logger.debug(f"{self.name} source finished")

    @property
    def started(self) -> bool:
        return self._thread.ident is not None

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def is_finished(self) -> bool:
        """True if the thread ran and has terminated."""
        return self.started and not self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        """Wait for the thread and return the error it stopped with, if any."""
        if self.started:
            self._thread.join(timeout)
        return self.error
