"""Window resize notifications delivered through a self-pipe."""

from __future__ import annotations

import logging
import os
import signal
from typing import Any, Optional

from .channel import EventSource
from .constants import EditorConstants

logger = logging.getLogger(__name__)

SIGWINCH: Optional[int] = getattr(signal, 'SIGWINCH', None)


class ResizeSource(EventSource):
    """Forwards SIGWINCH deliveries as resize notices on its channel.

    Python runs signal handlers on the main thread, so the handler only
    writes a marker byte to a pipe. The source thread blocks reading that
    pipe and sends one notice per marker. Construct the source on the main
    thread; revoke() restores the previous handler and stops the thread.
    """

    name = "resize"

    def __init__(self):
        super().__init__()
        self._pipe_r, self._pipe_w = os.pipe()
        self._previous_handler: Any = None
        self._revoked = False
        if SIGWINCH is not None:
            self._previous_handler = signal.signal(SIGWINCH, self._handle_resize)

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del frame  # Unused
        if not self.revoked:
            # Write to pipe to wake up the source thread
            os.write(self._pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def produce(self) -> None:
        try:
            while True:
                data = os.read(self._pipe_r, 1024)
                if not data:
                    return
                for marker in data:
                    if bytes((marker,)) == EditorConstants.CLOSE_PIPE_MARKER:
                        return
                    logger.debug("window size changed")
                    self.channel.send(SIGWINCH)
        finally:
            os.close(self._pipe_r)

    @property
    def revoked(self) -> bool:
        return self._revoked

    def revoke(self) -> None:
        """Stop further signal delivery and wake the thread so it can exit.

        Safe to call more than once.
        """
        if self.revoked:
            return
        self._revoked = True
        if SIGWINCH is not None:
            signal.signal(SIGWINCH, self._previous_handler or signal.SIG_DFL)
        try:
            os.write(self._pipe_w, EditorConstants.CLOSE_PIPE_MARKER)
        finally:
            os.close(self._pipe_w)
        if not self.started:
            # Nothing will ever read the pipe
            os.close(self._pipe_r)
        logger.debug("resize notifications revoked")
