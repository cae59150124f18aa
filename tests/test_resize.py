"""Tests for SIGWINCH delivery through the resize source."""

import os
import signal
import time

import pytest

from termedit.resize import ResizeSource

needs_sigwinch = pytest.mark.skipif(not hasattr(signal, 'SIGWINCH'),
                                    reason="platform has no SIGWINCH")


def _wait_for_items(channel, count, timeout=5.0):
    deadline = time.monotonic() + timeout
    while len(channel) < count and time.monotonic() < deadline:
        time.sleep(0.01)
    return len(channel)


@needs_sigwinch
def test_handler_is_installed_and_restored():
    before = signal.getsignal(signal.SIGWINCH)
    source = ResizeSource()
    try:
        assert signal.getsignal(signal.SIGWINCH) == source._handle_resize
    finally:
        source.revoke()
    assert signal.getsignal(signal.SIGWINCH) == (before or signal.SIG_DFL)


@needs_sigwinch
def test_each_notification_becomes_one_event():
    source = ResizeSource()
    source.start()
    try:
        source._handle_resize(signal.SIGWINCH, None)
        source._handle_resize(signal.SIGWINCH, None)

        assert _wait_for_items(source.channel, 2) == 2
    finally:
        source.revoke()
    assert source.join(timeout=5) is None
    assert source.is_finished()


@needs_sigwinch
def test_real_signal_is_forwarded():
    source = ResizeSource()
    source.start()
    try:
        os.kill(os.getpid(), signal.SIGWINCH)

        assert _wait_for_items(source.channel, 1) == 1
        ready, item = source.channel.pop()
        assert ready
        assert item == signal.SIGWINCH
    finally:
        source.revoke()
        source.join(timeout=5)


def test_revoke_stops_thread_and_closes_channel():
    source = ResizeSource()
    source.start()

    source.revoke()
    error = source.join(timeout=5)

    assert error is None
    assert not source.is_alive()
    assert source.revoked
    assert source.channel.disconnected
    assert not source.delivered_exit


def test_revoke_is_idempotent():
    source = ResizeSource()
    source.start()

    source.revoke()
    source.revoke()

    assert source.join(timeout=5) is None


@needs_sigwinch
def test_signals_after_revoke_are_not_forwarded():
    source = ResizeSource()
    source.start()
    source.revoke()
    source.join(timeout=5)

    # The handler is gone; a stale reference must not write to a closed pipe
    source._handle_resize(signal.SIGWINCH, None)

    assert len(source.channel) == 0


def test_revoke_without_start():
    source = ResizeSource()
    source.revoke()

    assert source.join(timeout=0) is None
    assert not source.is_finished()
