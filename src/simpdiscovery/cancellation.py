"""
Module providing a cancellation token used to stop looping beacon senders.
"""

import threading
from contextlib import contextmanager
from signal import signal, SIGINT
from typing import Callable, List, Optional


@contextmanager
def suppress_keyboard_interrupt_as_cancellation():
    """
    Context manager that suppresses KeyboardInterrupt and instead yields a cancellation token that can be polled to
    check if a keyboard interrupt has occurred during the lifetime of the context.
    """
    token = CancellationToken()

    prev_handler = signal(SIGINT, lambda _, __: token.cancel())
    try:
        yield token
    finally:
        signal(SIGINT, prev_handler)


class CancellationToken:
    def __init__(self):
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._on_cancellation: List[Callable[[], None]] = []

    def subscribe_cancellation(self, callback: Callable[[], None]):
        """
        Register a callback to be run once when this token is cancelled. If the token has already been
        cancelled, the callback is run immediately.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._on_cancellation.append(callback)
                return
        callback()

    @property
    def is_cancelled(self):
        """
        Has this token been cancelled?
        """
        return self._cancelled.is_set()

    def cancel(self):
        """
        Cancel this token.
        """
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._on_cancellation = self._on_cancellation, []
        for callback in callbacks:
            callback()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Sleep until this token is cancelled or the timeout expires.

        :param timeout: Maximum time to sleep, in seconds. ``None`` sleeps until cancellation.
        :return: `True` if the token has been cancelled, `False` if the timeout expired first.
        """
        return self._cancelled.wait(timeout)
