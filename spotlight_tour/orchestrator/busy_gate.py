#!/usr/bin/env python3
"""Single-flight busy gate."""

import threading


class BusyGate:
    """
    Admits one pipeline run at a time; concurrent callers are rejected.

    try_acquire() is a non-blocking Lock.acquire, which is an atomic
    test-and-set. release() may come from a different thread than the one
    that acquired the gate.
    """

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def held(self) -> bool:
        return self._lock.locked()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> bool:
        """Release the gate. Returns False if it was not held."""
        try:
            self._lock.release()
        except RuntimeError:
            return False
        return True
