"""
FrameScheduler - the per-frame callback primitive.

Works like a browser's animation-frame queue: ``request`` registers a
callback for the *next* ``run``; a callback that wants to keep running
requests itself again. Everything executes on the caller's thread, so
tasks coordinate through plain shared state.

A callback that raises is logged and dropped; the rest of the frame's
callbacks still run.
"""

from __future__ import annotations
import logging
from typing import Callable, Dict

LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler:

    def __init__(self):
        self._pending: Dict[int, FrameCallback] = {}
        self._running: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    def request(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int):
        self._pending.pop(handle, None)
        self._running.pop(handle, None)

    def run(self, now_ms: float) -> int:
        """Run every callback due this frame; returns how many ran."""
        self._running, self._pending = self._pending, {}
        ran = 0
        while self._running:
            handle = next(iter(self._running))
            callback = self._running.pop(handle)
            ran += 1
            try:
                callback(now_ms)
            except Exception:
                LOGGER.exception("frame callback %d failed", handle)
        return ran

    def is_pending(self, handle: int) -> bool:
        return handle in self._pending or handle in self._running

    def __len__(self) -> int:
        return len(self._pending)
