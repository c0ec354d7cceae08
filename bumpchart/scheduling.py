"""Trailing-edge debounce for interactive hosts.

Each call restarts the quiet period; only the last arguments are used once
the period elapses. Lives at the host boundary, never inside the pipeline.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional


class Debouncer:
    def __init__(
        self,
        func: Callable[..., Any],
        delay: float,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ) -> None:
        self._func = func
        self._delay = delay
        self._timer_factory = timer_factory
        self._timer: Optional[Any] = None
        self._pending: Optional[tuple[tuple, dict]] = None
        self._generation = 0
        self._lock = threading.Lock()

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = (args, kwargs)
            self._timer = self._timer_factory(self._delay, lambda: self._fire(generation))
            if isinstance(self._timer, threading.Thread):
                self._timer.daemon = True
            self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer superseded by a later call must not run the newer arguments early.
            if generation != self._generation:
                return
            pending, self._pending = self._pending, None
            self._timer = None
        if pending is not None:
            args, kwargs = pending
            self._func(*args, **kwargs)

    def flush(self) -> None:
        """Run the pending call now, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            generation = self._generation
        self._fire(generation)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
            self._generation += 1

    @property
    def pending(self) -> bool:
        return self._pending is not None
