import time
from typing import Any, Callable, Optional, Tuple


class Debouncer:
    """Single-slot cancellable delay.

    ``schedule`` replaces whatever is pending and restarts the quiet period;
    ``poll`` runs the pending call once the quiet period has elapsed. The host
    event loop is expected to call ``poll`` whenever it gets control.
    """

    def __init__(self, wait: float, clock: Callable[[], float] = time.monotonic):
        if wait < 0:
            raise ValueError("Debounce wait must be non-negative")
        self.wait = wait
        self._clock = clock
        self._pending: Optional[Tuple[Callable[..., Any], tuple, dict]] = None
        self._deadline = 0.0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, func: Callable[..., Any], *args, **kwargs) -> None:
        self._pending = (func, args, kwargs)
        self._deadline = self._clock() + self.wait

    def cancel(self) -> None:
        self._pending = None

    def poll(self) -> bool:
        """Run the pending call if it is due; returns True when it ran."""
        if self._pending is None or self._clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Run the pending call immediately, regardless of the deadline."""
        if self._pending is None:
            return False
        func, args, kwargs = self._pending
        self._pending = None
        func(*args, **kwargs)
        return True
