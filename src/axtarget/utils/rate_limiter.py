"""Fixed-window rate limiter — per-client request counter kept in process memory.

Each identity (usually a client IP) gets a window of ``window_seconds``.
Requests are admitted until ``max_requests`` is reached, then rejected until
the window expires. State lives in a single dict guarded by a lock, so the
read-check-write on a window is one step even under concurrent requests.
Expired windows are swept periodically to keep the map bounded.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class ClientWindow:
    """Request count for one identity within its current window."""

    identity: str
    count: int
    window_reset_at: float


class FixedWindowRateLimiter:
    """Approximate per-identity limiter for a single-process deployment."""

    def __init__(
        self,
        max_requests: int = 15,
        window_seconds: float = 60.0,
        sweep_interval: float = 300.0,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_requests: Requests admitted per identity per window.
            window_seconds: Window length in seconds.
            sweep_interval: Minimum seconds between automatic sweeps of
                            expired windows. 0 disables automatic sweeping.
            clock: Monotonic time source, injectable for tests.
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._windows: dict[str, ClientWindow] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def admit(self, identity: str) -> bool:
        """Record a request for ``identity`` and decide whether to allow it.

        Args:
            identity: Key for the client (IP address or placeholder).

        Returns:
            True if the request fits in the identity's current window.
        """
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            window = self._windows.get(identity)
            if window is None or now > window.window_reset_at:
                self._windows[identity] = ClientWindow(
                    identity=identity,
                    count=1,
                    window_reset_at=now + self._window_seconds,
                )
                return True

            if window.count < self._max_requests:
                window.count += 1
                return True

        logger.info("Rate limit hit for %s (%d requests)", identity, self._max_requests)
        return False

    def sweep(self) -> int:
        """Drop every window that has already expired.

        Returns:
            Number of windows removed.
        """
        with self._lock:
            return self._sweep_locked(self._clock())

    def _maybe_sweep(self, now: float) -> None:
        if self._sweep_interval <= 0:
            return
        if now - self._last_sweep >= self._sweep_interval:
            self._sweep_locked(now)

    def _sweep_locked(self, now: float) -> int:
        expired = [
            identity for identity, window in self._windows.items()
            if now > window.window_reset_at
        ]
        for identity in expired:
            del self._windows[identity]
        self._last_sweep = now
        if expired:
            logger.debug(
                "Rate limiter sweep: removed %d expired windows, %d remaining",
                len(expired), len(self._windows),
            )
        return len(expired)

    def get_window(self, identity: str) -> ClientWindow | None:
        """Return a copy of the identity's current window, if any."""
        with self._lock:
            window = self._windows.get(identity)
            return replace(window) if window is not None else None

    def reset(self) -> None:
        """Forget all windows."""
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window_seconds
