"""
Dwell gate for ACTION_IN_PROGRESS.

After a task is revealed the UI holds back the "completed" button for a few
seconds so nobody taps it instantly. This is pacing, not enforcement: the
engine accepts CompleteAction whenever the machine allows it.

Every arm/cancel bumps a generation counter. Callbacks wrapped with
guard() remember the generation they were made in and become no-ops once
it moves on, so a timer scheduled by a torn-down screen cannot fire into
the session.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

MIN_DWELL_SECONDS = 3.0
MAX_DWELL_SECONDS = 5.0


def clamp_dwell(seconds: float) -> float:
    return max(MIN_DWELL_SECONDS, min(MAX_DWELL_SECONDS, float(seconds)))


class DwellGate:
    """Cancellable minimum-wait gate with stale-callback protection."""

    def __init__(
        self,
        seconds: float = MIN_DWELL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.seconds = clamp_dwell(seconds)
        self._clock = clock
        self._generation = 0
        self._armed_at: float | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def armed(self) -> bool:
        return self._armed_at is not None

    def arm(self) -> int:
        """Start the wait. Returns the new generation token."""
        self._generation += 1
        self._armed_at = self._clock()
        logger.debug("Dwell gate armed for %.1fs (gen %d)", self.seconds, self._generation)
        return self._generation

    def cancel(self) -> None:
        """Disarm and invalidate any guarded callbacks."""
        if self._armed_at is not None:
            logger.debug("Dwell gate cancelled (gen %d)", self._generation)
        self._generation += 1
        self._armed_at = None

    def remaining(self) -> float:
        """Seconds left before the gate opens; 0.0 when open or disarmed."""
        if self._armed_at is None:
            return 0.0
        elapsed = self._clock() - self._armed_at
        return max(0.0, self.seconds - elapsed)

    def is_open(self) -> bool:
        """True once an armed gate has waited its full dwell time."""
        return self.armed and self.remaining() == 0.0

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def guard(self, callback: Callable[[], None]) -> Callable[[], bool]:
        """
        Bind `callback` to the current generation.

        The returned function runs `callback` and returns True only if the
        gate has not been re-armed or cancelled since guard() was called.
        """
        token = self._generation

        def fire() -> bool:
            if token != self._generation:
                logger.debug("Dropping stale dwell callback (gen %d, now %d)", token, self._generation)
                return False
            callback()
            return True

        return fire
