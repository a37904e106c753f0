"""
Deadline: one monotonic time budget shared by every async step of a request.
"""
import time
from typing import Optional

from jobassist.utils.exceptions import DeadlineExceeded


class Deadline:
    """A fixed point in monotonic time that probe, generate and render all respect."""

    def __init__(self, seconds: float, clock=time.monotonic):
        self._clock = clock
        self.budget = float(seconds)
        self.expires_at = clock() + self.budget

    @classmethod
    def optional(cls, seconds: Optional[float]) -> Optional["Deadline"]:
        if seconds is None or seconds <= 0:
            return None
        return cls(seconds)

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def timeout_for(self, step_timeout: float, step: str = "step") -> float:
        """Clamp a step's own timeout to what is left; raise if nothing is left."""
        left = self.remaining()
        if left <= 0.0:
            raise DeadlineExceeded(step)
        return min(step_timeout, left)

    def __repr__(self):
        return f"Deadline(budget={self.budget:.1f}s, remaining={self.remaining():.1f}s)"


def clamp_timeout(step_timeout: float, deadline: Optional[Deadline], step: str) -> float:
    if deadline is None:
        return step_timeout
    return deadline.timeout_for(step_timeout, step)
