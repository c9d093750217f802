# deadline.py
from __future__ import annotations

import time
from typing import Optional

from .errors import DeadlineExceeded


class Deadline:
    """Monotonic time budget shared by every request of one run."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._expires_at = None if timeout is None else time.monotonic() + timeout

    def remaining(self, during: str) -> Optional[float]:
        """
        Seconds left, or None when there is no deadline.

        Raises:
            DeadlineExceeded: If the budget is already spent
        """
        if self._expires_at is None:
            return None
        left = self._expires_at - time.monotonic()
        if left <= 0:
            raise DeadlineExceeded(timeout=self.timeout, during=during)
        return left

    def check(self, during: str) -> None:
        self.remaining(during)
