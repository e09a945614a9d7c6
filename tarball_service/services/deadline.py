# tarball_service/services/deadline.py
from __future__ import annotations

import time
from typing import Optional

from tarball_service.errors import DeadlineExceeded


class Deadline:
    """Wall-clock budget shared by the fetch, extract and repack stages of one request."""

    def __init__(self, seconds: float, *, clock=time.monotonic):
        self._clock = clock
        self.seconds = seconds
        self.expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    def expired(self) -> bool:
        return self._clock() >= self.expires_at

    def check(self, stage: str) -> None:
        if self.expired():
            raise DeadlineExceeded(
                f"request deadline of {self.seconds}s exceeded during {stage}",
                stage=stage,
                timeout=self.seconds,
            )


def check_deadline(deadline: Optional[Deadline], stage: str) -> None:
    if deadline is not None:
        deadline.check(stage)
