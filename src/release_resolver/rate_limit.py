from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable, Mapping

from .errors import RateLimitExceeded, Unauthorized

REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class RateLimitState:
    remaining: int = -1
    reset_at: int = -1


class RateLimitGuard:
    """Tracks GitHub's request budget from response headers.

    The guard never waits for the budget to reset. Once GitHub reports zero
    remaining requests every further request fails immediately.
    """

    def __init__(
        self,
        state: RateLimitState | None = None,
        *,
        clock: Callable[[], float] = _now_ms,
    ):
        self.state = state or RateLimitState()
        self._clock = clock

    @property
    def remaining(self) -> int:
        return self.state.remaining

    @property
    def reset_at(self) -> int:
        return self.state.reset_at

    def seconds_until_reset(self) -> int:
        # Negative values mean the limit has already been reset.
        if self.state.reset_at == -1:
            return -1
        return math.floor((self._clock() - self.state.reset_at) / 1000)

    def assert_can_proceed(self) -> None:
        if self.state.remaining != 0:
            return
        seconds = self.seconds_until_reset()
        if seconds != -1:
            message = (
                "You have used the GitHub limit for this hour. "
                f"Your limit resets in {seconds} seconds."
            )
        else:
            message = "You have used the GitHub limit for this hour. Try again soon."
        raise RateLimitExceeded(message)

    def observe(self, status: int, headers: Mapping[str, str]) -> None:
        """Update the budget from a live response, failing on ``403``."""
        if status == 403:
            if headers.get(REMAINING_HEADER) == "0":
                raise RateLimitExceeded("GitHub requests limit exceeded")
            raise Unauthorized("Unauthorized request.")

        remaining = _parse_number(headers.get(REMAINING_HEADER))
        if remaining is not None:
            self.state.remaining = remaining
        reset = _parse_number(headers.get(RESET_HEADER))
        if reset is not None:
            self.state.reset_at = reset


def _parse_number(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        parsed = float(value)
    except ValueError:
        return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return int(parsed)
