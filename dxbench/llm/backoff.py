"""Exponential backoff with jitter for provider rate limits."""

import random


class Backoff:
    """Compute retry delays for rate-limited or overloaded provider calls.

    Stateless per call: the attempt number is passed in, so one instance can be
    shared by every worker using the same adapter.
    """

    def __init__(
        self,
        initial_delay: float = 1.0,
        max_delay: float = 30.0,
        backoff_factor: float = 2.0,
        jitter_factor: float = 0.1,
    ):
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter_factor = jitter_factor

    def delay(self, attempt: int, retry_after: float | None = None) -> float:
        """Delay in seconds before retry number ``attempt`` (0-based).

        A server-provided Retry-After value wins when present.
        """
        if retry_after is not None:
            return min(max(retry_after, 0.0), self.max_delay)

        base = min(self.initial_delay * (self.backoff_factor**attempt), self.max_delay)
        # +/- jitter_factor of the delay
        jitter = base * self.jitter_factor * (2 * random.random() - 1)
        return max(base + jitter, 0.0)
