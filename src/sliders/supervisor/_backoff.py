"""Exponential backoff calculator for spawn retries.

A failing spawn (missing executable, exhausted process table) would
otherwise be retried on every tick. The supervisor holds further spawns
for a delay that grows with each consecutive failure.
"""

import random
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff calculator with jitter.

    The delay formula is:
        delay = min(base * (multiplier ^ attempt), max_delay)
        delay = delay * (1 - jitter/2 + random() * jitter)

    Attributes:
        base: Base delay in seconds for first retry.
        max_delay: Maximum delay in seconds.
        multiplier: Factor to multiply delay for each attempt.
        jitter: Fraction of delay to randomize (0.0-1.0).
    """

    base: float = 0.5
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: float = 0.1

    def delay(self, attempt: int) -> float:
        """Calculate the delay for a given attempt number.

        Args:
            attempt: The attempt number (0-indexed, where 0 is the first retry).

        Returns:
            The delay in seconds before the next retry attempt.
        """
        capped_delay = min(self.base * (self.multiplier**attempt), self.max_delay)

        if self.jitter > 0:
            jitter_range = capped_delay * self.jitter
            jitter_offset = random.uniform(-jitter_range / 2, jitter_range / 2)  # noqa: S311
            capped_delay = max(0.0, capped_delay + jitter_offset)

        return capped_delay
