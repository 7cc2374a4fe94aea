"""Retry delay policies for lock contention.

A backoff policy maps a 1-based attempt number to a delay in seconds.
TransferEngine takes one at construction so tests can inject zero delays
and drive the retry count deterministically.
"""

from __future__ import annotations

import random
from collections.abc import Callable

BackoffPolicy = Callable[[int], float]

DEFAULT_BASE_DELAY = 0.005


def exponential_backoff(
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float | None = None,
    rng: random.Random | None = None,
) -> BackoffPolicy:
    """Build an exponential backoff policy with jitter.

    The delay for attempt ``n`` is ``base * 2**n`` plus a uniform jitter of
    the same scale, so two transfers colliding on the same pair do not
    retry in lockstep.

    Args:
        base_delay: Scale of the first delay, in seconds.
        max_delay: Optional upper bound on any single delay.
        rng: Random source for the jitter; seeded instances make delays
            reproducible.
    """
    if base_delay < 0:
        raise ValueError(f"base_delay must be non-negative, got {base_delay}")
    source = rng or random.Random()

    def policy(attempt: int) -> float:
        scale = base_delay * (2**attempt)
        delay = scale + source.uniform(0, scale)
        if max_delay is not None:
            delay = min(delay, max_delay)
        return delay

    return policy


def no_backoff(attempt: int) -> float:  # noqa: ARG001
    """Retry immediately."""
    return 0.0
