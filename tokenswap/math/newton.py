"""Converge-or-cap fixed-point iteration.

Shared by the precise square root and the stable-swap invariant solvers so
that every Newton loop in the package stops the same way.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


def _unchanged(previous: object, current: object) -> bool:
    return previous == current


def converge(
    initial: T,
    step: Callable[[T], T],
    *,
    max_iterations: int,
    converged: Callable[[T, T], bool] = _unchanged,
) -> T:
    """Iterate ``step`` from ``initial`` until it settles or the cap is hit.

    Args:
        initial: Starting estimate
        step: Update function producing the next estimate; exceptions it
            raises propagate to the caller
        max_iterations: Maximum number of ``step`` calls
        converged: Test on (previous, current); defaults to exact equality

    Returns:
        The last estimate. Exhausting the cap is not an error, the best
        available estimate is returned.
    """
    estimate = initial
    for _ in range(max_iterations):
        previous = estimate
        estimate = step(previous)
        if converged(previous, estimate):
            return estimate

    logger.debug("newton_iteration_cap_reached", max_iterations=max_iterations)
    return estimate
