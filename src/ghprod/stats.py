"""Statistics helpers reducing duration samples to a single value."""

from __future__ import annotations

from typing import Sequence


def mean(values: Sequence[float]) -> float:
    """Return the arithmetic mean of ``values``.

    Raises:
        ValueError: If ``values`` is empty.
    """
    if not values:
        raise ValueError("mean requires at least one value")

    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Return the median of ``values``.

    The input does not need to be sorted. For an odd count the middle value is
    returned; for an even count the average of the two middle values.

    Raises:
        ValueError: If ``values`` is empty.
    """
    if not values:
        raise ValueError("median requires at least one value")

    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) / 2.0
