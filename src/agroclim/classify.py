"""
Threshold classification of daily values.

Turns numeric observations into the boolean flags consumed by run detection
(hot days, frost days).
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Literal, Union

import pandas as pd

ComparatorName = Literal[">", ">=", "<", "<=", "==", "!="]
Comparator = Union[ComparatorName, Callable[[Any, Any], bool]]

_COMPARATORS = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


def get_comparator(comparator: Comparator) -> Callable[[Any, Any], Any]:
    """
    Resolve a comparator name (or pass a callable through).

    Raises
    ------
    ValueError
        If the name is not recognized.
    """
    if callable(comparator):
        return comparator
    if comparator not in _COMPARATORS:
        raise ValueError(
            f"Unknown comparator '{comparator}'. Available comparators: {list(_COMPARATORS.keys())}"
        )
    return _COMPARATORS[comparator]


def classify(value: Any, comparator: Comparator, threshold: Any) -> bool:
    """
    Compare a single value against a threshold.

    >>> classify(39.2, ">", 38.0)
    True
    >>> classify(1.5, "<=", 0.0)
    False
    """
    return bool(get_comparator(comparator)(value, threshold))


def classify_series(series: pd.Series, comparator: Comparator, threshold: Any) -> pd.Series:
    """
    Vectorised :func:`classify` over a series.

    Missing values are classified as ``False``.
    """
    flags = get_comparator(comparator)(series, threshold)
    flags = pd.Series(flags, index=series.index).where(series.notna(), False)
    return flags.astype(bool).rename(series.name)


def list_available_comparators() -> dict:
    return {
        ">": "strictly above threshold (e.g. hot day)",
        ">=": "at or above threshold",
        "<": "strictly below threshold",
        "<=": "at or below threshold (e.g. frost day)",
        "==": "equal to threshold",
        "!=": "different from threshold",
    }
