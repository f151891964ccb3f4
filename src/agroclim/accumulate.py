from __future__ import annotations

import numbers
from typing import Any, NamedTuple, Optional, Sequence

import numpy as np
import pandas as pd

from .series import biofix_position


class Crossing(NamedTuple):
    index: int
    accumulated_value: float


def _check_start(sequence: Sequence[Any], start_index: int) -> None:
    if not 0 <= start_index <= len(sequence):
        raise ValueError(
            f"start_index must be between 0 and {len(sequence)}, got {start_index}"
        )


def _check_numeric(value: Any, position: int) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(
            f"Increment at position {position} is not numeric: {value!r} ({type(value).__name__})"
        )


def _increments(sequence: Sequence[Any], start_index: int) -> list[Any]:
    # positional values; a Series is read by position, never by label
    if isinstance(sequence, pd.Series):
        sequence = sequence.to_numpy()
    values = list(sequence)
    _check_start(values, start_index)
    for position in range(start_index, len(values)):
        _check_numeric(values[position], position)
    return values


def first_crossing(
    sequence: Sequence[Any],
    target: float,
    start_index: int = 0,
) -> Optional[Crossing]:
    """
    Find the first position where the running sum reaches ``target``.

    The sum starts at ``start_index`` (inclusive) and is compared with ``>=``
    after each increment. Returns ``None`` when the target is never reached,
    including when ``start_index == len(sequence)``. A ``pandas.Series`` is
    read by position, whatever its index.

    Raises
    ------
    ValueError
        If ``start_index`` lies outside ``[0, len(sequence)]``.
    TypeError
        If the target or any increment from ``start_index`` on is not a real
        number. All increments are checked before summing.
    """
    if isinstance(target, bool) or not isinstance(target, numbers.Real):
        raise TypeError(f"target must be a real number, got {target!r}")
    values = _increments(sequence, start_index)

    total = 0.0
    for position in range(start_index, len(values)):
        total += values[position]
        if total >= target:
            return Crossing(position, total)
    return None


def running_total(sequence: Sequence[Any], start_index: int = 0) -> list[float]:
    values = _increments(sequence, start_index)
    totals: list[float] = []
    total = 0.0
    for value in values[start_index:]:
        total += value
        totals.append(total)
    return totals


def first_crossing_by_group(
    series: pd.Series,
    target: float,
    groups: Optional[Sequence[Any]] = None,
    start: Optional[str] = None,
) -> pd.DataFrame:
    """
    Apply :func:`first_crossing` separately to each group of a dated series.

    Parameters
    ----------
    series:
        Daily increments indexed by a sorted ``DatetimeIndex``.
    target:
        Accumulated value to reach within each group.
    groups:
        Group label per observation. Defaults to the calendar year of the index.
    start:
        Optional ``MM-DD`` biofix; observations earlier in the group are skipped.

    Returns
    -------
    pandas.DataFrame
        One row per group with ``date``, ``index`` (position within the group)
        and ``accumulated``. Groups that never reach the target hold NaT/NaN.
    """
    if not isinstance(series.index, pd.DatetimeIndex):
        raise TypeError("series must be indexed by a DatetimeIndex.")

    if groups is None:
        groups = series.index.year
    groups = pd.Index(groups, name="group")
    if len(groups) != len(series):
        raise ValueError(
            f"groups has {len(groups)} labels but the series has {len(series)} values."
        )

    rows = []
    for label in pd.unique(groups):
        member = series[np.asarray(groups == label)]
        start_index = 0 if start is None else biofix_position(member.index, start)
        crossing = first_crossing(list(member.to_numpy(dtype=float)), target, start_index)
        if crossing is None:
            rows.append({"group": label, "date": pd.NaT, "index": np.nan, "accumulated": np.nan})
        else:
            rows.append(
                {
                    "group": label,
                    "date": member.index[crossing.index],
                    "index": crossing.index,
                    "accumulated": crossing.accumulated_value,
                }
            )

    result = pd.DataFrame.from_records(rows, columns=["group", "date", "index", "accumulated"])
    result["date"] = pd.to_datetime(result["date"])
    return result.set_index("group")
