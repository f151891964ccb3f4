from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd


class InvalidInputOrder(ValueError):
    """Dates are duplicated or not strictly increasing."""


def validate_dates(dates: Sequence) -> pd.DatetimeIndex:
    """
    Check that ``dates`` are strictly increasing and unique.

    Returns the dates as a ``DatetimeIndex``. Gaps are allowed; they are not filled.
    """
    try:
        index = pd.DatetimeIndex(dates)
    except (TypeError, ValueError) as exc:
        raise TypeError("dates must be datetime-like.") from exc

    if index.hasnans:
        raise InvalidInputOrder("Dates contain missing values.")

    duplicated = index[index.duplicated()]
    if len(duplicated):
        raise InvalidInputOrder(
            f"Found {len(duplicated)} duplicate date(s), first: {duplicated[0].date()}"
        )

    if not index.is_monotonic_increasing:
        steps = np.flatnonzero(index[1:] < index[:-1])
        position = int(steps[0]) + 1
        raise InvalidInputOrder(
            f"Dates are not increasing at position {position}: "
            f"{index[position - 1].date()} followed by {index[position].date()}"
        )
    return index


def validate_series(series: pd.Series) -> pd.Series:
    validate_dates(series.index)
    return series


def water_year(dates: Sequence) -> pd.Index:
    """Label each date with its water year (Oct 1 - Sep 30, named by the ending year)."""
    index = pd.DatetimeIndex(dates)
    labels = np.where(index.month >= 10, index.year + 1, index.year)
    return pd.Index(labels, name="water_year")


def parse_month_day(text: str) -> tuple[int, int]:
    """Parse an ``MM-DD`` string such as a biofix into ``(month, day)``."""
    try:
        month_text, day_text = str(text).strip().split("-")
        month, day = int(month_text), int(day_text)
        # non-leap reference year so 02-29 is rejected
        pd.Timestamp(year=2001, month=month, day=day)
    except ValueError as exc:
        raise ValueError(f"Expected a month-day like '03-15', got {text!r}") from exc
    return month, day


def biofix_position(dates: Sequence, month_day: str) -> int:
    """
    Position of the first observation on or after the biofix within ``dates``.

    The biofix is the first occurrence of ``month_day`` inside the span of
    ``dates``. If it falls before the first date the result is 0; if the span
    ends before it the result is ``len(dates)``.
    """
    index = pd.DatetimeIndex(dates)
    if len(index) == 0:
        return 0

    month, day = parse_month_day(month_day)
    first = index[0].normalize()
    last = index[-1].normalize()

    for year in range(first.year, last.year + 1):
        candidate = pd.Timestamp(year=year, month=month, day=day)
        if first <= candidate <= last:
            return int(index.normalize().searchsorted(candidate, side="left"))

    if pd.Timestamp(year=first.year, month=month, day=day) < first:
        return 0
    return len(index)
