from __future__ import annotations

import operator
from typing import Any, Callable, Iterable, NamedTuple, Sequence

import pandas as pd


class Run(NamedTuple):
    value: Any
    start_index: int
    length: int


def detect_runs(
    sequence: Iterable[Any],
    eq: Callable[[Any, Any], bool] = operator.eq,
) -> list[Run]:
    """
    Split an ordered sequence into maximal runs of equal values.

    Parameters
    ----------
    sequence:
        Any finite ordered iterable (list, tuple, numpy array, pandas Series values).
    eq:
        Equality used to decide whether a value continues the current run.
        Defaults to exact ``==``; pass a tolerance-aware callable for floats.

    Returns
    -------
    list[Run]
        Runs in input order. Their lengths sum to the input length and no two
        neighbouring runs compare equal.
    """
    runs: list[Run] = []
    current = None
    start = 0
    length = 0

    for position, value in enumerate(sequence):
        if length and eq(current, value):
            length += 1
            continue
        if length:
            runs.append(Run(current, start, length))
        current = value
        start = position
        length = 1

    if length:
        runs.append(Run(current, start, length))
    return runs


def filter_runs(runs: Iterable[Run], predicate: Callable[[Any, int], bool]) -> list[Run]:
    """Keep the runs for which ``predicate(value, length)`` holds."""
    return [run for run in runs if predicate(run.value, run.length)]


def expand_runs(runs: Iterable[Run]) -> list[Any]:
    expanded: list[Any] = []
    for run in runs:
        expanded.extend([run.value] * run.length)
    return expanded


def runs_to_frame(runs: Sequence[Run], index: Sequence[Any]) -> pd.DataFrame:
    """
    Tabulate runs together with the index labels (usually dates) they span.

    ``index`` must be the index of the sequence the runs were detected on.
    """
    columns = ["value", "start_index", "length", "start", "end"]
    if not runs:
        return pd.DataFrame(columns=columns)

    index = pd.Index(index)
    if runs[-1].start_index + runs[-1].length > len(index):
        raise ValueError(
            f"Runs cover {runs[-1].start_index + runs[-1].length} positions "
            f"but the index only has {len(index)}."
        )

    records = [
        {
            "value": run.value,
            "start_index": run.start_index,
            "length": run.length,
            "start": index[run.start_index],
            "end": index[run.start_index + run.length - 1],
        }
        for run in runs
    ]
    return pd.DataFrame.from_records(records, columns=columns)
