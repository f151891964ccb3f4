"""
Agroclimate metrics over daily series.

Every function takes a ``pandas.Series`` indexed by a sorted ``DatetimeIndex``
and returns a small table keyed by year (or water year).
"""

from __future__ import annotations

import logging
from typing import Literal

import numpy as np
import pandas as pd

from .accumulate import first_crossing_by_group, running_total
from .classify import Comparator, classify_series
from .runs import detect_runs, filter_runs, runs_to_frame
from .series import water_year

logger = logging.getLogger(__name__)

Period = Literal["year", "water_year"]

# last spring frost is searched up to this month, first fall frost after it
_FROST_SPLIT_MONTH = 7


def _period_labels(index: pd.DatetimeIndex, by: Period) -> pd.Index:
    if by == "year":
        return pd.Index(index.year, name="year")
    if by == "water_year":
        return water_year(index)
    raise ValueError(f"Unknown period '{by}'. Use 'year' or 'water_year'.")


def count_days(
    series: pd.Series,
    comparator: Comparator,
    threshold: float,
    by: Period = "year",
) -> pd.Series:
    """Number of days per period for which ``series <comparator> threshold``."""
    flags = classify_series(series, comparator, threshold)
    labels = _period_labels(series.index, by)
    counts = flags.groupby(labels).sum().astype(int)
    counts.name = "days"
    return counts


def find_spells(flags: pd.Series, min_length: int = 1) -> pd.DataFrame:
    """
    Runs of consecutive ``True`` flags lasting at least ``min_length`` days.

    Returns a table with ``start``, ``end`` and ``length``. Consecutive means
    consecutive observations; gaps in the index are not bridged or broken.
    Missing flags count as ``False``.
    """
    if min_length < 1:
        raise ValueError(f"min_length must be at least 1, got {min_length}")

    runs = detect_runs(flags.fillna(False).to_numpy(dtype=bool))
    spells = filter_runs(runs, lambda value, length: bool(value) and length >= min_length)
    table = runs_to_frame(spells, flags.index)
    return table[["start", "end", "length"]].reset_index(drop=True)


def heatwaves(
    tmax: pd.Series,
    threshold: float,
    min_length: int = 3,
    comparator: Comparator = ">",
) -> pd.DataFrame:
    return find_spells(classify_series(tmax, comparator, threshold), min_length)


def heatwave_summary(
    tmax: pd.Series,
    threshold: float,
    min_length: int = 3,
    comparator: Comparator = ">",
) -> pd.DataFrame:
    """
    Per-year heatwave count, longest heatwave and total heatwave days.

    A heatwave is credited to the year in which it starts. Years with no
    heatwave are reported with zeros.
    """
    spells = heatwaves(tmax, threshold, min_length, comparator)
    years = pd.Index(sorted(set(tmax.index.year)), name="year")
    summary = pd.DataFrame(
        {"heatwaves": 0, "longest": 0, "heatwave_days": 0}, index=years
    )
    if spells.empty:
        return summary

    start_year = pd.DatetimeIndex(spells["start"]).year
    grouped = spells.groupby(start_year)["length"]
    summary.loc[grouped.size().index, "heatwaves"] = grouped.size().to_numpy()
    summary.loc[grouped.max().index, "longest"] = grouped.max().to_numpy()
    summary.loc[grouped.sum().index, "heatwave_days"] = grouped.sum().to_numpy()
    return summary.astype(int)


def _frost_dates(tmin: pd.Series, threshold: float, spring: bool) -> pd.Series:
    flags = classify_series(tmin, "<=", threshold)
    index = tmin.index
    in_window = index.month <= _FROST_SPLIT_MONTH if spring else index.month > _FROST_SPLIT_MONTH
    frost_days = index[np.asarray(flags) & in_window]

    years = pd.Index(sorted(set(index.year)), name="year")
    dates = pd.Series(frost_days, index=frost_days.year)
    if spring:
        picked = dates.groupby(level=0).max()
    else:
        picked = dates.groupby(level=0).min()
    return picked.reindex(years).astype("datetime64[ns]")


def last_spring_frost(tmin: pd.Series, threshold: float = 0.0) -> pd.Series:
    """Last date from January through July with ``tmin <= threshold``, per year (NaT if none)."""
    return _frost_dates(tmin, threshold, spring=True).rename("last_spring_frost")


def first_fall_frost(tmin: pd.Series, threshold: float = 0.0) -> pd.Series:
    """First date from August through December with ``tmin <= threshold``, per year (NaT if none)."""
    return _frost_dates(tmin, threshold, spring=False).rename("first_fall_frost")


def frost_free_season(tmin: pd.Series, threshold: float = 0.0) -> pd.DataFrame:
    """
    Frost-free season per year: last spring frost, first fall frost and the
    number of days between them.

    Years without a spring frost or without a fall frost have a NaN length.
    """
    spring = last_spring_frost(tmin, threshold)
    fall = first_fall_frost(tmin, threshold)
    season = pd.concat([spring, fall], axis=1)
    season["frost_free_days"] = (season["first_fall_frost"] - season["last_spring_frost"]).dt.days
    return season


def degree_day_target_dates(
    degree_days: pd.Series,
    target: float,
    biofix: str = "01-01",
) -> pd.DataFrame:
    """
    First date per year on which degree days accumulated since ``biofix`` reach ``target``.

    Missing days contribute nothing to the accumulation.
    """
    missing = int(degree_days.isna().sum())
    if missing:
        logger.warning(f"{missing} day(s) without degree days are skipped in the accumulation")
    clean = degree_days.dropna()

    result = first_crossing_by_group(clean, target, groups=clean.index.year, start=biofix)
    result.index.name = "year"
    result = result.drop(columns="index")
    result["day_of_year"] = result["date"].dt.dayofyear
    return result


def cumulative_by_period(series: pd.Series, by: Period = "water_year") -> pd.Series:
    """
    Running totals that restart each year or water year (e.g. ETo, precipitation).

    Missing values contribute nothing but stay missing in the output.
    """
    labels = _period_labels(series.index, by)
    filled = series.fillna(0.0).astype(float)

    totals = pd.Series(np.nan, index=series.index, name=series.name)
    for label in pd.unique(labels):
        mask = np.asarray(labels == label)
        totals[mask] = running_total(list(filled[mask].to_numpy()))
    return totals.where(series.notna())
