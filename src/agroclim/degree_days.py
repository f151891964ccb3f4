from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd


def daily_degree_days(
    tmin: pd.Series,
    tmax: pd.Series,
    lower: float,
    upper: Optional[float] = None,
) -> pd.Series:
    """
    Daily degree days by the simple average method with a horizontal cutoff.

    Daily extremes are clipped to ``[lower, upper]`` before averaging, and the
    result is the clipped mean minus ``lower``.

    Parameters
    ----------
    tmin, tmax:
        Daily minimum and maximum temperature on the same date index.
    lower:
        Lower developmental threshold, in the units of the temperatures.
    upper:
        Optional upper cutoff. ``None`` disables the cutoff.

    Returns
    -------
    pandas.Series
        Degree days per day (never negative). Days missing either extreme are NaN.
    """
    if upper is not None and upper <= lower:
        raise ValueError(f"Upper threshold ({upper}) must be above lower threshold ({lower})")
    if not tmin.index.equals(tmax.index):
        raise ValueError("tmin and tmax must share the same index.")

    low = tmin.clip(lower=lower, upper=upper)
    high = tmax.clip(lower=lower, upper=upper)
    dd = (low + high) / 2.0 - lower
    dd = dd.where(tmin.notna() & tmax.notna(), np.nan)
    return dd.clip(lower=0).rename("degree_days")
