from __future__ import annotations

import logging
import os
from glob import glob
from pathlib import Path
from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd
import xarray as xr

logger = logging.getLogger(__name__)

CIMIS_NA_VALUES = ["None", "--", "", " ", "  ", "NA", "N/A", "NaN"]

# Heuristics used to find the data variable inside gridMET files
GRIDMET_VARIABLE_HINTS = {
    "tmmx": "air_temperature",
    "tmmn": "air_temperature",
    "pr": "precipitation_amount",
    "eto": "potential_evapotranspiration",
    "srad": "surface_downwelling_shortwave_flux_in_air",
}


def _filter_years(file_paths: Sequence[str], start_year: Optional[int], end_year: Optional[int]) -> list[str]:
    if start_year is None and end_year is None:
        return list(file_paths)

    selected: list[str] = []
    for path in file_paths:
        stem = Path(path).stem
        digits = "".join(ch for ch in stem if ch.isdigit())
        if len(digits) < 4:
            continue
        year = int(digits[-4:])
        if start_year is not None and year < start_year:
            continue
        if end_year is not None and year > end_year:
            continue
        selected.append(path)
    return selected


def _resolve_column(columns: Sequence[str], item: str) -> str:
    lookup = {str(col).lower().strip(): col for col in columns}
    for candidate in (item, f"{item}.Value"):
        key = candidate.lower().strip()
        if key in lookup:
            return lookup[key]
    raise KeyError(f"Column '{item}' not present in station file. Available: {list(columns)}")


def load_station_csv(
    csv_path: str | Path,
    items: Mapping[str, str],
    *,
    date_column: str = "Date",
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
) -> pd.DataFrame:
    """
    Load selected variables from a CIMIS daily station export.

    Parameters
    ----------
    csv_path:
        CSV written from the CIMIS API records (one row per day).
    items:
        Mapping of output name to CIMIS data item or column, e.g.
        ``{"tmax": "DayAirTmpMax", "tmin": "DayAirTmpMin"}``. Matching is case
        insensitive and accepts the ``.Value`` suffix of normalized API records.
    date_column:
        Name of the date column.
    start_year, end_year:
        Optional inclusive year bounds.

    Returns
    -------
    pandas.DataFrame
        Numeric columns named after ``items`` keys, indexed by a sorted, unique
        ``date`` index.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Station file not found: {csv_path}")

    raw = pd.read_csv(csv_path, na_values=CIMIS_NA_VALUES, keep_default_na=True)
    date_col = _resolve_column(raw.columns, date_column)

    data = pd.DataFrame(index=raw.index)
    data["date"] = pd.to_datetime(raw[date_col], errors="coerce")
    for name, item in items.items():
        data[name] = pd.to_numeric(raw[_resolve_column(raw.columns, item)], errors="coerce")

    bad_dates = int(data["date"].isna().sum())
    if bad_dates:
        logger.warning(f"Dropping {bad_dates} row(s) with unparseable dates from {csv_path.name}")
        data = data.dropna(subset=["date"])

    if start_year is not None:
        data = data[data["date"].dt.year >= start_year]
    if end_year is not None:
        data = data[data["date"].dt.year <= end_year]

    n_rows = len(data)
    data = data.sort_values("date", kind="mergesort").drop_duplicates(subset=["date"], keep="first")
    if len(data) < n_rows:
        logger.warning(f"Dropped {n_rows - len(data)} duplicate date(s) from {csv_path.name}")

    data = data.set_index("date")
    logger.info(f"Loaded {len(data)} days from {csv_path.name}: {list(items)}")
    return data


def _find_data_variable(dataset: xr.Dataset, variable: str) -> str:
    if variable in dataset.data_vars:
        return variable

    data_vars = [name for name in dataset.data_vars if name not in ("crs", "spatial_ref")]
    if len(data_vars) == 1:
        return data_vars[0]

    hint = GRIDMET_VARIABLE_HINTS.get(variable, variable)
    for name in data_vars:
        if hint in name:
            return name
    raise KeyError(f"Variable '{variable}' not present in dataset. Available: {data_vars}")


def select_point_series(dataset: xr.Dataset, variable: str, lat: float, lon: float) -> pd.Series:
    """
    Extract the daily series of the grid cell nearest to ``(lat, lon)``.

    gridMET stores time along ``day``; it is renamed to ``time``. Temperatures in
    Kelvin are returned in degrees Celsius.
    """
    name = _find_data_variable(dataset, variable)
    data_array = dataset[name]

    if "day" in data_array.dims:
        data_array = data_array.rename({"day": "time"})
    if "time" not in data_array.dims:
        raise ValueError(f"Variable '{name}' has no 'time' or 'day' dimension: {data_array.dims}")

    dim_renames = {}
    if "latitude" in data_array.dims and "longitude" in data_array.dims:
        dim_renames.update({"latitude": "lat", "longitude": "lon"})
    if dim_renames:
        data_array = data_array.rename(dim_renames)

    point = data_array.sel(lat=lat, lon=lon, method="nearest")
    logger.debug(
        f"Nearest cell to ({lat}, {lon}) is ({float(point.lat)}, {float(point.lon)})"
    )

    values = np.asarray(point.values, dtype=float)
    if data_array.attrs.get("units") == "K":
        values = values - 273.15

    series = pd.Series(values, index=pd.DatetimeIndex(point["time"].values, name="date"), name=variable)
    return series.sort_index()


def load_gridmet_point(
    base_path: str | Path,
    variable: str,
    lat: float,
    lon: float,
    *,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    engine: str = "netcdf4",
    file_pattern: Optional[str] = None,
) -> pd.Series:
    """
    Load a gridMET variable at one point from yearly files (``{variable}_YYYY.nc``).
    """
    if file_pattern:
        pattern = os.path.join(str(base_path), file_pattern)
    else:
        pattern = os.path.join(str(base_path), f"{variable}_*.nc")
    files = _filter_years(sorted(glob(pattern)), start_year, end_year)

    if not files:
        raise FileNotFoundError(f"No files matched pattern {pattern} within selected years.")

    logger.info(f"Opening {len(files)} gridMET file(s) for '{variable}'")
    with xr.open_mfdataset(files, combine="by_coords", engine=engine) as ds:
        series = select_point_series(ds, variable, lat, lon)

    if start_year is not None:
        series = series[series.index.year >= start_year]
    if end_year is not None:
        series = series[series.index.year <= end_year]
    return series
