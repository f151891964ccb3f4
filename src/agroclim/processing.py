from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .config import AnalysisConfig
from .degree_days import daily_degree_days
from .io import load_gridmet_point, load_station_csv
from .metrics import (
    count_days,
    degree_day_target_dates,
    frost_free_season,
    heatwave_summary,
)
from .series import validate_dates

logger = logging.getLogger(__name__)


def load_temperatures(config: AnalysisConfig) -> pd.DataFrame:
    """Daily ``tmin``/``tmax`` table for the configured source."""
    if config.source == "cimis":
        return load_station_csv(
            config.station_csv,
            {"tmax": config.tmax_item, "tmin": config.tmin_item},
            start_year=config.start_year,
            end_year=config.end_year,
        )

    columns = {}
    for name, variable in (("tmax", "tmmx"), ("tmin", "tmmn")):
        columns[name] = load_gridmet_point(
            config.gridmet_path,
            variable,
            config.gridmet_lat,
            config.gridmet_lon,
            start_year=config.start_year,
            end_year=config.end_year,
        )
    return pd.DataFrame(columns)


def run_pipeline(
    config: AnalysisConfig,
    *,
    save_results: bool = True,
    temperatures: Optional[pd.DataFrame] = None,
) -> Dict[str, pd.DataFrame | pd.Series | Path | int | None]:
    """
    Execute the agroclimate workflow for one station or grid cell.

    ``temperatures`` may be passed directly (columns ``tmin``/``tmax``) to skip
    loading from the configured source.
    """
    if temperatures is None:
        temperatures = load_temperatures(config)
    validate_dates(temperatures.index)

    tmax = temperatures["tmax"]
    tmin = temperatures["tmin"]
    logger.info(f"Analysing {len(temperatures)} days from source '{config.source}'")

    hot_days = count_days(tmax, ">", config.hot_threshold)
    frost_days = count_days(tmin, "<=", config.frost_threshold)
    yearly = pd.DataFrame({"hot_days": hot_days, "frost_days": frost_days})
    heat = heatwave_summary(tmax, config.hot_threshold, config.heatwave_min_length)
    frost = frost_free_season(tmin, config.frost_threshold)
    degree_days = daily_degree_days(tmin, tmax, config.dd_lower, config.dd_upper)

    targets = None
    if config.dd_target is not None:
        targets = degree_day_target_dates(degree_days, config.dd_target, config.biofix)
        reached = int(targets["date"].notna().sum())
        logger.info(f"Degree-day target {config.dd_target} reached in {reached}/{len(targets)} year(s)")

    output_dir = None
    if save_results and config.output_dir is not None:
        output_dir = _persist_outputs(config, yearly, heat, frost, degree_days, targets)

    return {
        "n_days": len(temperatures),
        "start_date": temperatures.index.min() if len(temperatures) else None,
        "end_date": temperatures.index.max() if len(temperatures) else None,
        "yearly_counts": yearly,
        "heatwaves": heat,
        "frost_season": frost,
        "degree_days": degree_days,
        "degree_day_targets": targets,
        "output_dir": output_dir,
    }


def _persist_outputs(
    config: AnalysisConfig,
    yearly: pd.DataFrame,
    heat: pd.DataFrame,
    frost: pd.DataFrame,
    degree_days: pd.Series,
    targets: Optional[pd.DataFrame],
) -> Path:
    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    base = config.output_prefix
    yearly.to_csv(output_dir / f"{base}_hot_days.csv")
    heat.to_csv(output_dir / f"{base}_heatwaves.csv")
    frost.to_csv(output_dir / f"{base}_frost_season.csv")
    degree_days.to_csv(output_dir / f"{base}_degree_days.csv")
    if targets is not None:
        targets.to_csv(output_dir / f"{base}_degree_day_targets.csv")
    logger.info(f"Results written to {output_dir}")
    return output_dir
