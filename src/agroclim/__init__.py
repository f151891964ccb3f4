"""
Agroclimate metrics from daily CIMIS station and gridMET weather series.
"""

from .runs import Run, detect_runs, filter_runs, expand_runs, runs_to_frame
from .accumulate import Crossing, first_crossing, first_crossing_by_group, running_total
from .classify import classify, classify_series, list_available_comparators
from .series import InvalidInputOrder, validate_dates, validate_series, water_year
from .degree_days import daily_degree_days
from .metrics import (
    count_days,
    cumulative_by_period,
    degree_day_target_dates,
    find_spells,
    first_fall_frost,
    frost_free_season,
    heatwave_summary,
    heatwaves,
    last_spring_frost,
)
from .io import load_gridmet_point, load_station_csv, select_point_series
from .processing import run_pipeline

__version__ = "0.1.0"
__all__ = [
    # Core
    "Run",
    "detect_runs",
    "filter_runs",
    "expand_runs",
    "runs_to_frame",
    "Crossing",
    "first_crossing",
    "first_crossing_by_group",
    "running_total",
    "classify",
    "classify_series",
    "list_available_comparators",
    # Series
    "InvalidInputOrder",
    "validate_dates",
    "validate_series",
    "water_year",
    # Metrics
    "daily_degree_days",
    "count_days",
    "cumulative_by_period",
    "degree_day_target_dates",
    "find_spells",
    "first_fall_frost",
    "frost_free_season",
    "heatwave_summary",
    "heatwaves",
    "last_spring_frost",
    # IO
    "load_gridmet_point",
    "load_station_csv",
    "select_point_series",
    "run_pipeline",
]
