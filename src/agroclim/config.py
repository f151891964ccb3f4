from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .series import parse_month_day

SOURCES = ("cimis", "gridmet")


@dataclass
class AnalysisConfig:
    source: str = "cimis"
    station_csv: Optional[Path] = None
    tmax_item: str = "DayAirTmpMax"
    tmin_item: str = "DayAirTmpMin"
    gridmet_path: Optional[Path] = None
    gridmet_lat: Optional[float] = None
    gridmet_lon: Optional[float] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    hot_threshold: float = 38.0
    heatwave_min_length: int = 3
    frost_threshold: float = 0.0
    dd_lower: float = 10.0
    dd_upper: Optional[float] = 30.0
    dd_target: Optional[float] = None
    biofix: str = "01-01"
    output_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.source not in SOURCES:
            raise ValueError(f"Unknown source '{self.source}'. Use one of {list(SOURCES)}")
        if self.source == "cimis" and self.station_csv is None:
            raise ValueError("station_csv is required when source=cimis")
        if self.source == "gridmet" and (
            self.gridmet_path is None or self.gridmet_lat is None or self.gridmet_lon is None
        ):
            raise ValueError("gridmet_path, gridmet_lat and gridmet_lon are required when source=gridmet")
        if self.start_year is not None and self.end_year is not None and self.start_year > self.end_year:
            raise ValueError("start_year must be less than or equal to end_year")
        if self.heatwave_min_length < 1:
            raise ValueError(f"heatwave_min_length must be at least 1, got {self.heatwave_min_length}")
        if self.dd_upper is not None and self.dd_upper <= self.dd_lower:
            raise ValueError("dd_upper must be above dd_lower")
        parse_month_day(self.biofix)

    @property
    def output_prefix(self) -> str:
        if self.source == "cimis":
            return Path(self.station_csv).stem.lower()
        return "gridmet"


def parse_config_file(path: str | Path) -> AnalysisConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    values: Dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip().lower()] = value.strip()

    def _maybe(key: str, cast):
        raw = values.get(key)
        if not raw:
            return None
        try:
            return cast(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid value for '{key}': {raw!r}") from exc

    def _maybe_path(key: str) -> Optional[Path]:
        return _maybe(key, Path)

    defaults = AnalysisConfig.__dataclass_fields__
    kwargs = {
        "source": values.get("source", "cimis").lower(),
        "station_csv": _maybe_path("station_csv"),
        "gridmet_path": _maybe_path("gridmet_path"),
        "gridmet_lat": _maybe("gridmet_lat", float),
        "gridmet_lon": _maybe("gridmet_lon", float),
        "start_year": _maybe("start_year", int),
        "end_year": _maybe("end_year", int),
        "dd_target": _maybe("dd_target", float),
        "output_dir": _maybe_path("output_dir"),
    }
    for key, cast in (
        ("tmax_item", str),
        ("tmin_item", str),
        ("hot_threshold", float),
        ("heatwave_min_length", int),
        ("frost_threshold", float),
        ("dd_lower", float),
        ("biofix", str),
    ):
        parsed = _maybe(key, cast)
        kwargs[key] = parsed if parsed is not None else defaults[key].default

    if "dd_upper" in values:
        kwargs["dd_upper"] = None if values["dd_upper"].lower() in ("", "none") else _maybe("dd_upper", float)

    return AnalysisConfig(**kwargs)
