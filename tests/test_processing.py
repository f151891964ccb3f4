"""
Tests for the end-to-end agroclimate pipeline and CLI.
"""
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from agroclim.cli import main
from agroclim.config import AnalysisConfig
from agroclim.processing import run_pipeline
from agroclim.series import InvalidInputOrder


def _station_rows(temperatures):
    return [
        {"Date": date.strftime("%Y-%m-%d"), "DayAirTmpMax.Value": row.tmax, "DayAirTmpMin.Value": row.tmin}
        for date, row in temperatures.iterrows()
    ]


def test_run_pipeline_with_frame(temperatures, tmp_path):
    tmax = temperatures["tmax"].copy()
    tmax["2021-07-01":"2021-07-04"] = 40.0
    temperatures = temperatures.assign(tmax=tmax)

    config = AnalysisConfig(station_csv=Path("davis.csv"), dd_target=500.0, biofix="03-01", output_dir=tmp_path)
    results = run_pipeline(config, save_results=False, temperatures=temperatures)

    assert results["n_days"] == len(temperatures)
    assert results["start_date"] == pd.Timestamp("2020-01-01")
    assert results["yearly_counts"].loc[2021, "hot_days"] == 4
    assert results["yearly_counts"].loc[2020, "hot_days"] == 0
    assert results["heatwaves"].loc[2021, "heatwaves"] == 1
    assert results["heatwaves"].loc[2021, "longest"] == 4
    assert results["degree_days"].min() >= 0
    assert results["degree_day_targets"]["date"].notna().all()
    assert results["output_dir"] is None


def test_run_pipeline_rejects_unordered_dates(temperatures):
    shuffled = temperatures.iloc[[0, 2, 1]]
    config = AnalysisConfig(station_csv=Path("davis.csv"))
    with pytest.raises(InvalidInputOrder):
        run_pipeline(config, save_results=False, temperatures=shuffled)


def test_run_pipeline_from_station_csv(temperatures, cimis_csv, tmp_path):
    path = cimis_csv(_station_rows(temperatures))
    output_dir = tmp_path / "out"
    config = AnalysisConfig(station_csv=path, dd_target=300.0, output_dir=output_dir)

    results = run_pipeline(config)

    assert results["n_days"] == len(temperatures)
    assert results["output_dir"] == output_dir
    for suffix in ("hot_days", "heatwaves", "frost_season", "degree_days", "degree_day_targets"):
        assert (output_dir / f"davis_6_{suffix}.csv").exists()


def test_cli_main(temperatures, cimis_csv, tmp_path, capsys):
    path = cimis_csv(_station_rows(temperatures))
    config_file = tmp_path / "run.cfg"
    config_file.write_text(f"station_csv = {path}\ndd_target = 300\n")

    assert main(["--config", str(config_file), "--no-save"]) == 0
    out = capsys.readouterr().out
    assert f"Loaded {len(temperatures)} days" in out
    assert "2021:" in out
    assert "degree-day target" in out


def test_cli_reports_errors(tmp_path):
    assert main(["--config", str(tmp_path / "missing.cfg")]) == 1


def test_run_pipeline_from_gridmet(temperatures, gridmet_dir, tmp_path):
    output_dir = tmp_path / "out"
    config = AnalysisConfig(
        source="gridmet",
        gridmet_path=gridmet_dir,
        gridmet_lat=38.5,
        gridmet_lon=-121.7,
        start_year=2021,
        dd_target=300.0,
        output_dir=output_dir,
    )

    results = run_pipeline(config)

    assert results["n_days"] == 365
    assert results["start_date"] == pd.Timestamp("2021-01-01")
    assert results["end_date"] == pd.Timestamp("2021-12-31")
    assert list(results["yearly_counts"].index) == [2021]
    from_frame = run_pipeline(
        AnalysisConfig(station_csv=Path("davis.csv"), dd_target=300.0),
        save_results=False,
        temperatures=temperatures.loc["2021"],
    )
    assert results["degree_days"].index.equals(from_frame["degree_days"].index)
    np.testing.assert_allclose(results["degree_days"].to_numpy(), from_frame["degree_days"].to_numpy())
    assert results["degree_day_targets"]["date"].equals(from_frame["degree_day_targets"]["date"])
    for suffix in ("hot_days", "heatwaves", "frost_season", "degree_days", "degree_day_targets"):
        assert (output_dir / f"gridmet_{suffix}.csv").exists()
