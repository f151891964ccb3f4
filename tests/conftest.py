import numpy as np
import pandas as pd
import pytest
import xarray as xr

GRIDMET_LAT = np.array([38.6, 38.5])
GRIDMET_LON = np.array([-121.8, -121.7])
# added to every day so each cell of the 2x2 grid is distinguishable; (38.5, -121.7) gets 0
GRIDMET_CELL_OFFSETS = np.array([[3.0, 2.0], [1.0, 0.0]])


@pytest.fixture
def daily_index():
    return pd.date_range("2020-01-01", "2021-12-31", freq="D", name="date")


@pytest.fixture
def temperatures(daily_index):
    """Two years of synthetic tmin/tmax (degC) with a seasonal cycle."""
    doy = daily_index.dayofyear.to_numpy()
    seasonal = -np.cos(2 * np.pi * (doy - 15) / 365.25)
    tmax = 24.0 + 12.0 * seasonal
    tmin = 8.0 + 9.0 * seasonal
    return pd.DataFrame({"tmin": tmin, "tmax": tmax}, index=daily_index)


@pytest.fixture
def cimis_csv(tmp_path):
    """Write a small CIMIS API export as saved by json_normalize + to_csv."""
    def _write(rows, name="Davis_6.csv"):
        frame = pd.DataFrame(rows)
        path = tmp_path / name
        frame.to_csv(path, index=False)
        return path

    return _write


@pytest.fixture
def gridmet_dir(tmp_path, temperatures):
    """Yearly gridMET files (tmmx_YYYY.nc, tmmn_YYYY.nc) in Kelvin built from ``temperatures``."""
    directory = tmp_path / "gridmet"
    directory.mkdir()
    for variable, column in (("tmmx", "tmax"), ("tmmn", "tmin")):
        for year, frame in temperatures.groupby(temperatures.index.year):
            kelvin = frame[column].to_numpy() + 273.15
            values = kelvin[:, None, None] + GRIDMET_CELL_OFFSETS[None, :, :]
            dataset = xr.Dataset(
                {"air_temperature": (("day", "lat", "lon"), values, {"units": "K"})},
                coords={"day": frame.index.to_numpy(), "lat": GRIDMET_LAT, "lon": GRIDMET_LON},
            )
            dataset.to_netcdf(directory / f"{variable}_{year}.nc", engine="netcdf4")
    return directory
