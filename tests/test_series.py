import pandas as pd
import pytest

from agroclim.series import (
    InvalidInputOrder,
    biofix_position,
    parse_month_day,
    validate_dates,
    validate_series,
    water_year,
)


def test_validate_dates_accepts_gaps():
    index = validate_dates(["2021-01-01", "2021-01-02", "2021-01-10"])
    assert isinstance(index, pd.DatetimeIndex)
    assert len(index) == 3


def test_validate_dates_empty():
    assert len(validate_dates([])) == 0


def test_validate_dates_rejects_duplicates():
    with pytest.raises(InvalidInputOrder, match="duplicate"):
        validate_dates(["2021-01-01", "2021-01-02", "2021-01-02"])


def test_validate_dates_rejects_decreasing():
    with pytest.raises(InvalidInputOrder, match="position 2"):
        validate_dates(["2021-01-01", "2021-01-03", "2021-01-02"])


def test_invalid_input_order_is_value_error():
    assert issubclass(InvalidInputOrder, ValueError)


def test_validate_series_returns_series():
    series = pd.Series([1.0, 2.0], index=pd.to_datetime(["2021-05-01", "2021-05-02"]))
    assert validate_series(series) is series


def test_water_year_boundaries():
    labels = water_year(pd.to_datetime(["2020-09-30", "2020-10-01", "2021-01-15", "2021-09-30"]))
    assert list(labels) == [2020, 2021, 2021, 2021]
    assert labels.name == "water_year"


def test_parse_month_day():
    assert parse_month_day("03-15") == (3, 15)
    assert parse_month_day(" 1-1 ") == (1, 1)


@pytest.mark.parametrize("text", ["02-29", "13-01", "0315", "March 15"])
def test_parse_month_day_rejects(text):
    with pytest.raises(ValueError):
        parse_month_day(text)


def test_biofix_position_inside_span():
    dates = pd.date_range("2021-01-01", "2021-12-31", freq="D")
    assert biofix_position(dates, "01-01") == 0
    assert biofix_position(dates, "03-01") == 59


def test_biofix_position_with_gap_at_biofix():
    dates = pd.to_datetime(["2021-02-27", "2021-02-28", "2021-03-03", "2021-03-04"])
    assert biofix_position(dates, "03-01") == 2


def test_biofix_position_outside_span():
    dates = pd.date_range("2021-01-10", "2021-02-10", freq="D")
    assert biofix_position(dates, "01-01") == 0
    assert biofix_position(dates, "06-01") == len(dates)


def test_biofix_position_water_year_span():
    dates = pd.date_range("2020-10-01", "2021-09-30", freq="D")
    assert dates[biofix_position(dates, "03-01")] == pd.Timestamp("2021-03-01")
