"""
Tests for the histogram builder.
"""
import datetime

import numpy as np
import pandas as pd
import pytest

from nicebins import BinSpec, DataType, DateBinSpec, bin_accessor, histogram
from nicebins.errors import EmptyDatasetError, InvalidOptionsError

NUMBERS = [1, 2, 3, 4, 5, 6, 7, 1, 2, 3, 4, 5, 1, 2, 3]
DATES = [
    datetime.datetime(1979, 6, 15),
    datetime.datetime(1982, 3, 19),
    datetime.datetime(1985, 5, 20),
]
YEARS = [datetime.datetime(y, 1, 1) for y in range(1979, 1986)]


class TestNumericHistogram:
    """Test dense numeric histograms."""

    def test_numeric_values(self):
        h = histogram(NUMBERS, maxbins=10)
        assert h.values() == [1, 2, 3, 4, 5, 6, 7]
        assert h.counts() == [3, 3, 3, 2, 2, 1, 1]
        assert h.type == DataType.NUMBER
        assert isinstance(h.bins, BinSpec)

    def test_ignores_null_values(self):
        numbers = [None, 1, 2, 3, float("nan"), 4, 5, 6, None, 7, 1, 2, 3, 4, 5, 1, np.nan, 2, 3]
        h = histogram(numbers, maxbins=10)
        assert h.values() == [1, 2, 3, 4, 5, 6, 7]
        assert h.counts() == [3, 3, 3, 2, 2, 1, 1]

    def test_integer_values(self):
        h = histogram(NUMBERS, type="integer", maxbins=20)
        assert h.values() == [1, 2, 3, 4, 5, 6, 7]
        assert h.counts() == [3, 3, 3, 2, 2, 1, 1]
        assert h.type == DataType.INTEGER

    def test_integer_step_never_below_one(self):
        assert histogram([0, 1], type="number").bins.step < 1
        h = histogram([0, 1], type="integer")
        assert h.bins.step == 1
        assert h.counts() == [1, 1]

    def test_dense_output_fills_gaps(self):
        h = histogram([0, 0, 10], maxbins=10)
        assert h.values() == [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
        assert h.counts() == [2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1]
        assert len(h) == h.bins.num_bins + 1

    def test_conservation(self):
        rng = np.random.default_rng(7)
        data = list(rng.normal(50, 20, size=500)) + [None, float("nan"), "x"]
        h = histogram(data, type="number", maxbins=12)
        assert h.total == 500
        assert h.bins.num_bins <= 12

    def test_fixed_step(self):
        h = histogram([0.5, 1.5, 2.5, 8.9], step=3)
        assert h.values() == [0, 3, 6, 9]
        assert h.counts() == [3, 0, 1, 0]

    def test_explicit_range_skips_outliers(self):
        h = histogram([1, 2, 3, 50], min=0, max=10, maxbins=10)
        assert h.values()[0] == 0
        assert h.values()[-1] == 10
        assert h.total == 3

    def test_single_value(self):
        h = histogram([5, 5, 5])
        assert len(h) == 1
        assert h[0].value == pytest.approx(5)
        assert h[0].count == 3

    def test_accessor_field(self):
        records = [{"a": {"b": v}} for v in NUMBERS]
        h = histogram(records, "a.b", maxbins=10)
        assert h.counts() == [3, 3, 3, 2, 2, 1, 1]

    def test_accessor_callable(self):
        h = histogram(NUMBERS, lambda v: v * 10, maxbins=10)
        assert h.values() == [10, 20, 30, 40, 50, 60, 70]


class TestDateHistogram:
    """Test dense date histograms."""

    def test_date_values(self):
        h = histogram(DATES)
        assert isinstance(h.bins, DateBinSpec)
        assert h.bins.unit.name == "year"
        assert h.values() == YEARS
        assert h.counts() == [1, 0, 0, 1, 0, 0, 1]

    def test_ignores_null_values(self):
        dates = [None, DATES[0], None, DATES[1], float("nan"), DATES[2], pd.NaT]
        h = histogram(dates)
        assert h.bins.unit.name == "year"
        assert h.values() == YEARS
        assert h.counts() == [1, 0, 0, 1, 0, 0, 1]

    def test_pandas_and_numpy_dates(self):
        dates = [pd.Timestamp(DATES[0]), np.datetime64(DATES[1]), DATES[2].date()]
        h = histogram(dates)
        assert h.values() == YEARS
        assert h.counts() == [1, 0, 0, 1, 0, 0, 1]

    def test_explicit_unit(self):
        h = histogram(DATES, unit="month")
        assert h.bins.unit.name == "month"
        assert h.total == 3
        assert all(v.day == 1 for v in h.values())

    @pytest.mark.parametrize("options", [
        {"step": 2}, {"steps": [1, 2]}, {"minstep": 1}, {"div": [2]}, {"base": 2},
    ])
    def test_numeric_step_options_rejected(self, options):
        """Step controls for numbers do not apply to calendar bins."""
        with pytest.raises(InvalidOptionsError):
            histogram(DATES, **options)
        with pytest.raises(InvalidOptionsError):
            bin_accessor(DATES, **options)

    def test_single_date(self):
        d = datetime.datetime(2020, 5, 17, 13, 45)
        h = histogram([d, d])
        assert len(h) == 1
        assert h.counts() == [2]


class TestCategoricalHistogram:
    """Test categorical histograms."""

    def test_string_values(self):
        strings = list("aaaaaabbbbbccccccccdddddeeeeeeefffff")
        h = histogram(strings)
        assert h.values() == ["a", "b", "c", "d", "e", "f"]
        assert h.counts() == [6, 5, 8, 5, 7, 5]
        assert h.bins is None
        assert h.type == DataType.STRING

    def test_sorted_by_value_not_first_seen(self):
        h = histogram(list("ccbbba"))
        assert h.values() == ["a", "b", "c"]
        assert h.counts() == [1, 3, 2]

    def test_sort_by_count(self):
        strings = list("aaaaaabbbbbccccccccdddddeeeeeeefffff")
        h = histogram(strings, sort="count")
        assert h.values() == ["c", "e", "a", "b", "d", "f"]
        assert h.counts() == [8, 7, 6, 5, 5, 5]

    def test_count_ties_ordered_by_value(self):
        h = histogram(list("dbbcaa"), sort="count")
        assert h.values() == ["a", "b", "c", "d"]
        assert h.counts() == [2, 2, 1, 1]
        assert all(type(c) is int for c in h.counts())

    def test_ignores_null_values(self):
        h = histogram([None, "x", float("nan"), "y", "x"])
        assert h.values() == ["x", "y"]
        assert h.counts() == [2, 1]

    def test_boolean_values(self):
        h = histogram([True, False, True, None, True])
        assert h.type == DataType.BOOLEAN
        assert h.values() == [False, True]
        assert h.counts() == [1, 3]


class TestHistogramErrors:
    """Test empty inputs and bad options."""

    def test_all_missing(self):
        with pytest.raises(EmptyDatasetError):
            histogram([None, float("nan")])

    def test_no_valid_values_for_type(self):
        with pytest.raises(EmptyDatasetError):
            histogram(["a", "b"], type="number")

    def test_empty_with_explicit_range(self):
        h = histogram([], type="number", min=0, max=10)
        assert len(h) == h.bins.num_bins + 1
        assert h.total == 0

    def test_unknown_option(self):
        with pytest.raises(InvalidOptionsError):
            histogram(NUMBERS, colour="red")

    def test_unknown_type(self):
        with pytest.raises(InvalidOptionsError):
            histogram(NUMBERS, type="complex")


class TestHistogramOutput:
    """Test conversions of a built histogram."""

    def test_records(self):
        records = histogram(NUMBERS, maxbins=10).to_records()
        assert records[0].model_dump() == {"value": 1, "count": 3}

    def test_frame(self):
        df = histogram(list("aab")).to_frame()
        assert list(df.columns) == ["value", "count"]
        assert df["count"].tolist() == [2, 1]

    def test_immutable(self):
        h = histogram(NUMBERS, maxbins=10)
        with pytest.raises(AttributeError):
            h.bins = None
        with pytest.raises(AttributeError):
            h[0].count = 99


class TestBinAccessor:
    """Test record-to-bin mapping."""

    def test_numeric(self):
        f = bin_accessor([0, 100], maxbins=10)
        assert f(37) == 30
        assert f(None) is None
        assert f.bins.step == 10

    def test_dates(self):
        f = bin_accessor(DATES)
        assert f(datetime.datetime(1982, 3, 19)) == datetime.datetime(1982, 1, 1)

    def test_field(self):
        f = bin_accessor([{"v": 1}, {"v": 99}], "v", maxbins=10)
        assert f({"v": 55}) == 50

    def test_categorical_returns_accessor(self):
        f = bin_accessor([{"k": "a"}], "k")
        assert f({"k": "b"}) == "b"
