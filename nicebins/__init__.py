"""
Nice axis binning and histograms for visualization

This module chooses human-friendly bin boundaries (steps of 1, 2 or 5 times
a power of ten, or whole calendar units) and builds dense histograms from
numeric, integer, date and categorical data.

Usage:
    from nicebins import bin, bin_date, histogram

    # Nice boundaries for a numeric range
    spec = bin(1.354, 98.432, maxbins=11)   # start=0, stop=100, step=10

    # Calendar boundaries for a date range
    spec = bin_date("2000-01-01", "2010-01-01")   # unit=year, step=1

    # Dense histogram
    h = histogram([1, 2, 2, 3, None, 7], maxbins=10)
    h.values(), h.counts()
"""

from . import date_units as units
from .bins import BinSpec, DateBinSpec, bin, bin_date
from .config import Settings, settings
from .errors import BinningError, EmptyDatasetError, InvalidOptionsError, InvalidRangeError
from .generate import date_sequence, range_sequence
from .histogram import Bin, Histogram, bin_accessor, histogram
from .models import DataType, HistogramRecord
from .util import accessor

__version__ = "1.0.0"

__all__ = [
    'bin',
    'bin_date',
    'histogram',
    'bin_accessor',
    'BinSpec',
    'DateBinSpec',
    'Bin',
    'Histogram',
    'HistogramRecord',
    'DataType',
    'BinningError',
    'InvalidRangeError',
    'EmptyDatasetError',
    'InvalidOptionsError',
    'accessor',
    'range_sequence',
    'date_sequence',
    'units',
    'Settings',
    'settings',
]
