"""
Histogram builder

Resolves the data type once, hands the values to the matching strategy and
wraps the (value, count) pairs in an immutable Histogram.
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

import pandas as pd

from . import util
from .bins import BinSpec, DateBinSpec
from .errors import EmptyDatasetError
from .models import QUANTITATIVE_TYPES, DataType, HistogramOptions, HistogramRecord, validate_options
from .strategies import registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bin:
    value: Any
    count: int


@dataclass(frozen=True)
class Histogram(Sequence):
    """
    Ordered (value, count) bins.

    For number, integer and date data ``bins`` holds the spec used so callers
    can recover bin edges; categorical histograms have ``bins=None``.
    """
    entries: Tuple[Bin, ...]
    bins: Union[BinSpec, DateBinSpec, None]
    type: DataType

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, i):
        return self.entries[i]

    def __iter__(self):
        return iter(self.entries)

    def values(self) -> List[Any]:
        return [b.value for b in self.entries]

    def counts(self) -> List[int]:
        return [b.count for b in self.entries]

    @property
    def total(self) -> int:
        return sum(b.count for b in self.entries)

    def to_records(self) -> List[HistogramRecord]:
        return [HistogramRecord(value=b.value, count=b.count) for b in self.entries]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"value": self.values(), "count": self.counts()})


def _extract(values: Iterable[Any], accessor) -> Tuple[List[Any], Optional[Callable]]:
    get = util.accessor(accessor)
    if get is None:
        return list(values), None
    return [get(v) for v in values], get


def resolve_type(values: List[Any], declared: Optional[str]) -> DataType:
    """Explicit type wins; otherwise detect from the first valid value"""
    if declared is not None and declared != "auto":
        return DataType(declared)
    detected = util.detect_type(values)
    if detected is None:
        raise EmptyDatasetError(
            "Cannot detect a type: every value is missing",
            suggestion="Pass type= explicitly",
        )
    return detected


def histogram(values: Iterable[Any], accessor: Union[str, Callable, None] = None, **options) -> Histogram:
    """
    Build a histogram of values.

    Options: type, maxbins, minbins, minstep, step, steps, div, base, unit,
    min, max, sort. Number, integer and date data produce one bin per step
    from ``bins.start`` through ``bins.stop`` (zero counts included);
    strings and booleans are counted by value, ascending, or by descending
    count when ``sort="count"``.
    """
    opts = validate_options(HistogramOptions, **options)
    raw, _ = _extract(values, accessor)
    data_type = resolve_type(raw, opts.type)

    strategy = registry.create(data_type, opts)
    entries, spec = strategy.build(raw)
    logger.debug("histogram type=%s bins=%d", data_type.value, len(entries))
    return Histogram(
        entries=tuple(Bin(value=v, count=c) for v, c in entries),
        bins=spec,
        type=data_type,
    )


def bin_accessor(values: Iterable[Any], accessor: Union[str, Callable, None] = None,
                 **options) -> Callable[[Any], Any]:
    """
    Return a function mapping a record to the lower edge of its bin.

    Bins are chosen from values exactly as histogram() would. Missing or
    mistyped values map to None. For categorical data the plain accessor
    (or identity) is returned.
    """
    opts = validate_options(HistogramOptions, **options)
    raw, get = _extract(values, accessor)
    data_type = resolve_type(raw, opts.type)
    get = get or (lambda x: x)

    if data_type not in QUANTITATIVE_TYPES:
        return get

    strategy = registry.create(data_type, opts)
    spec = strategy.spec(*strategy.extent(strategy.clean(raw)))

    def binned(record):
        v = get(record)
        if util.is_missing(v) or not strategy.is_valid(v):
            return None
        return spec.value(strategy.prepare(v))

    binned.bins = spec
    return binned
