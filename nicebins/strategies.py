"""
Histogram strategies, one per data type
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple, Type, Union

import numpy as np
import pandas as pd

from .bins import EPSILON, BinSpec, DateBinSpec, bin, bin_date
from .errors import EmptyDatasetError, InvalidOptionsError
from .models import DataType, HistogramOptions
from .util import is_boolean, is_date, is_missing, is_number, to_timestamp

logger = logging.getLogger(__name__)

Entries = List[Tuple[Any, int]]
Spec = Union[BinSpec, DateBinSpec, None]


class HistogramStrategy(ABC):
    """Base class for all histogram strategies"""

    # Subclasses must define these
    DATA_TYPES: List[DataType] = []

    def __init__(self, options: Optional[HistogramOptions] = None):
        self.options = options or HistogramOptions()

    @abstractmethod
    def is_valid(self, value: Any) -> bool:
        """True when value is a usable instance of this strategy's type"""
        pass

    @abstractmethod
    def build(self, values: List[Any]) -> Tuple[Entries, Spec]:
        """Return (value, count) pairs and the spec that produced them"""
        pass

    def prepare(self, value: Any) -> Any:
        """Convert a valid value to the form used for binning"""
        return value

    def clean(self, values: List[Any]) -> List[Any]:
        """Drop missing and mistyped values"""
        kept = [self.prepare(v) for v in values if not is_missing(v) and self.is_valid(v)]
        dropped = len(values) - len(kept)
        if dropped:
            logger.debug("%s: dropped %d invalid values", type(self).__name__, dropped)
        return kept


class QuantitativeStrategy(HistogramStrategy):
    """Dense histogram over bin boundaries chosen from the data extent"""

    @abstractmethod
    def spec(self, min_val: Any, max_val: Any) -> Union[BinSpec, DateBinSpec]:
        pass

    def extent(self, values: List[Any]) -> Tuple[Any, Any]:
        lo = self.options.min
        hi = self.options.max
        if lo is not None:
            lo = self.prepare(lo)
        if hi is not None:
            hi = self.prepare(hi)
        if values:
            lo = min(values) if lo is None else lo
            hi = max(values) if hi is None else hi
        if lo is None or hi is None:
            raise EmptyDatasetError(
                "No valid values to bin",
                suggestion="Provide data or explicit min and max options",
            )
        return lo, hi

    def indices(self, values: List[Any], spec) -> np.ndarray:
        return np.array([spec.index(v) for v in values], dtype=np.int64)

    def build(self, values: List[Any]) -> Tuple[Entries, Spec]:
        clean = self.clean(values)
        spec = self.spec(*self.extent(clean))
        edges = spec.edges()

        idx = self.indices(clean, spec)
        inside = (idx >= 0) & (idx < len(edges))
        if not inside.all():
            logger.debug("%d values fall outside the bin range", int((~inside).sum()))
        counts = np.bincount(idx[inside], minlength=len(edges))
        return [(edge, int(c)) for edge, c in zip(edges, counts)], spec


class NumberStrategy(QuantitativeStrategy):
    DATA_TYPES = [DataType.NUMBER]

    def is_valid(self, value: Any) -> bool:
        return is_number(value)

    def spec(self, min_val, max_val) -> BinSpec:
        return bin(min_val, max_val, **self.options.bin_options())

    def indices(self, values: List[Any], spec) -> np.ndarray:
        arr = np.asarray(values, dtype=float)
        return np.floor((arr - spec.start) / spec.step + EPSILON).astype(np.int64)


class IntegerStrategy(NumberStrategy):
    """Numeric binning that never picks a step below 1"""
    DATA_TYPES = [DataType.INTEGER]

    def spec(self, min_val, max_val) -> BinSpec:
        options = self.options.bin_options()
        options["minstep"] = max(1, options.get("minstep") or 1)
        return bin(min_val, max_val, **options)


class DateStrategy(QuantitativeStrategy):
    DATA_TYPES = [DataType.DATE]

    # calendar steps come from the unit, so these numeric controls have no meaning here
    NUMERIC_ONLY = ("step", "steps", "minstep", "div", "base")

    def __init__(self, options: Optional[HistogramOptions] = None):
        super().__init__(options)
        given = [name for name in self.NUMERIC_ONLY if getattr(self.options, name) is not None]
        if given:
            raise InvalidOptionsError(
                f"Options not supported for date data: {', '.join(given)}",
                suggestion="Use unit, maxbins and minbins to control date bins",
            )

    def is_valid(self, value: Any) -> bool:
        return is_date(value)

    def prepare(self, value: Any) -> Any:
        return to_timestamp(value)

    def spec(self, min_val, max_val) -> DateBinSpec:
        return bin_date(min_val, max_val, **self.options.date_options())


class CategoricalStrategy(HistogramStrategy):
    """Counts by exact value, no boundaries"""
    DATA_TYPES = [DataType.STRING, DataType.BOOLEAN]

    def __init__(self, options: Optional[HistogramOptions] = None, data_type: DataType = DataType.STRING):
        super().__init__(options)
        self.data_type = data_type

    def is_valid(self, value: Any) -> bool:
        if self.data_type == DataType.BOOLEAN:
            return is_boolean(value)
        return isinstance(value, str)

    def prepare(self, value: Any) -> Any:
        return bool(value) if self.data_type == DataType.BOOLEAN else value

    def build(self, values: List[Any]) -> Tuple[Entries, Spec]:
        clean = self.clean(values)
        if not clean:
            raise EmptyDatasetError("No valid values to count")

        counts = pd.Series(clean).value_counts().sort_index()
        if self.options.sort == "count":
            # stable, so equal counts stay in value order
            counts = counts.sort_values(ascending=False, kind="stable")
        return [(value, int(c)) for value, c in counts.items()], None


class StrategyRegistry:
    """Central registry for histogram strategies"""

    def __init__(self):
        self._strategies: Dict[DataType, Type[HistogramStrategy]] = {}
        self._register_all()

    def _register_all(self):
        self.register(NumberStrategy)
        self.register(IntegerStrategy)
        self.register(DateStrategy)
        self.register(CategoricalStrategy)

    def register(self, strategy_class: Type[HistogramStrategy]):
        """Register a strategy class for each of its data types"""
        if not issubclass(strategy_class, HistogramStrategy):
            raise ValueError(f"{strategy_class} must be a subclass of HistogramStrategy")
        if not strategy_class.DATA_TYPES:
            raise ValueError(f"{strategy_class} must define DATA_TYPES")

        for data_type in strategy_class.DATA_TYPES:
            self._strategies[data_type] = strategy_class

    def get(self, data_type: DataType) -> Optional[Type[HistogramStrategy]]:
        return self._strategies.get(data_type)

    def create(self, data_type: DataType, options: Optional[HistogramOptions] = None) -> HistogramStrategy:
        strategy_class = self.get(data_type)
        if strategy_class is None:
            raise InvalidOptionsError(
                f"Unknown histogram type: {data_type}",
                suggestion=f"Available types: {', '.join(self.list())}",
            )
        if strategy_class is CategoricalStrategy:
            return strategy_class(options, data_type=data_type)
        return strategy_class(options)

    def list(self) -> List[str]:
        return sorted(t.value for t in self._strategies)


# Global registry instance
registry = StrategyRegistry()
