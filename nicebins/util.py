"""
Value access, validity checks and type detection
"""
import datetime
import logging
import math
import numbers
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Union

import numpy as np
import pandas as pd

from .errors import InvalidOptionsError
from .models import DataType

logger = logging.getLogger(__name__)


def accessor(field: Union[str, Callable, None]) -> Optional[Callable[[Any], Any]]:
    """
    Build a value accessor from a field name, dotted path or callable.

    Dict keys and object attributes are both supported, so
    ``accessor("a.b")`` reads ``record["a"]["b"]`` or ``record.a.b``.
    Returns None when no field is given (values are used as-is).
    """
    if field is None:
        return None
    if callable(field):
        return field
    if not isinstance(field, str):
        raise InvalidOptionsError(
            f"Accessor must be a field name or callable, got {type(field).__name__}"
        )

    path = field.split(".")

    def get(record):
        for key in path:
            if record is None:
                return None
            if isinstance(record, Mapping):
                record = record.get(key)
            else:
                record = getattr(record, key, None)
        return record

    get.__name__ = field
    return get


def is_missing(value: Any) -> bool:
    """None, NaN, NaT and friends"""
    if value is None:
        return True
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def is_boolean(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def is_number(value: Any) -> bool:
    """Finite real number, booleans excluded"""
    if is_boolean(value) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def is_date(value: Any) -> bool:
    if isinstance(value, (datetime.date, np.datetime64)):
        return not is_missing(value)
    return False


def to_timestamp(value: Any) -> pd.Timestamp:
    """
    Normalize an instant to a naive pandas Timestamp.

    Numbers are read as epoch milliseconds. Timezone-aware values are
    converted to UTC before the zone is dropped.
    """
    if is_number(value):
        ts = pd.Timestamp(value, unit="ms")
    else:
        ts = pd.Timestamp(value)
    if not pd.isna(ts) and ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def detect_type(values: Iterable[Any]) -> Optional[DataType]:
    """
    Detect the data type from the first valid value.
    Returns None when every value is missing.
    """
    for value in values:
        if is_missing(value):
            continue
        if is_date(value):
            return DataType.DATE
        if is_boolean(value):
            return DataType.BOOLEAN
        if isinstance(value, numbers.Real):
            return DataType.NUMBER
        if isinstance(value, str):
            return DataType.STRING
        raise InvalidOptionsError(
            f"Cannot infer a histogram type from {type(value).__name__} values",
            suggestion="Extract scalar values with an accessor first",
        )
    return None
