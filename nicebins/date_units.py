"""
Calendar units for date binning

Each unit counts whole periods since the Unix epoch, so bin arithmetic on
dates can reuse the numeric step chooser on plain integers. Weeks start on
Monday.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .errors import InvalidOptionsError
from .util import to_timestamp

logger = logging.getLogger(__name__)

DAY_MS = 864e5

# 1970-01-01 is a Thursday; the Monday before it is day -3
_WEEK_SHIFT = 3


@dataclass(frozen=True)
class CalendarUnit:
    name: str
    code: str
    approx_ms: float
    offset_arg: str
    steps: Optional[Tuple[int, ...]] = None

    def count(self, value: Any) -> int:
        """Whole units elapsed between the epoch and value"""
        ts = to_timestamp(value)
        if self.name == "week":
            days = int(ts.to_datetime64().astype("datetime64[D]").astype(np.int64))
            return (days + _WEEK_SHIFT) // 7
        return int(ts.to_datetime64().astype(f"datetime64[{self.code}]").astype(np.int64))

    def date(self, n: int) -> pd.Timestamp:
        """Start of the n-th unit after the epoch"""
        if self.name == "week":
            return pd.Timestamp(np.datetime64(7 * int(n) - _WEEK_SHIFT, "D"))
        return pd.Timestamp(np.datetime64(int(n), self.code))

    def floor(self, value: Any) -> pd.Timestamp:
        return self.date(self.count(value))

    def offset(self, value: Any, n: int) -> pd.Timestamp:
        ts = to_timestamp(value)
        if self.name == "millisecond":
            return ts + pd.Timedelta(milliseconds=n)
        return ts + pd.DateOffset(**{self.offset_arg: n})

    @property
    def minstep(self) -> Optional[int]:
        return None if self.steps else 1


# Coarse to fine
UNITS: Dict[str, CalendarUnit] = {
    u.name: u for u in [
        CalendarUnit("year", "Y", 365 * DAY_MS, "years"),
        CalendarUnit("month", "M", 30 * DAY_MS, "months", steps=(1, 3, 6)),
        CalendarUnit("week", "W", 7 * DAY_MS, "weeks"),
        CalendarUnit("day", "D", DAY_MS, "days", steps=(1, 7)),
        CalendarUnit("hour", "h", 36e5, "hours"),
        CalendarUnit("minute", "m", 6e4, "minutes"),
        CalendarUnit("second", "s", 1e3, "seconds"),
        CalendarUnit("millisecond", "ms", 1.0, "milliseconds"),
    ]
}


def names() -> List[str]:
    return list(UNITS)


def get_unit(name: str) -> CalendarUnit:
    unit = UNITS.get(name)
    if unit is None:
        raise InvalidOptionsError(
            f"Unknown calendar unit: {name}",
            suggestion=f"Available units: {', '.join(UNITS)}",
        )
    return unit


def find(span_ms: float, minbins: int, maxbins: int) -> CalendarUnit:
    """
    Pick the coarsest unit that splits span_ms into at least minbins pieces.

    If that unit's largest preferred step still leaves more than maxbins
    bins, the previous (coarser) unit is used instead.
    """
    previous = None
    for unit in UNITS.values():
        count = span_ms / unit.approx_ms
        if count >= minbins:
            if unit.steps and previous is not None and math.ceil(count / unit.steps[-1]) > maxbins:
                logger.debug("unit %s overflows %d bins, using %s", unit.name, maxbins, previous.name)
                return previous
            return unit
        previous = unit
    return UNITS["millisecond"]
