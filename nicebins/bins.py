"""
Nice bin boundaries for numeric and date ranges

bin() picks a step of 1, 2 or 5 times a power of the base (or one of a
caller's candidate steps) so that [min, max] splits into at most maxbins
readable bins. bin_date() does the same over calendar units.
"""
import logging
import math
import sys
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from . import date_units
from .config import settings
from .date_units import CalendarUnit
from .errors import InvalidRangeError
from .generate import date_sequence, range_sequence
from .models import BinOptions, DateBinOptions, validate_options
from .util import to_timestamp

logger = logging.getLogger(__name__)

EPSILON = 1e-15


@dataclass(frozen=True)
class BinSpec:
    start: float
    stop: float
    step: float
    precision: int = 0

    @property
    def num_bins(self) -> int:
        """Number of step-wide intervals between start and stop"""
        return int(round(_intervals(self.start, self.stop, self.step)))

    def value(self, v: float) -> float:
        """Lower edge of the bin holding v"""
        return self.step * math.floor(v / self.step + EPSILON)

    def index(self, v: float) -> int:
        return int(math.floor((v - self.start) / self.step + EPSILON))

    def edges(self) -> List[float]:
        return range_sequence(self.start, self.stop + self.step / 2, self.step)


@dataclass(frozen=True)
class DateBinSpec:
    """Bin boundaries in unit counts since the epoch"""
    start: int
    stop: int
    step: int
    unit: CalendarUnit

    @property
    def num_bins(self) -> int:
        return (self.stop - self.start) // self.step

    def value(self, v: Any) -> pd.Timestamp:
        """Timestamp of the lower edge of the bin holding v"""
        return self.unit.date(self.step * math.floor(self.unit.count(v) / self.step))

    def index(self, v: Any) -> int:
        return (self.unit.count(v) - self.start) // self.step

    def edges(self) -> List[pd.Timestamp]:
        return date_sequence(self)


def _check_range(min_val, max_val):
    try:
        finite = math.isfinite(min_val) and math.isfinite(max_val)
    except TypeError:
        finite = False
    if not finite:
        raise InvalidRangeError(
            f"Bin range must be finite numbers, got [{min_val!r}, {max_val!r}]",
            suggestion="Drop NaN/inf values before binning",
        )
    if min_val > max_val:
        raise InvalidRangeError(
            f"Bin range is inverted: min {min_val} > max {max_val}",
            suggestion="Swap min and max",
        )


def _align(min_val: float, max_val: float, step: float, base: float) -> Tuple[float, float, int]:
    """Snap [min_val, max_val] outward to multiples of step"""
    v = math.log(step)
    precision = 0 if v >= 0 else int(-v / math.log(base)) + 1
    eps = base ** (-precision - 1)

    start = math.floor(min_val / step + eps) * step
    if start > min_val:
        start -= step
    stop = math.ceil(max_val / step - eps) * step
    if stop < max_val:
        stop += step
    return start, stop, precision


def _intervals(start: float, stop: float, step: float) -> float:
    # divide before subtracting; stop - start can overflow for bounds near the float limit
    return stop / step - start / step


def _count(min_val: float, max_val: float, step: float, base: float) -> int:
    start, stop, _ = _align(min_val, max_val, step, base)
    return int(round(_intervals(start, stop, step)))


def _pick_step(steps: Sequence[float], min_val: float, max_val: float,
               maxbins: int, minstep: float, base: float) -> float:
    """First candidate at or above minstep that fits in maxbins, else the last one"""
    for candidate in steps:
        if candidate >= minstep and _count(min_val, max_val, candidate, base) <= maxbins:
            return candidate
    return steps[-1]


def _nice_step(min_val: float, max_val: float, maxbins: int, base: float,
               minstep: float, div: Sequence[float]) -> float:
    # a single value is binned as if it spanned one unit (or one ulp, past float resolution)
    if max_val <= min_val:
        max_val = max(min_val + 1, math.nextafter(min_val, math.inf))
    # half the span stays finite even when max_val - min_val does not
    half = max_val / 2 - min_val / 2
    logb = math.log(base)
    level = math.ceil(math.log(maxbins) / logb)
    magnitude = (math.log(half) + math.log(2)) / logb
    largest = math.floor(math.log(sys.float_info.max) / logb)
    exponent = min(math.floor(magnitude + 0.5) - level, largest)
    step = max(minstep, base ** exponent)
    if not step > 0:
        step = 2 * half

    # grow while there are too many bins; past step >= span there are at most two
    iterations = 0
    while (step / 2 < half and math.isfinite(step * base)
           and _count(min_val, max_val, step, base) > maxbins):
        if iterations >= settings.max_iterations:
            logger.warning("step growth stopped after %d iterations at step=%g", iterations, step)
            break
        step *= base
        iterations += 1

    # shrink by each divisor while the bin count allows
    for d in div:
        candidate = step / d
        if candidate >= minstep and _count(min_val, max_val, candidate, base) <= maxbins:
            step = candidate
    return step


def bin(min_val: float, max_val: float, *, maxbins: Optional[int] = None,
        step: Optional[float] = None, steps: Optional[List[float]] = None,
        minstep: Optional[float] = None, div: Optional[List[float]] = None,
        base: Optional[float] = None) -> BinSpec:
    """
    Choose nice bin boundaries covering [min_val, max_val].

    Precedence: an explicit ``step`` wins, then ``steps`` candidates, then
    the power-of-base search refined by ``div``. ``minstep`` is a hard floor
    and wins over ``maxbins`` when the two conflict, so the bin count can
    exceed maxbins in that case.

    Raises InvalidRangeError when a bound is not finite or min_val > max_val.
    """
    opts = validate_options(BinOptions, maxbins=maxbins, step=step, steps=steps,
                            minstep=minstep, div=div, base=base)
    _check_range(min_val, max_val)

    maxbins = opts.maxbins or settings.maxbins
    base = opts.base or settings.base
    div = opts.div if opts.div is not None else settings.div
    minstep = opts.minstep or 0

    if opts.step is not None:
        step = opts.step
    elif opts.steps:
        step = _pick_step(opts.steps, min_val, max_val, maxbins, minstep, base)
    else:
        step = _nice_step(min_val, max_val, maxbins, base, minstep, div)

    start, stop, precision = _align(min_val, max_val, step, base)

    logger.debug("bin [%g, %g] -> start=%g stop=%g step=%g", min_val, max_val, start, stop, step)
    return BinSpec(start=start, stop=stop, step=step, precision=precision)


def bin_date(min_val: Any, max_val: Any, *, unit: Optional[str] = None,
             maxbins: Optional[int] = None, minbins: Optional[int] = None) -> DateBinSpec:
    """
    Choose a calendar unit and integer step covering [min_val, max_val].

    With ``unit`` the step is chosen within that unit; otherwise the
    coarsest unit giving at least ``minbins`` bins is used. The unit's
    preferred steps are tried first; when none keeps the count within
    ``maxbins`` the step is searched over whole multiples of the unit.
    """
    opts = validate_options(DateBinOptions, unit=unit, maxbins=maxbins, minbins=minbins)
    try:
        dmin, dmax = to_timestamp(min_val), to_timestamp(max_val)
    except (TypeError, ValueError) as e:
        raise InvalidRangeError(f"Date range bounds are not instants: {e}") from e
    if pd.isna(dmin) or pd.isna(dmax):
        raise InvalidRangeError(
            "Date range bounds must not be missing",
            suggestion="Drop null values before binning",
        )
    if dmin > dmax:
        raise InvalidRangeError(
            f"Date range is inverted: min {dmin} > max {dmax}",
            suggestion="Swap min and max",
        )

    maxbins = opts.maxbins or settings.date_maxbins
    minbins = opts.minbins or settings.date_minbins

    if opts.unit:
        cal = date_units.get_unit(opts.unit)
    else:
        span_ms = (dmax - dmin) / pd.Timedelta(milliseconds=1)
        cal = date_units.find(span_ms, minbins, maxbins)

    lo, hi = cal.count(dmin), cal.count(dmax)
    spec = bin(lo, hi, maxbins=maxbins,
               steps=list(cal.steps) if cal.steps else None, minstep=cal.minstep)
    if spec.num_bins > maxbins:
        # no preferred step fits; search whole multiples of the unit instead
        logger.debug("%s steps %s overflow %d bins", cal.name, cal.steps, maxbins)
        spec = bin(lo, hi, maxbins=maxbins, minstep=1)
    logger.debug("bin_date [%s, %s] -> unit=%s step=%g", dmin, dmax, cal.name, spec.step)
    return DateBinSpec(
        start=int(round(spec.start)),
        stop=int(round(spec.stop)),
        step=int(round(spec.step)),
        unit=cal,
    )
