"""
Range-sequence generation for bin edges and tick labels
"""
import math
from typing import List, Optional

import pandas as pd


def range_sequence(start: float, stop: Optional[float] = None, step: float = 1) -> List[float]:
    """
    Half-open arithmetic sequence, like range() but accepting floats.

    range_sequence(5) -> [0, 1, 2, 3, 4]
    range_sequence(0, 1, 0.25) -> [0, 0.25, 0.5, 0.75]
    """
    if stop is None:
        start, stop = 0, start
    if step == 0 or not math.isfinite((stop - start) / step):
        raise ValueError("Infinite range")

    values = []
    i = 0
    if step < 0:
        while start + step * i > stop:
            values.append(start + step * i)
            i += 1
    else:
        while start + step * i < stop:
            values.append(start + step * i)
            i += 1
    return values


def date_sequence(spec) -> List[pd.Timestamp]:
    """Lower-edge timestamps of every bin in a DateBinSpec, stop included"""
    counts = range_sequence(spec.start, spec.stop + spec.step / 2, spec.step)
    return [spec.unit.date(int(c)) for c in counts]
