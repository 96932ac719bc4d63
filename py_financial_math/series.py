import math
import statistics
from typing import List, Sequence


def calculate_peak_series(equity_curve: Sequence[float]) -> List[float]:
    """ Running high watermark. Baseline is 0 (flat account before the first trade). """
    peaks = []
    peak = 0.0
    for val in equity_curve:
        if val > peak:
            peak = val
        peaks.append(peak)
    return peaks


def calculate_drawdown_series(equity_curve: Sequence[float]) -> List[float]:
    """
    Absolute drawdown for each point of a cumulative pnl curve.
    DD = HighWatermark - Current, HighWatermark starting at 0.
    """
    return [peak - val for peak, val in zip(calculate_peak_series(equity_curve), equity_curve)]


def calculate_max_drawdown(equity_curve: Sequence[float]) -> float:
    dds = calculate_drawdown_series(equity_curve)
    return max(dds) if dds else 0.0


def population_std_dev(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    return statistics.pstdev(values)


def downside_deviation(values: Sequence[float], mean: float) -> float:
    """
    Dispersion of the samples below the mean, measured against the mean.
    0 when no sample is below it.
    """
    below = [v for v in values if v < mean]
    if not below:
        return 0.0
    return math.sqrt(sum((v - mean) ** 2 for v in below) / len(below))


def calculate_equity_volatility(equity_curve: Sequence[float]) -> float:
    """ Root mean square of point-to-point changes of the curve. """
    if len(equity_curve) < 2:
        return 0.0
    changes = [equity_curve[i] - equity_curve[i - 1] for i in range(1, len(equity_curve))]
    return math.sqrt(sum(c ** 2 for c in changes) / len(changes))
