from typing import Optional, Sequence

from py_financial_math.performance import win_rate
from .models import Aggregates, GroupStat


def best_group(rows: Sequence[GroupStat], unknown: str = "Unknown") -> Optional[str]:
    """ Key with the highest total pnl. Listings are pre-sorted, so the first known key wins. """
    for row in rows:
        if row.group_key != unknown:
            return row.group_key
    return None


def confidence_accuracy(agg: Aggregates) -> float:
    """ % of rated trades where the confidence call matched the outcome. """
    return win_rate(agg.confidence_hits, agg.confidence_count)
