"""
py_analytics/sequencing.py
Stage 2: canonical trade order for curves and streaks.
"""
from datetime import date, timedelta
from typing import Iterable, List, Tuple

from py_journal.models import TradeRecord
from py_financial_math.core import parse_time_of_day, is_finite_number


def _num(value) -> float:
    return value if is_finite_number(value) else 0.0


def content_key(trade: TradeRecord) -> Tuple:
    """ Tie-break for records that share date, time and id (id-less imports all carry ""). """
    return (
        _num(trade.pnl),
        trade.instrument or "",
        trade.side.value,
        trade.time_out or "",
        trade.account_id or "",
        _num(trade.pips),
        _num(trade.commission),
        _num(trade.swap),
        trade.session or "",
        trade.strategy or "",
        trade.timeframe or "",
    )


def sequence_key(trade: TradeRecord) -> Tuple:
    """
    (date, has-no-time flag, time of day, id, content).
    Undated trades go last; on one date, trades without entry time follow the timed ones.
    """
    entry = parse_time_of_day(trade.time_in)
    return (
        trade.date or date.max,
        0 if entry is not None else 1,
        entry if entry is not None else timedelta(0),
        trade.id,
    ) + content_key(trade)


def sequence(trades: Iterable[TradeRecord]) -> List[TradeRecord]:
    """ Chronological order, independent of input order. """
    return sorted(trades, key=sequence_key)
