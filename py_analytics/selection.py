"""
py_analytics/selection.py
Stage 1: which records take part in performance metrics.
"""
import logging
from typing import Iterable, List, Optional

from py_journal.models import TradeRecord, TradeStatus
from py_financial_math.core import is_finite_number
from .models import TradeFilter

logger = logging.getLogger(__name__)


def is_closed_trade(trade: TradeRecord) -> bool:
    """ Closed with a finite pnl. Everything else stays out of the ratios. """
    return trade.status == TradeStatus.CLOSED and is_finite_number(trade.pnl)


def in_window(trade: TradeRecord, trade_filter: TradeFilter) -> bool:
    """ date_from <= date < date_to. Bounds left open are not checked. """
    if trade_filter.date_from is None and trade_filter.date_to is None:
        return True
    if trade.date is None:
        return False
    if trade_filter.date_from is not None and trade.date < trade_filter.date_from:
        return False
    if trade_filter.date_to is not None and trade.date >= trade_filter.date_to:
        return False
    return True


def matches_account(trade: TradeRecord, trade_filter: TradeFilter) -> bool:
    if trade_filter.account_id is None:
        return True
    return trade.account_id == trade_filter.account_id


def select(trades: Iterable[TradeRecord], trade_filter: Optional[TradeFilter] = None) -> List[TradeRecord]:
    """
    Eligible trades for the given filter. Order is not meaningful here.
    An invalid filter selects nothing; callers flag it on the report.
    """
    trade_filter = trade_filter or TradeFilter()
    if not trade_filter.is_valid:
        logger.warning("Invalid filter window: %s > %s", trade_filter.date_from, trade_filter.date_to)
        return []

    eligible = []
    for trade in trades:
        if trade.status == TradeStatus.CLOSED and trade.pnl is not None and not is_finite_number(trade.pnl):
            logger.warning("Trade %s has non-finite pnl %r, excluded", trade.id, trade.pnl)
            continue
        if is_closed_trade(trade) and in_window(trade, trade_filter) and matches_account(trade, trade_filter):
            eligible.append(trade)
    return eligible
