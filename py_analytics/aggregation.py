"""
py_analytics/aggregation.py
Stage 3: one left-to-right pass over the sequenced trades.
The running state lives in a local accumulator and is frozen into Aggregates at the end.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Set

from py_journal.models import TradeRecord
from py_financial_math.core import is_finite_number, calculate_r_multiple, calculate_holding_hours, parse_time_of_day
from py_financial_math.performance import win_rate
from .config import AnalyticsConfig, DEFAULT_CONFIG
from .models import Aggregates, EquityPoint, DrawdownPoint, GroupStat

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def group_key(trade: TradeRecord, dimension: str, unknown: str = "Unknown") -> str:
    """ Bucket of a trade for one grouping dimension. Missing data -> `unknown`. """
    if dimension == "symbol":
        value = trade.instrument
    elif dimension == "session":
        value = trade.session
    elif dimension == "timeframe":
        value = trade.timeframe
    elif dimension == "strategy":
        value = trade.strategy
    elif dimension == "side":
        value = trade.side.value
    elif dimension == "weekday":
        value = WEEKDAY_NAMES[trade.date.weekday()] if trade.date else None
    elif dimension == "date":
        value = trade.date.isoformat() if trade.date else None
    elif dimension == "hour":
        entry = parse_time_of_day(trade.time_in)
        value = f"{int(entry.total_seconds() // 3600):02d}" if entry is not None else None
    else:
        raise ValueError(f"Unknown grouping dimension: {dimension}")
    return value or unknown


class _GroupTotals:
    __slots__ = ("count", "win_count", "sum_pnl", "sum_pips")

    def __init__(self):
        self.count = 0
        self.win_count = 0
        self.sum_pnl = 0.0
        self.sum_pips = 0.0


def sort_groups(totals: Dict[str, _GroupTotals]) -> tuple:
    """ Listing order: total pnl descending, then key alphabetically. """
    rows = [
        GroupStat(
            group_key=key,
            count=t.count,
            win_count=t.win_count,
            win_rate=win_rate(t.win_count, t.count),
            total_pnl=t.sum_pnl,
            total_pips=t.sum_pips,
        )
        for key, t in totals.items()
    ]
    return tuple(sorted(rows, key=lambda g: (-g.total_pnl, g.group_key)))


class _Accumulator:
    """ Running state of the pass. Never escapes aggregate(). """

    def __init__(self, dimensions: Sequence[str], config: AnalyticsConfig):
        self.config = config
        self.dimensions = list(dimensions)

        self.total_closed = 0
        self.winners = 0
        self.losers = 0
        self.break_even = 0
        self.total_pnl = 0.0
        self.gross_win = 0.0
        self.gross_loss = 0.0
        self.largest_win = 0.0
        self.largest_loss = 0.0

        self.total_commission = 0.0
        self.total_swap = 0.0
        self.negative_swap = 0.0

        self.total_pips = 0.0
        self.pip_trades = 0
        self.r_multiple_sum = 0.0
        self.r_multiple_count = 0
        self.total_risk = 0.0
        self.holding_hours_sum = 0.0
        self.holding_count = 0
        self.confidence_count = 0
        self.confidence_hits = 0

        # Curve
        self.running_pnl = 0.0
        self.peak = 0.0
        self.max_drawdown = 0.0
        self.equity_curve: List[EquityPoint] = []
        self.drawdown_series: List[DrawdownPoint] = []
        self.pnl_values: List[float] = []

        # Streaks
        self.win_streak = 0
        self.loss_streak = 0
        self.max_win_streak = 0
        self.max_loss_streak = 0

        self.first_date = None
        self.last_date = None
        self.days: Set = set()
        self.groups: Dict[str, Dict[str, _GroupTotals]] = {d: {} for d in self.dimensions}

    def add(self, trade: TradeRecord):
        pnl = float(trade.pnl)
        index = self.total_closed
        self.total_closed += 1
        self.total_pnl += pnl
        self.pnl_values.append(pnl)

        # Win/Loss partition. Flat trades are neither.
        if pnl > 0:
            self.winners += 1
            self.gross_win += pnl
            self.largest_win = max(self.largest_win, pnl)
            self.win_streak += 1
            self.loss_streak = 0
            self.max_win_streak = max(self.max_win_streak, self.win_streak)
        elif pnl < 0:
            self.losers += 1
            self.gross_loss += -pnl
            self.largest_loss = max(self.largest_loss, -pnl)
            self.loss_streak += 1
            self.win_streak = 0
            self.max_loss_streak = max(self.max_loss_streak, self.loss_streak)
        else:
            self.break_even += 1

        # Equity & drawdown
        self.running_pnl += pnl
        self.peak = max(self.peak, self.running_pnl)
        drawdown = self.peak - self.running_pnl
        self.max_drawdown = max(self.max_drawdown, drawdown)
        self.equity_curve.append(EquityPoint(index, self.running_pnl, trade.id, trade.date))
        self.drawdown_series.append(DrawdownPoint(index, self.peak, drawdown))

        self._add_costs(trade)
        self._add_risk(trade, pnl)
        self._add_dates(trade)

        for dimension in self.dimensions:
            key = group_key(trade, dimension, self.config.unknown_label)
            totals = self.groups[dimension].get(key)
            if totals is None:
                totals = self.groups[dimension][key] = _GroupTotals()
            totals.count += 1
            totals.sum_pnl += pnl
            if pnl > 0:
                totals.win_count += 1
            if is_finite_number(trade.pips):
                totals.sum_pips += trade.pips

    def _add_costs(self, trade: TradeRecord):
        if is_finite_number(trade.commission):
            self.total_commission += trade.commission
        if is_finite_number(trade.swap):
            self.total_swap += trade.swap
            if trade.swap < 0:
                self.negative_swap += -trade.swap

    def _add_risk(self, trade: TradeRecord, pnl: float):
        if is_finite_number(trade.pips):
            self.total_pips += trade.pips
            self.pip_trades += 1

        has_risk = is_finite_number(trade.risk_amount) and trade.risk_amount > 0
        if has_risk:
            self.total_risk += trade.risk_amount

        # Explicit R wins over the derived one
        r_multiple: Optional[float] = None
        if is_finite_number(trade.r_multiple):
            r_multiple = trade.r_multiple
        elif has_risk:
            r_multiple = calculate_r_multiple(pnl, trade.risk_amount)
        if r_multiple is not None:
            self.r_multiple_sum += r_multiple
            self.r_multiple_count += 1

        hours = calculate_holding_hours(trade.time_in, trade.time_out)
        if hours is not None:
            self.holding_hours_sum += hours
            self.holding_count += 1

        if trade.confidence is not None:
            self.confidence_count += 1
            confident = trade.confidence >= self.config.confidence_threshold
            if (pnl > 0) == confident:
                self.confidence_hits += 1

    def _add_dates(self, trade: TradeRecord):
        if trade.date is None:
            return
        self.days.add(trade.date)
        if self.first_date is None or trade.date < self.first_date:
            self.first_date = trade.date
        if self.last_date is None or trade.date > self.last_date:
            self.last_date = trade.date

    def freeze(self) -> Aggregates:
        return Aggregates(
            total_closed=self.total_closed,
            winners=self.winners,
            losers=self.losers,
            break_even=self.break_even,
            total_pnl=self.total_pnl,
            gross_win=self.gross_win,
            gross_loss=self.gross_loss,
            largest_win=self.largest_win,
            largest_loss=self.largest_loss,
            total_commission=self.total_commission,
            total_swap=self.total_swap,
            negative_swap=self.negative_swap,
            total_pips=self.total_pips,
            pip_trades=self.pip_trades,
            r_multiple_sum=self.r_multiple_sum,
            r_multiple_count=self.r_multiple_count,
            total_risk=self.total_risk,
            holding_hours_sum=self.holding_hours_sum,
            holding_count=self.holding_count,
            confidence_count=self.confidence_count,
            confidence_hits=self.confidence_hits,
            max_win_streak=self.max_win_streak,
            max_loss_streak=self.max_loss_streak,
            max_drawdown=self.max_drawdown,
            first_date=self.first_date,
            last_date=self.last_date,
            active_days=len(self.days),
            equity_curve=tuple(self.equity_curve),
            drawdown_series=tuple(self.drawdown_series),
            pnl_values=tuple(self.pnl_values),
            groups={d: sort_groups(totals) for d, totals in self.groups.items()},
        )


def aggregate(
    ordered_trades: Iterable[TradeRecord],
    dimensions: Sequence[str] = (),
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Aggregates:
    """
    Folds sequenced, eligible trades into Aggregates in O(n).
    `dimensions` selects the grouping listings to build.
    """
    acc = _Accumulator(dimensions, config)
    for trade in ordered_trades:
        acc.add(trade)
    return acc.freeze()
