"""
py_analytics/models.py
Report DTOs. All frozen: a report is a derived snapshot, rebuilt on every call.
"""
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Optional, Dict, Any, Tuple

from py_financial_math.models import Ratio, ratio_to_json


@dataclass(frozen=True)
class TradeFilter:
    """ Half-open date window [date_from, date_to) and optional account. """
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    account_id: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        if self.date_from is not None and self.date_to is not None:
            return self.date_from <= self.date_to
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.date_from.isoformat() if self.date_from else None,
            "to": self.date_to.isoformat() if self.date_to else None,
            "account_id": self.account_id,
        }


@dataclass(frozen=True)
class EquityPoint:
    sequence_index: int
    cumulative_pnl: float
    trade_id: str
    date: Optional[date]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequence_index": self.sequence_index,
            "cumulative_pnl": self.cumulative_pnl,
            "trade_id": self.trade_id,
            "date": self.date.isoformat() if self.date else None,
        }


@dataclass(frozen=True)
class DrawdownPoint:
    sequence_index: int
    peak: float
    drawdown: float  # peak - cumulative pnl, never negative

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GroupStat:
    """ One row of a grouped performance listing. """
    group_key: str
    count: int
    win_count: int
    win_rate: float  # 0-100
    total_pnl: float
    total_pips: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Aggregates:
    """ Result of the single pass over the sequenced trades. Ratios are derived from this only. """
    total_closed: int = 0
    winners: int = 0
    losers: int = 0
    break_even: int = 0

    total_pnl: float = 0.0
    gross_win: float = 0.0
    gross_loss: float = 0.0  # positive
    largest_win: float = 0.0
    largest_loss: float = 0.0  # positive magnitude

    # Costs
    total_commission: float = 0.0
    total_swap: float = 0.0
    negative_swap: float = 0.0  # abs sum of swap charges

    # Forex / risk
    total_pips: float = 0.0
    pip_trades: int = 0
    r_multiple_sum: float = 0.0
    r_multiple_count: int = 0
    total_risk: float = 0.0

    holding_hours_sum: float = 0.0
    holding_count: int = 0
    confidence_count: int = 0
    confidence_hits: int = 0

    max_win_streak: int = 0
    max_loss_streak: int = 0
    max_drawdown: float = 0.0

    first_date: Optional[date] = None
    last_date: Optional[date] = None
    active_days: int = 0

    equity_curve: Tuple[EquityPoint, ...] = ()
    drawdown_series: Tuple[DrawdownPoint, ...] = ()
    pnl_values: Tuple[float, ...] = ()
    groups: Dict[str, Tuple[GroupStat, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricsReport:
    """ Unified performance snapshot of a trade collection. """
    # Activity
    total_records: int = 0  # every input record, any status
    total_trades: int = 0   # eligible closed trades
    winners: int = 0
    losers: int = 0
    break_even: int = 0

    # Money
    total_pnl: float = 0.0
    net_pnl: float = 0.0
    total_commissions: float = 0.0
    total_swap: float = 0.0
    gross_win: float = 0.0
    gross_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0

    # Ratios
    win_rate: float = 0.0
    profit_factor: Ratio = 0.0
    risk_reward_ratio: Ratio = 0.0
    expectancy: float = 0.0
    max_drawdown: float = 0.0
    recovery_factor: Ratio = 0.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    calmar_ratio: float = 0.0
    trading_frequency: float = 0.0
    performance_score: float = 0.0
    risk_score: float = 0.0

    # Streaks & timing
    max_win_streak: int = 0
    max_loss_streak: int = 0
    avg_holding_period_hours: float = 0.0
    active_days: int = 0
    trades_per_day: float = 0.0

    # Forex / risk
    total_pips: float = 0.0
    avg_pips: float = 0.0
    avg_r_multiple: float = 0.0
    total_risk: float = 0.0

    # Insights
    best_trading_day: str = "None"
    best_trading_hour: Optional[str] = None
    confidence_accuracy: float = 0.0

    # Series
    equity_curve: Tuple[EquityPoint, ...] = ()
    drawdown_series: Tuple[DrawdownPoint, ...] = ()
    grouped_performance: Dict[str, Tuple[GroupStat, ...]] = field(default_factory=dict)

    # Request echo
    filter: TradeFilter = field(default_factory=TradeFilter)
    invalid_filter: bool = False

    @property
    def equity_df(self):
        """ Equity curve with drawdown as DataFrame (one row per trade). """
        import pandas as pd

        columns = ["sequence_index", "cumulative_pnl", "peak", "drawdown", "trade_id", "date"]
        rows = [
            {
                "sequence_index": p.sequence_index,
                "cumulative_pnl": p.cumulative_pnl,
                "peak": dd.peak,
                "drawdown": dd.drawdown,
                "trade_id": p.trade_id,
                "date": p.date,
            }
            for p, dd in zip(self.equity_curve, self.drawdown_series)
        ]
        return pd.DataFrame(rows, columns=columns)

    def grouped_df(self, dimension: str):
        """ Grouped listing for one dimension as DataFrame, sorted like the listing. """
        import pandas as pd

        columns = ["group_key", "count", "win_count", "win_rate", "total_pnl", "total_pips"]
        rows = [g.to_dict() for g in self.grouped_performance.get(dimension, ())]
        return pd.DataFrame(rows, columns=columns)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        for name in self.__dataclass_fields__:
            if name in ("equity_curve", "drawdown_series", "grouped_performance", "filter"):
                continue
            d[name] = ratio_to_json(getattr(self, name))

        d["equity_curve"] = [p.to_dict() for p in self.equity_curve]
        d["drawdown_series"] = [p.to_dict() for p in self.drawdown_series]
        d["grouped_performance"] = {
            dim: [g.to_dict() for g in rows] for dim, rows in self.grouped_performance.items()
        }
        d["filter"] = self.filter.to_dict()
        return d


@dataclass(frozen=True)
class AccountStats:
    """ Per-account view: report plus balance figures that need the account's starting capital. """
    account_id: str
    account_name: str
    initial_balance: float
    current_balance: float
    roi: float  # % of initial balance
    report: MetricsReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "account_name": self.account_name,
            "initial_balance": self.initial_balance,
            "current_balance": self.current_balance,
            "roi": self.roi,
            "report": self.report.to_dict(),
        }
