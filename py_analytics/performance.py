"""
py_analytics/performance.py
Stage 4 + report assembly. Ratios come from Aggregates only, never from the trade list.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from py_journal.models import TradeRecord
import py_financial_math.performance as perf_math
import py_financial_math.series as series_math
from py_financial_math.risk import calculate_risk_score

from .config import AnalyticsConfig, DEFAULT_CONFIG, GROUP_DIMENSIONS
from .models import Aggregates, MetricsReport, TradeFilter
from .selection import select
from .sequencing import sequence
from .aggregation import aggregate
from .insights import best_group, confidence_accuracy

logger = logging.getLogger(__name__)

# Always built: the insights need them even when not listed
INSIGHT_DIMENSIONS = ["weekday", "hour"]


def build_report(
    agg: Aggregates,
    total_records: int = 0,
    trade_filter: Optional[TradeFilter] = None,
    group_by: Sequence[str] = (),
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> MetricsReport:
    """ Derives every ratio from the aggregates and packs the report. """
    n = agg.total_closed

    avg_win = perf_math.average(agg.gross_win, agg.winners)
    avg_loss = perf_math.average(agg.gross_loss, agg.losers)
    profit_factor = perf_math.profit_factor(agg.gross_win, agg.gross_loss)
    win_rate = perf_math.win_rate(agg.winners, n)

    # Dispersion of per-trade pnl
    mean_pnl = perf_math.average(agg.total_pnl, n)
    std_dev = series_math.population_std_dev(agg.pnl_values)
    downside = series_math.downside_deviation(agg.pnl_values, mean_pnl)

    months = perf_math.months_spanned(agg.first_date, agg.last_date)
    curve = [p.cumulative_pnl for p in agg.equity_curve]
    volatility = series_math.calculate_equity_volatility(curve)

    risk_score = calculate_risk_score(agg.max_drawdown, agg.total_pnl, volatility)
    performance_score = 0.0
    if n > 0:
        performance_score = perf_math.calculate_performance_score(
            win_rate, profit_factor, risk_score,
            weights=config.performance_weights,
            profit_factor_cap=config.profit_factor_cap,
        )

    return MetricsReport(
        total_records=total_records,
        total_trades=n,
        winners=agg.winners,
        losers=agg.losers,
        break_even=agg.break_even,

        total_pnl=agg.total_pnl,
        net_pnl=agg.total_pnl - agg.total_commission - agg.negative_swap,
        total_commissions=agg.total_commission,
        total_swap=agg.total_swap,
        gross_win=agg.gross_win,
        gross_loss=agg.gross_loss,
        largest_win=agg.largest_win,
        largest_loss=agg.largest_loss,
        avg_win=avg_win,
        avg_loss=avg_loss,

        win_rate=win_rate,
        profit_factor=profit_factor,
        risk_reward_ratio=perf_math.risk_reward_ratio(avg_win, avg_loss),
        expectancy=perf_math.expectancy(agg.total_pnl, n),
        max_drawdown=agg.max_drawdown,
        recovery_factor=perf_math.recovery_factor(agg.total_pnl, agg.max_drawdown),
        sharpe_ratio=perf_math.sharpe_ratio(mean_pnl, std_dev),
        sortino_ratio=perf_math.sortino_ratio(mean_pnl, downside),
        calmar_ratio=perf_math.calmar_ratio(perf_math.annualized_return(agg.total_pnl, months), agg.max_drawdown),
        trading_frequency=perf_math.trading_frequency(n, months),
        performance_score=performance_score,
        risk_score=risk_score,

        max_win_streak=agg.max_win_streak,
        max_loss_streak=agg.max_loss_streak,
        avg_holding_period_hours=perf_math.average(agg.holding_hours_sum, agg.holding_count),
        active_days=agg.active_days,
        trades_per_day=perf_math.average(n, agg.active_days),

        total_pips=agg.total_pips,
        avg_pips=perf_math.average(agg.total_pips, agg.pip_trades),
        avg_r_multiple=perf_math.average(agg.r_multiple_sum, agg.r_multiple_count),
        total_risk=agg.total_risk,

        best_trading_day=best_group(agg.groups.get("weekday", ()), config.unknown_label) or "None",
        best_trading_hour=best_group(agg.groups.get("hour", ()), config.unknown_label),
        confidence_accuracy=confidence_accuracy(agg),

        equity_curve=agg.equity_curve,
        drawdown_series=agg.drawdown_series,
        grouped_performance={d: agg.groups.get(d, ()) for d in group_by},
        filter=trade_filter or TradeFilter(),
    )


class PerformanceAnalyzer:
    """ Entry point: any trade collection in, MetricsReport out. Stateless between calls. """

    def __init__(self, config: AnalyticsConfig = DEFAULT_CONFIG):
        self.config = config

    def analyze_trades(
        self,
        trades: Iterable[TradeRecord],
        trade_filter: Optional[TradeFilter] = None,
        group_by: Optional[Sequence[str]] = None,
    ) -> MetricsReport:
        trades = list(trades)
        trade_filter = trade_filter or TradeFilter()
        dimensions = self._resolve_dimensions(group_by)

        if not trade_filter.is_valid:
            # Advisory only: zero report, never an exception
            return MetricsReport(total_records=len(trades), filter=trade_filter, invalid_filter=True)

        # 1. Select
        eligible = select(trades, trade_filter)

        # 2. Sequence
        ordered = sequence(eligible)

        # 3. Aggregate (listed dimensions + the ones insights need)
        pass_dimensions = dimensions + [d for d in INSIGHT_DIMENSIONS if d not in dimensions]
        agg = aggregate(ordered, pass_dimensions, self.config)
        logger.debug("Analyzed %d of %d records", agg.total_closed, len(trades))

        # 4. Derive
        return build_report(agg, len(trades), trade_filter, dimensions, self.config)

    def _resolve_dimensions(self, group_by: Optional[Sequence[str]]) -> List[str]:
        requested = list(self.config.default_group_by if group_by is None else group_by)
        dimensions = []
        for d in requested:
            if d not in GROUP_DIMENSIONS:
                logger.warning("Ignoring unknown grouping dimension: %s", d)
                continue
            if d not in dimensions:
                dimensions.append(d)
        return dimensions


def compute_metrics(
    trades: Iterable[TradeRecord],
    trade_filter: Optional[TradeFilter] = None,
    group_by: Optional[Sequence[str]] = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> MetricsReport:
    """ Functional shortcut for PerformanceAnalyzer(config).analyze_trades(...). """
    return PerformanceAnalyzer(config).analyze_trades(trades, trade_filter, group_by)
