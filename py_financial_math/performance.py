from datetime import date
from typing import Optional, Tuple

from .models import Ratio, UNBOUNDED, cap_ratio


def win_rate(winners: int, total_closed: int) -> float:
    """ Percentage (0-100) of closed trades that were winners. """
    if total_closed <= 0:
        return 0.0
    return winners / total_closed * 100.0


def average(total: float, count: int) -> float:
    if count <= 0:
        return 0.0
    return total / count


def bounded_ratio(numerator: float, denominator: float) -> Ratio:
    """
    numerator / denominator for non-negative quantities.
    Zero denominator: UNBOUNDED if there is something on top, else 0.
    """
    if denominator > 0:
        return numerator / denominator
    if numerator > 0:
        return UNBOUNDED
    return 0.0


def profit_factor(gross_win: float, gross_loss: float) -> Ratio:
    """ Gross Profit / Gross Loss (both positive). """
    return bounded_ratio(gross_win, gross_loss)


def risk_reward_ratio(avg_win: float, avg_loss: float) -> Ratio:
    """ Avg Win / Avg Loss (payoff ratio). """
    return bounded_ratio(avg_win, avg_loss)


def expectancy(total_pnl: float, total_closed: int) -> float:
    """ Average PnL per closed trade. """
    return average(total_pnl, total_closed)


def recovery_factor(total_pnl: float, max_drawdown: float) -> Ratio:
    """
    Net result / Max Drawdown.
    Without a drawdown the factor is UNBOUNDED for a profitable record, 0 otherwise.
    """
    if max_drawdown > 0:
        return total_pnl / max_drawdown
    if total_pnl > 0:
        return UNBOUNDED
    return 0.0


def sharpe_ratio(mean_pnl: float, std_dev: float) -> float:
    """ Per-trade mean / population std dev. Not annualized. """
    if std_dev <= 0:
        return 0.0
    return mean_pnl / std_dev


def sortino_ratio(mean_pnl: float, downside_dev: float) -> float:
    """ Per-trade mean / downside deviation. """
    if downside_dev <= 0:
        return 0.0
    return mean_pnl / downside_dev


def months_spanned(first: Optional[date], last: Optional[date]) -> int:
    """ Whole calendar months between two dates, floored to at least 1. """
    if first is None or last is None:
        return 1
    if last < first:
        first, last = last, first
    months = (last.year - first.year) * 12 + (last.month - first.month)
    if last.day < first.day:
        months -= 1
    return max(1, months)


def trading_frequency(total_closed: int, months: int) -> float:
    """ Closed trades per month. """
    return total_closed / max(1, months)


def annualized_return(total_pnl: float, months: int) -> float:
    """ Monthly average of the net result scaled to twelve months. """
    return total_pnl / max(1, months) * 12.0


def calmar_ratio(annual_return: float, max_drawdown: float) -> float:
    if max_drawdown <= 0:
        return 0.0
    return annual_return / max_drawdown


def calculate_performance_score(
    win_rate_pct: float,
    profit_factor_value: Ratio,
    risk_score: float,
    weights: Tuple[float, float, float] = (0.3, 0.4, 0.3),
    profit_factor_cap: float = 10.0,
) -> float:
    """
    Composite performance score 0-100, higher is better.
    Blend: w1*WinRate + w2*min(PF, cap)*10 + w3*max(0, 100 - RiskScore)
    """
    w_win, w_pf, w_risk = weights
    pf = max(0.0, cap_ratio(profit_factor_value, profit_factor_cap))
    score = (
        w_win * win_rate_pct
        + w_pf * pf * 10.0
        + w_risk * max(0.0, 100.0 - risk_score)
    )
    return max(0.0, min(100.0, score))
