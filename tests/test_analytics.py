import random
from datetime import date

import pytest

from py_journal.models import TradeRecord, TradeSide, TradeStatus, TradingAccount
from py_financial_math.models import UNBOUNDED
from py_analytics.models import TradeFilter
from py_analytics.selection import select, is_closed_trade
from py_analytics.sequencing import sequence
from py_analytics.aggregation import aggregate, group_key
from py_analytics.performance import PerformanceAnalyzer, compute_metrics
from py_analytics.accounts import AccountAnalyzer
from py_analytics.config import AnalyticsConfig

D1, D2, D3 = date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5)

def make_trade(trade_id, pnl, trade_date=D1, time_in=None, status=TradeStatus.CLOSED, **kwargs):
    return TradeRecord(
        id=trade_id,
        symbol=kwargs.pop("symbol", "EUR/USD"),
        side=kwargs.pop("side", TradeSide.LONG),
        status=status,
        date=trade_date,
        time_in=time_in,
        pnl=pnl,
        **kwargs
    )

def streak_trades(pnls):
    return [make_trade(f"T{i}", p, date(2025, 1, 1 + i)) for i, p in enumerate(pnls)]

# --- End-to-end ---

def test_end_to_end_example():
    # Passed in reverse: sequencing must restore date order
    trades = [
        make_trade("C", 320.0, D3),
        make_trade("B", -255.0, D2),
        make_trade("A", 160.0, D1),
    ]
    report = compute_metrics(trades)

    assert report.total_pnl == 225.0
    assert report.winners == 2
    assert report.losers == 1
    assert report.win_rate == pytest.approx(66.67, abs=0.01)
    assert [p.cumulative_pnl for p in report.equity_curve] == [160.0, -95.0, 225.0]
    assert [p.trade_id for p in report.equity_curve] == ["A", "B", "C"]
    assert [p.drawdown for p in report.drawdown_series] == [0.0, 255.0, 0.0]
    assert report.max_drawdown == 255.0

    assert report.profit_factor == pytest.approx(480.0 / 255.0)
    assert report.expectancy == 75.0
    assert report.avg_win == 240.0
    assert report.avg_loss == 255.0
    assert report.largest_win == 320.0
    assert report.largest_loss == 255.0
    assert report.recovery_factor == pytest.approx(225.0 / 255.0)
    # Same month: 225 * 12 annualized
    assert report.calmar_ratio == pytest.approx(2700.0 / 255.0)
    assert report.trading_frequency == 3.0

def test_empty_input_gives_zero_report():
    report = compute_metrics([])
    assert report.total_trades == 0
    assert report.total_records == 0
    assert report.win_rate == 0.0
    assert report.profit_factor == 0.0
    assert report.max_drawdown == 0.0
    assert report.performance_score == 0.0
    assert report.risk_score == 0.0
    assert report.equity_curve == ()
    assert report.best_trading_day == "None"
    assert report.best_trading_hour is None
    assert report.invalid_filter is False

# --- Selection ---

def test_ineligible_trades_are_excluded_but_counted():
    trades = [
        make_trade("OK", 50.0),
        make_trade("OPEN", 20.0, status=TradeStatus.OPEN),
        make_trade("NOPNL", None),
        make_trade("NAN", float("nan")),
        make_trade("INF", float("inf")),
    ]
    assert [t.id for t in select(trades)] == ["OK"]
    assert not is_closed_trade(trades[3])

    report = compute_metrics(trades)
    assert report.total_records == 5
    assert report.total_trades == 1
    assert report.total_pnl == 50.0

def test_time_window_is_half_open():
    trades = [make_trade("A", 10.0, D1), make_trade("B", 20.0, D2), make_trade("C", 30.0, D3)]
    selected = select(trades, TradeFilter(date_from=D2, date_to=D3))
    assert [t.id for t in selected] == ["B"]

    # Open-ended bounds
    assert len(select(trades, TradeFilter(date_from=D2))) == 2
    assert len(select(trades, TradeFilter(date_to=D2))) == 1

def test_undated_trade_excluded_only_by_window():
    trades = [make_trade("A", 10.0, None), make_trade("B", 20.0, D1)]
    assert len(select(trades)) == 2
    assert [t.id for t in select(trades, TradeFilter(date_from=D1))] == ["B"]

def test_account_filter():
    trades = [
        make_trade("A", 10.0, account_id="live"),
        make_trade("B", 20.0, account_id="demo"),
        make_trade("C", 30.0),
    ]
    report = compute_metrics(trades, TradeFilter(account_id="live"))
    assert report.total_trades == 1
    assert report.total_pnl == 10.0

def test_invalid_filter_is_flagged_not_raised():
    trades = [make_trade("A", 10.0, D1)]
    report = compute_metrics(trades, TradeFilter(date_from=D3, date_to=D1))
    assert report.invalid_filter is True
    assert report.total_records == 1
    assert report.total_trades == 0
    assert report.total_pnl == 0.0
    assert select(trades, TradeFilter(date_from=D3, date_to=D1)) == []

# --- Sequencing ---

def test_sequence_order():
    trades = [
        make_trade("untimed", 1.0, D1),
        make_trade("late", 1.0, D1, "15:00"),
        make_trade("early", 1.0, D1, "09:05"),
        make_trade("b-tie", 1.0, D1, "09:05:00"),
        make_trade("next-day", 1.0, D2, "08:00"),
        make_trade("undated", 1.0, None, "07:00"),
    ]
    ordered = [t.id for t in sequence(trades)]
    assert ordered == ["b-tie", "early", "late", "untimed", "next-day", "undated"]

def test_sequence_is_permutation_invariant():
    trades = [make_trade(f"T{i}", float(i), date(2025, 1, 1 + i % 3), f"{9 + i % 4:02d}:00") for i in range(12)]
    expected = [t.id for t in sequence(trades)]

    rng = random.Random(42)
    for _ in range(5):
        shuffled = trades[:]
        rng.shuffle(shuffled)
        assert [t.id for t in sequence(shuffled)] == expected

def test_idless_trades_order_is_input_independent():
    docs = [
        {"symbol": "EUR/USD", "status": "closed", "date": "2025-03-03", "pnl": 10},
        {"symbol": "EUR/USD", "status": "closed", "date": "2025-03-03", "pnl": -5},
        {"symbol": "EUR/USD", "status": "closed", "date": "2025-03-03", "pnl": 10},
    ]
    t0, t1, t2 = [TradeRecord.from_dict(d) for d in docs]
    assert t0.id == t1.id == t2.id == ""

    expected = compute_metrics([t0, t1, t2])
    for order in ([t0, t2, t1], [t1, t0, t2], [t2, t1, t0]):
        assert compute_metrics(order) == expected
    # Ties fall back to pnl ascending
    assert [p.cumulative_pnl for p in expected.equity_curve] == [-5.0, 5.0, 15.0]
    assert expected.max_win_streak == 2

# --- Aggregation ---

def test_streaks():
    agg = aggregate(streak_trades([10, 20, -5, -5, -5, 1]))
    assert agg.max_win_streak == 2
    assert agg.max_loss_streak == 3

def test_flat_trade_does_not_break_streak():
    agg = aggregate(streak_trades([10, 0, 10, -5, 0, -5]))
    assert agg.max_win_streak == 2
    assert agg.max_loss_streak == 2
    assert agg.break_even == 2
    assert agg.winners == 2
    assert agg.losers == 2
    assert agg.total_closed == 6

def test_win_rate_counts_flat_trades_in_total():
    report = compute_metrics(streak_trades([10, 0, -10, 0]))
    assert report.total_trades == 4
    assert report.break_even == 2
    assert report.win_rate == 25.0

def test_curve_invariants():
    rng = random.Random(7)
    trades = streak_trades([rng.uniform(-100, 100) for _ in range(25)])
    agg = aggregate(sequence(trades))

    peaks = [p.peak for p in agg.drawdown_series]
    curve = [p.cumulative_pnl for p in agg.equity_curve]
    for i in range(len(curve)):
        assert peaks[i] >= curve[i]
        assert agg.drawdown_series[i].drawdown >= 0.0
        assert agg.drawdown_series[i].drawdown == pytest.approx(peaks[i] - curve[i])
        if i > 0:
            assert peaks[i] >= peaks[i - 1]
    assert agg.max_drawdown == max(p.drawdown for p in agg.drawdown_series)

def test_grouping_completeness_and_order():
    trades = [
        make_trade("A", 100.0, D1, "09:00", session="london", pips=10.0),
        make_trade("B", -40.0, D1, "14:00", session="new_york", pips=-4.0),
        make_trade("C", 60.0, D2, None, session=None),
        make_trade("D", 50.0, D2, "09:30", session="new_york", symbol="GBP/USD"),
        make_trade("E", 10.0, D3, "09:10", session="asian"),
    ]
    report = compute_metrics(trades, group_by=["session", "hour", "symbol", "weekday"])

    for dimension, rows in report.grouped_performance.items():
        assert sum(r.count for r in rows) == report.total_trades, dimension

    sessions = report.grouped_performance["session"]
    # london 100, Unknown 60, asian 10, new_york 10 -> tie broken alphabetically
    assert [r.group_key for r in sessions] == ["london", "Unknown", "asian", "new_york"]
    new_york = sessions[3]
    assert new_york.count == 2
    assert new_york.win_count == 1
    assert new_york.win_rate == 50.0
    assert new_york.total_pips == -4.0

    hours = {r.group_key: r for r in report.grouped_performance["hour"]}
    assert hours["09"].count == 3
    assert hours["Unknown"].count == 1

    assert set(report.grouped_performance) == {"session", "hour", "symbol", "weekday"}

def test_group_key_dimensions():
    trade = make_trade("A", 1.0, date(2025, 3, 7), "21:45", side=TradeSide.SHORT, timeframe="H1")
    assert group_key(trade, "weekday") == "Friday"
    assert group_key(trade, "hour") == "21"
    assert group_key(trade, "side") == "short"
    assert group_key(trade, "timeframe") == "H1"
    assert group_key(trade, "strategy") == "Unknown"
    assert group_key(trade, "date") == "2025-03-07"
    with pytest.raises(ValueError):
        group_key(trade, "moon_phase")

def test_unknown_dimension_is_ignored():
    report = compute_metrics([make_trade("A", 1.0)], group_by=["symbol", "moon_phase"])
    assert list(report.grouped_performance) == ["symbol"]

# --- Derived ratios ---

def test_profit_factor_sentinel():
    report = compute_metrics(streak_trades([100.0, 50.0]))
    assert report.profit_factor is UNBOUNDED
    assert report.risk_reward_ratio is UNBOUNDED
    assert report.recovery_factor is UNBOUNDED
    assert report.to_dict()["profit_factor"] == "unbounded"
    assert 0.0 <= report.performance_score <= 100.0

def test_sharpe_and_sortino():
    report = compute_metrics(streak_trades([10.0, 20.0]))
    assert report.sharpe_ratio == pytest.approx(3.0)
    assert report.sortino_ratio == pytest.approx(3.0)

    single = compute_metrics(streak_trades([10.0]))
    assert single.sharpe_ratio == 0.0
    assert single.sortino_ratio == 0.0

def test_scores_stay_in_range():
    huge = compute_metrics(streak_trades([1e9, -1.0, 1e9, 1e9]))
    assert 0.0 <= huge.performance_score <= 100.0
    assert 0.0 <= huge.risk_score <= 100.0

    bad = compute_metrics(streak_trades([-1e6, -5e5, 1.0]))
    assert 0.0 <= bad.performance_score <= 100.0
    assert bad.risk_score == 100.0

def test_cost_breakdown():
    trades = [
        make_trade("A", 100.0, D1, commission=5.0, swap=-2.0),
        make_trade("B", -50.0, D2, commission=5.0, swap=3.0),
    ]
    report = compute_metrics(trades)
    assert report.total_pnl == 50.0
    assert report.total_commissions == 10.0
    assert report.total_swap == 1.0
    assert report.net_pnl == 38.0

def test_supplementary_metrics():
    trades = [
        make_trade("A", 100.0, D1, "09:00", time_out="11:00", pips=20.0, risk_amount=50.0, confidence=8),
        make_trade("B", -50.0, D1, "14:00", time_out="14:30", pips=-10.0, r_multiple=-1.0, confidence=9),
        make_trade("C", -20.0, D2, "09:30", confidence=3),
        make_trade("D", 30.0, D3, risk_amount=30.0),
    ]
    report = compute_metrics(trades)

    assert report.avg_holding_period_hours == pytest.approx(1.25)
    assert report.total_pips == 10.0
    assert report.avg_pips == 5.0
    # R: A derived 2.0, B explicit -1.0, D derived 1.0
    assert report.avg_r_multiple == pytest.approx(2.0 / 3.0)
    assert report.total_risk == 80.0
    # A confident win (hit), B confident loss (miss), C unconfident loss (hit)
    assert report.confidence_accuracy == pytest.approx(66.67, abs=0.01)
    assert report.active_days == 3
    assert report.trades_per_day == pytest.approx(4 / 3)
    # D1 (Monday) nets +50, best hour is 09 (+80)
    assert report.best_trading_day == "Monday"
    assert report.best_trading_hour == "09"

def test_confidence_threshold_from_config():
    trades = [make_trade("A", 10.0, confidence=6)]
    default = compute_metrics(trades)
    lenient = compute_metrics(trades, config=AnalyticsConfig(confidence_threshold=5))
    assert default.confidence_accuracy == 0.0
    assert lenient.confidence_accuracy == 100.0

def test_determinism():
    rng = random.Random(3)
    trades = [
        make_trade(f"T{i}", round(rng.uniform(-50, 80), 2), date(2025, 1 + i % 6, 1 + i % 27),
                   f"{8 + i % 9:02d}:{i % 60:02d}", session=rng.choice(["asian", "london", None]))
        for i in range(40)
    ]
    analyzer = PerformanceAnalyzer()
    first = analyzer.analyze_trades(trades)
    second = analyzer.analyze_trades(list(reversed(trades)))
    assert first == second
    assert first.to_dict() == second.to_dict()

# --- Accounts ---

def test_account_statistics():
    account = TradingAccount(id="acc1", name="Live", initial_balance=10000.0)
    other = TradingAccount(id="acc2", name="Demo", initial_balance=0.0)
    trades = [
        make_trade("A", 300.0, D1, account_id="acc1", commission=10.0),
        make_trade("B", -100.0, D2, account_id="acc1"),
        make_trade("C", 999.0, D2, account_id="acc2"),
        make_trade("D", 5.0, D3, status=TradeStatus.OPEN, account_id="acc1"),
    ]
    stats = AccountAnalyzer().analyze_accounts([account, other], trades)

    live = stats[0]
    assert live.account_id == "acc1"
    assert live.report.total_records == 3
    assert live.report.total_trades == 2
    assert live.report.net_pnl == 190.0
    assert live.current_balance == 10190.0
    assert live.roi == pytest.approx(1.9)

    demo = stats[1]
    assert demo.roi == 0.0
    assert demo.report.total_pnl == 999.0

if __name__ == "__main__":
    test_end_to_end_example()
    test_empty_input_gives_zero_report()
    test_ineligible_trades_are_excluded_but_counted()
    test_time_window_is_half_open()
    test_undated_trade_excluded_only_by_window()
    test_account_filter()
    test_invalid_filter_is_flagged_not_raised()
    test_sequence_order()
    test_sequence_is_permutation_invariant()
    test_idless_trades_order_is_input_independent()
    test_streaks()
    test_flat_trade_does_not_break_streak()
    test_win_rate_counts_flat_trades_in_total()
    test_curve_invariants()
    test_grouping_completeness_and_order()
    test_group_key_dimensions()
    test_unknown_dimension_is_ignored()
    test_profit_factor_sentinel()
    test_sharpe_and_sortino()
    test_scores_stay_in_range()
    test_cost_breakdown()
    test_supplementary_metrics()
    test_confidence_threshold_from_config()
    test_determinism()
    test_account_statistics()
    print("Analytics Verification PASSED")
