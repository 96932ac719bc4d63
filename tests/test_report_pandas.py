import pandas as pd
from datetime import date
from py_journal.models import TradeRecord, TradeSide, TradeStatus
from py_analytics.performance import compute_metrics

def _trade(trade_id, pnl, day, symbol):
    return TradeRecord(trade_id, symbol, TradeSide.LONG, TradeStatus.CLOSED, date(2025, 2, day), pnl=pnl)

def test_report_pandas_conversion():
    # 1. Setup Report with dummy data
    trades = [
        _trade("A", 160.0, 3, "EUR/USD"),
        _trade("B", -255.0, 4, "GBP/USD"),
        _trade("C", 320.0, 5, "EUR/USD"),
    ]
    report = compute_metrics(trades, group_by=["symbol"])
    
    # 2. Test equity_df
    df_eq = report.equity_df
    assert isinstance(df_eq, pd.DataFrame)
    assert len(df_eq) == 3
    assert list(df_eq["cumulative_pnl"]) == [160.0, -95.0, 225.0]
    assert df_eq.iloc[1]["drawdown"] == 255.0
    assert df_eq["drawdown"].max() == report.max_drawdown
    
    # 3. Test grouped_df
    df_sym = report.grouped_df("symbol")
    assert isinstance(df_sym, pd.DataFrame)
    assert list(df_sym["group_key"]) == ["EUR/USD", "GBP/USD"]
    assert df_sym.iloc[0]["total_pnl"] == 480.0
    assert df_sym["count"].sum() == report.total_trades
    
    # 4. Empty Report
    empty = compute_metrics([])
    df_empty = empty.equity_df
    assert len(df_empty) == 0
    assert "cumulative_pnl" in df_empty.columns
    assert len(empty.grouped_df("symbol")) == 0
    
    print("\n[SUCCESS] Pandas DataFrame Bridge Verified.")

if __name__ == "__main__":
    test_report_pandas_conversion()
