from typing import Iterable, List, Optional, Sequence

from py_journal.models import TradeRecord, TradingAccount
from .config import AnalyticsConfig, DEFAULT_CONFIG
from .models import AccountStats, TradeFilter
from .performance import PerformanceAnalyzer


class AccountAnalyzer:
    """ Per-account statistics. One independent pass per account. """

    def __init__(self, config: AnalyticsConfig = DEFAULT_CONFIG):
        self.analyzer = PerformanceAnalyzer(config)

    def analyze_account(
        self,
        account: TradingAccount,
        trades: Iterable[TradeRecord],
        trade_filter: Optional[TradeFilter] = None,
        group_by: Optional[Sequence[str]] = None,
    ) -> AccountStats:
        base = trade_filter or TradeFilter()
        scoped = TradeFilter(date_from=base.date_from, date_to=base.date_to, account_id=account.id)

        # Activity count is per account as well
        account_trades = [t for t in trades if t.account_id == account.id]
        report = self.analyzer.analyze_trades(account_trades, scoped, group_by)

        roi = 0.0
        if account.initial_balance > 0:
            roi = report.net_pnl / account.initial_balance * 100.0

        return AccountStats(
            account_id=account.id,
            account_name=account.name,
            initial_balance=account.initial_balance,
            current_balance=account.initial_balance + report.net_pnl,
            roi=roi,
            report=report,
        )

    def analyze_accounts(
        self,
        accounts: Iterable[TradingAccount],
        trades: Iterable[TradeRecord],
        trade_filter: Optional[TradeFilter] = None,
    ) -> List[AccountStats]:
        trades = list(trades)
        return [self.analyze_account(a, trades, trade_filter, group_by=[]) for a in accounts]
