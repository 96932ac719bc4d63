# py_cli/handlers_analytics.py
import json
from typing import List, Dict, Any, Optional, Tuple
from .models import CLIContext, CommandResponse
from .commands import ICommand, registry
from py_journal.models import parse_trade_date
from py_journal.store import JournalStore
from py_analytics.config import GROUP_DIMENSIONS
from py_analytics.models import TradeFilter
from py_analytics.performance import PerformanceAnalyzer
from py_analytics.accounts import AccountAnalyzer
from py_financial_math.models import ratio_to_json

# --- Shared helpers ---

def parse_payload(args: List[str]) -> Dict[str, Any]:
    """ Joins the remaining args back into one JSON document. Raises json.JSONDecodeError. """
    if not args:
        return {}
    payload = json.loads(" ".join(args))
    if not isinstance(payload, dict):
        raise json.JSONDecodeError("Expected a JSON object", " ".join(args), 0)
    return payload

def parse_filter(payload: Dict[str, Any]) -> Tuple[TradeFilter, Optional[List[str]]]:
    """ {"from", "to", "account_id", "group_by"} -> (TradeFilter, group_by). Raises ValueError on bad dates. """
    bounds = {}
    for key in ("from", "to"):
        raw = payload.get(key)
        if raw is None:
            bounds[key] = None
            continue
        parsed = parse_trade_date(raw)
        if parsed is None:
            raise ValueError(f"Invalid date for '{key}': {raw}")
        bounds[key] = parsed

    group_by = payload.get("group_by")
    if group_by is not None and not isinstance(group_by, list):
        group_by = [str(group_by)]

    trade_filter = TradeFilter(
        date_from=bounds["from"],
        date_to=bounds["to"],
        account_id=payload.get("account_id"),
    )
    return trade_filter, group_by

def load_journal(ctx: CLIContext) -> Optional[JournalStore]:
    if not ctx.journal_path:
        return None
    store = JournalStore(ctx.journal_path)
    if not store.exists:
        return None
    return store.load()

def _no_journal(ctx: CLIContext) -> CommandResponse:
    return CommandResponse(False, f"No journal found at '{ctx.journal_path}'. Use --journal PATH.", error_code="NO_JOURNAL")

def _prepare(ctx: CLIContext, args: List[str]):
    """ Common front half: payload, filter, journal. Returns (store, filter, group_by) or an error response. """
    try:
        payload = parse_payload(args)
    except json.JSONDecodeError:
        return CommandResponse(False, "Invalid JSON payload.", error_code="JSON_ERROR")
    try:
        trade_filter, group_by = parse_filter(payload)
    except ValueError as e:
        return CommandResponse(False, str(e), error_code="INVALID_ARGS")

    store = load_journal(ctx)
    if store is None:
        return _no_journal(ctx)
    return store, trade_filter, group_by

# --- Commands ---

class ReportCommand(ICommand):
    name = "report"
    description = "Full performance report for the loaded journal."
    syntax = "report [json_filter]  e.g. report {\"from\": \"2025-01-01\", \"to\": \"2025-07-01\"}"

    def execute(self, ctx: CLIContext, args: List[str]) -> CommandResponse:
        prepared = _prepare(ctx, args)
        if isinstance(prepared, CommandResponse):
            return prepared
        store, trade_filter, group_by = prepared

        report = PerformanceAnalyzer(ctx.config).analyze_trades(store.trades, trade_filter, group_by)
        if report.invalid_filter:
            return CommandResponse(True, message="Filter window is empty ('from' after 'to'). Zero report returned.",
                                   payload=report.to_dict(), error_code="INVALID_FILTER")

        pf = ratio_to_json(report.profit_factor)
        pf_text = "∞" if pf == "unbounded" else f"{pf:.2f}"
        message = (f"Performance Report: {report.total_trades} trades, "
                   f"Net PnL {report.net_pnl:+.2f}, Win Rate {report.win_rate:.1f}%, PF {pf_text}")
        return CommandResponse(True, message=message, payload=report.to_dict())

class GroupsCommand(ICommand):
    name = "groups"
    description = "Performance grouped by one dimension, best group first."
    syntax = f"groups <{'|'.join(GROUP_DIMENSIONS)}> [json_filter]"

    def execute(self, ctx: CLIContext, args: List[str]) -> CommandResponse:
        if not args:
            return CommandResponse(False, f"Usage: {self.syntax}", error_code="INVALID_ARGS")

        dimension = args[0].lower()
        if dimension not in GROUP_DIMENSIONS:
            return CommandResponse(False, f"Unknown dimension: {dimension}", error_code="UNKNOWN_SUBCOMMAND")

        prepared = _prepare(ctx, args[1:])
        if isinstance(prepared, CommandResponse):
            return prepared
        store, trade_filter, _ = prepared

        report = PerformanceAnalyzer(ctx.config).analyze_trades(store.trades, trade_filter, [dimension])
        rows = [g.to_dict() for g in report.grouped_performance.get(dimension, ())]
        return CommandResponse(True, message=f"Performance by {dimension}: {len(rows)} groups",
                               payload={"dimension": dimension, "groups": rows})

class EquityCommand(ICommand):
    name = "equity"
    description = "Equity curve and drawdown series in trade sequence order."
    syntax = "equity [json_filter]"

    def execute(self, ctx: CLIContext, args: List[str]) -> CommandResponse:
        prepared = _prepare(ctx, args)
        if isinstance(prepared, CommandResponse):
            return prepared
        store, trade_filter, _ = prepared

        report = PerformanceAnalyzer(ctx.config).analyze_trades(store.trades, trade_filter, [])
        payload = {
            "equity_curve": [p.to_dict() for p in report.equity_curve],
            "drawdown_series": [p.to_dict() for p in report.drawdown_series],
            "max_drawdown": report.max_drawdown,
        }
        return CommandResponse(True, message=f"Equity Curve: {len(report.equity_curve)} points, Max DD {report.max_drawdown:.2f}",
                               payload=payload)

class AccountsCommand(ICommand):
    name = "accounts"
    description = "Statistics per trading account (balance, ROI, ratios)."
    syntax = "accounts [json_filter]"

    def execute(self, ctx: CLIContext, args: List[str]) -> CommandResponse:
        prepared = _prepare(ctx, args)
        if isinstance(prepared, CommandResponse):
            return prepared
        store, trade_filter, _ = prepared

        if not store.accounts:
            return CommandResponse(True, message="No accounts in journal.", payload={"accounts": []})

        stats = AccountAnalyzer(ctx.config).analyze_accounts(store.accounts, store.trades, trade_filter)
        return CommandResponse(True, message=f"Account Statistics: {len(stats)} accounts",
                               payload={"accounts": [s.to_dict() for s in stats]})

# Register
registry.register(ReportCommand(), aliases=["stats"])
registry.register(GroupsCommand(), aliases=["group"])
registry.register(EquityCommand())
registry.register(AccountsCommand())
