import json
import math
from datetime import date

import pytest

from py_journal.models import TradeRecord, TradingAccount, TradeSide, TradeStatus
from py_journal.store import JournalStore

def test_trade_from_document():
    # Remote store documents use camelCase and loose types
    doc = {
        "id": "t1",
        "currencyPair": "EUR/USD",
        "side": "short",
        "status": "closed",
        "date": "2025-03-03T00:00:00.000Z",
        "timeIn": "09:15",
        "timeOut": "",
        "entryPrice": "1.1050",
        "exitPrice": 1.1000,
        "lotSize": 1.5,
        "pnl": "750",
        "commission": 7,
        "pips": 50,
        "riskAmount": "abc",
        "confidence": "8",
        "accountId": "acc1",
    }
    t = TradeRecord.from_dict(doc)
    assert t.symbol == "EUR/USD"
    assert t.instrument == "EUR/USD"
    assert t.side == TradeSide.SHORT
    assert t.status == TradeStatus.CLOSED
    assert t.is_closed
    assert t.date == date(2025, 3, 3)
    assert t.time_in == "09:15"
    assert t.time_out is None
    assert t.entry_price == 1.105
    assert t.quantity == 1.5
    assert t.pnl == 750.0
    assert t.risk_amount is None
    assert t.confidence == 8
    assert t.account_id == "acc1"

def test_trade_defaults_and_round_trip():
    t = TradeRecord.from_dict({"id": "x", "symbol": "ES", "pnl": "nan", "date": "not a date"})
    assert t.side == TradeSide.LONG
    assert t.status == TradeStatus.OPEN
    assert t.date is None
    assert math.isnan(t.pnl)

    original = TradeRecord("y", "NQ", TradeSide.LONG, TradeStatus.CLOSED, date(2025, 1, 2), pnl=12.5, session="us")
    d = original.to_dict()
    assert d["side"] == "long"
    assert d["date"] == "2025-01-02"
    assert TradeRecord.from_dict(d) == original

def test_account_from_document():
    acc = TradingAccount.from_dict({"id": "a", "name": "Live", "initialBalance": "5000", "isActive": False})
    assert acc.initial_balance == 5000.0
    assert acc.is_active is False
    assert TradingAccount.from_dict({"id": "b"}).is_active is True

@pytest.fixture
def journal_dir(tmp_path):
    (tmp_path / "2025").mkdir()
    (tmp_path / "2025" / "march.json").write_text(json.dumps([
        {"id": "a", "symbol": "EUR/USD", "status": "closed", "date": "2025-03-03", "pnl": 10},
        {"id": "b", "symbol": "EUR/USD", "status": "open", "date": "2025-03-04"},
    ]))
    (tmp_path / "accounts.json").write_text(json.dumps({
        "accounts": [{"id": "acc1", "name": "Live", "initialBalance": 1000}],
        "trades": [{"id": "c", "symbol": "GBP/USD", "status": "closed", "date": "2025-03-05", "pnl": -5}],
    }))
    (tmp_path / "single.json").write_text(json.dumps({"id": "d", "symbol": "ES", "status": "closed", "pnl": 1}))
    (tmp_path / "broken.json").write_text("{ not json")
    (tmp_path / "notes.txt").write_text("ignored")
    return tmp_path

def test_store_loads_directory(journal_dir):
    store = JournalStore(str(journal_dir)).load()
    assert sorted(t.id for t in store.trades) == ["a", "b", "c", "d"]
    assert len(store.accounts) == 1
    assert store.get_account("acc1").initial_balance == 1000.0
    assert store.get_account("missing") is None

def test_store_missing_path(tmp_path):
    store = JournalStore(str(tmp_path / "nope.json"))
    assert not store.exists
    assert store.load().trades == []

def test_store_tolerates_null_sections(tmp_path):
    (tmp_path / "empty_export.json").write_text(json.dumps({
        "trades": None,
        "accounts": [{"id": "acc1", "name": "Live", "initialBalance": 1000}],
    }))
    (tmp_path / "odd_export.json").write_text(json.dumps({"trades": {"id": "x"}, "accounts": None}))
    (tmp_path / "trades.json").write_text(json.dumps([
        {"id": "a", "symbol": "EUR/USD", "status": "closed", "date": "2025-03-03", "pnl": 10},
    ]))

    store = JournalStore(str(tmp_path)).load()
    assert [t.id for t in store.trades] == ["a"]
    assert [a.id for a in store.accounts] == ["acc1"]

if __name__ == "__main__":
    test_trade_from_document()
    test_trade_defaults_and_round_trip()
    test_account_from_document()
    print("Journal Tests PASSED (fixture tests need pytest)")
