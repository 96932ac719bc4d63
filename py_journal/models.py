"""
py_journal/models.py
Journal Data Structures (DTOs/Enums). PURE DATA.
Records are owned by the persistence layer; analytics only reads them.
"""
import math
from enum import Enum
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Optional, Dict, Any


class TradeSide(Enum):
    LONG = "long"
    SHORT = "short"


class TradeStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"


# --- Parsing Helpers ---
# Documents come from a remote store with camelCase keys. Both spellings are accepted.

def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _to_float(value: Any) -> Optional[float]:
    """ Numeric or numeric string -> float. Anything else -> None. NaN/Inf are kept as-is. """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None or not math.isfinite(number):
        return None
    return int(round(number))


def _to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_trade_date(value: Any) -> Optional[date]:
    """ Accepts date, datetime, 'YYYY-MM-DD' and ISO timestamps ('YYYY-MM-DDTHH:MM...'). """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


@dataclass
class TradeRecord:
    """ One journaled trade (forex/futures). Optional fields may be missing on partial entries. """
    id: str
    symbol: str
    side: TradeSide
    status: TradeStatus
    date: Optional[date]
    time_in: Optional[str] = None   # local wall-clock "HH:MM" or "HH:MM:SS"
    time_out: Optional[str] = None

    # Pricing & Sizing
    entry_price: Optional[float] = None
    exit_price: Optional[float] = None
    quantity: float = 0.0           # lot size

    # Outcome (account currency)
    pnl: Optional[float] = None
    commission: Optional[float] = None
    swap: Optional[float] = None
    spread: Optional[float] = None
    pips: Optional[float] = None

    # Risk
    risk_amount: Optional[float] = None
    r_multiple: Optional[float] = None
    confidence: Optional[int] = None  # 1-10, subjective

    # Classification
    strategy: Optional[str] = None
    session: Optional[str] = None
    timeframe: Optional[str] = None
    currency_pair: Optional[str] = None
    account_id: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED

    @property
    def instrument(self) -> Optional[str]:
        """ Symbol with currency pair as fallback (forex entries often only carry the pair). """
        return self.symbol or self.currency_pair

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["side"] = self.side.value
        d["status"] = self.status.value
        d["date"] = self.date.isoformat() if self.date else None
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'TradeRecord':
        side_raw = str(_pick(data, "side", "direction") or "long").lower()
        status_raw = str(_pick(data, "status") or "open").lower()

        return TradeRecord(
            id=str(_pick(data, "id") or ""),
            symbol=_to_str(_pick(data, "symbol", "currency_pair", "currencyPair")) or "",
            side=TradeSide.SHORT if side_raw == "short" else TradeSide.LONG,
            status=TradeStatus.CLOSED if status_raw == "closed" else TradeStatus.OPEN,
            date=parse_trade_date(_pick(data, "date")),
            time_in=_to_str(_pick(data, "time_in", "timeIn")),
            time_out=_to_str(_pick(data, "time_out", "timeOut")),
            entry_price=_to_float(_pick(data, "entry_price", "entryPrice")),
            exit_price=_to_float(_pick(data, "exit_price", "exitPrice")),
            quantity=_to_float(_pick(data, "quantity", "lot_size", "lotSize")) or 0.0,
            pnl=_to_float(_pick(data, "pnl")),
            commission=_to_float(_pick(data, "commission")),
            swap=_to_float(_pick(data, "swap")),
            spread=_to_float(_pick(data, "spread")),
            pips=_to_float(_pick(data, "pips")),
            risk_amount=_to_float(_pick(data, "risk_amount", "riskAmount")),
            r_multiple=_to_float(_pick(data, "r_multiple", "rMultiple")),
            confidence=_to_int(_pick(data, "confidence")),
            strategy=_to_str(_pick(data, "strategy")),
            session=_to_str(_pick(data, "session")),
            timeframe=_to_str(_pick(data, "timeframe")),
            currency_pair=_to_str(_pick(data, "currency_pair", "currencyPair")),
            account_id=_to_str(_pick(data, "account_id", "accountId")),
        )


@dataclass
class TradingAccount:
    """ A trading account trades are booked against. """
    id: str
    name: str
    currency: str = "USD"
    initial_balance: float = 0.0
    broker: str = ""
    type: str = "demo"   # live / demo
    is_active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'TradingAccount':
        active = _pick(data, "is_active", "isActive")
        return TradingAccount(
            id=str(_pick(data, "id") or ""),
            name=_to_str(_pick(data, "name")) or "",
            currency=_to_str(_pick(data, "currency")) or "USD",
            initial_balance=_to_float(_pick(data, "initial_balance", "initialBalance")) or 0.0,
            broker=_to_str(_pick(data, "broker")) or "",
            type=_to_str(_pick(data, "type")) or "demo",
            is_active=True if active is None else bool(active),
        )
