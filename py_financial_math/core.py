import math
from datetime import datetime, timedelta
from typing import Any, Optional

# Quote currencies quoted with 2 decimals per pip
JPY_LIKE_CURRENCIES = ["JPY", "HUF", "KRW", "CLP", "ISK", "PYG"]


def is_finite_number(value: Any) -> bool:
    """ True for real numbers that are neither NaN nor +/-Inf. Bools do not count. """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def calculate_pnl(entry_price: float, exit_price: float, quantity: float, side: str = "long") -> float:
    """
    Calculates absolute price PnL.
    Short positions profit from falling prices.
    """
    diff = exit_price - entry_price
    if side == "short":
        diff = -diff
    return diff * quantity


def get_pip_decimal_places(currency_pair: str) -> int:
    """ 'USD/JPY' -> 2, 'EUR/USD' -> 4. """
    parts = currency_pair.split("/")
    quote = parts[1] if len(parts) > 1 else ""
    return 2 if quote.upper() in JPY_LIKE_CURRENCIES else 4


def calculate_pips(entry_price: float, exit_price: float, currency_pair: str, side: str = "long") -> float:
    pip_size = 10 ** -get_pip_decimal_places(currency_pair)
    diff = exit_price - entry_price
    if side == "short":
        diff = entry_price - exit_price
    return diff / pip_size


def calculate_r_multiple(pnl: float, risk_amount: float) -> float:
    """
    Realized PnL expressed in units of planned risk.
    Formula: PnL / Risk
    """
    if risk_amount <= 0:
        return 0.0
    return pnl / risk_amount


def _parse_wall_clock(value: str) -> Optional[timedelta]:
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            t = datetime.strptime(value.strip(), fmt)
            return timedelta(hours=t.hour, minutes=t.minute, seconds=t.second)
        except ValueError:
            continue
    return None


def parse_time_of_day(value: Optional[str]) -> Optional[timedelta]:
    """ 'HH:MM[:SS]' -> offset from midnight. Missing or garbage -> None. """
    if not value:
        return None
    return _parse_wall_clock(value)


def calculate_holding_hours(time_in: Optional[str], time_out: Optional[str]) -> Optional[float]:
    """
    Hours between entry and exit wall-clock times.
    Exit before entry is read as an overnight hold (next day).
    """
    start = parse_time_of_day(time_in)
    end = parse_time_of_day(time_out)
    if start is None or end is None:
        return None

    held = end - start
    if held < timedelta(0):
        held += timedelta(days=1)
    return held.total_seconds() / 3600.0
