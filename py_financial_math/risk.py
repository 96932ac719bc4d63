from .core import get_pip_decimal_places

LOT_SIZES = {
    "standard": 100000,
    "mini": 10000,
    "micro": 1000,
}


def calculate_pip_value(currency_pair: str, lot_size: float, lot_type: str = "standard") -> float:
    """
    Value of one pip in quote terms.
    Formula: PipSize * Units, Units = LotSize * LotMultiplier
    No cross-rate conversion: assumes the account currency is the quote currency.
    """
    if lot_type not in LOT_SIZES:
        raise ValueError(f"Unknown lot type: {lot_type}")
    units = lot_size * LOT_SIZES[lot_type]
    pip_size = 10 ** -get_pip_decimal_places(currency_pair)
    return pip_size * units


def calculate_position_size(balance: float, risk_pct: float, stop_loss_pips: float, currency_pair: str) -> float:
    """
    Recommended size in standard lots for a given account risk.
    Formula: RiskAmount = Balance * RiskPct / 100
             Lots = RiskAmount / (StopPips * PipValue(1 standard lot))
    """
    if balance <= 0: return 0.0
    if risk_pct <= 0: return 0.0
    if stop_loss_pips <= 0: return 0.0

    risk_amount = balance * risk_pct / 100.0
    pip_value = calculate_pip_value(currency_pair, 1.0, "standard")
    return risk_amount / (stop_loss_pips * pip_value)


def calculate_risk_amount(lot_size: float, lot_type: str, stop_loss_pips: float, currency_pair: str) -> float:
    """ $ lost if the stop is hit. """
    return abs(stop_loss_pips) * calculate_pip_value(currency_pair, lot_size, lot_type)


def calculate_risk_score(max_drawdown: float, total_pnl: float, volatility: float) -> float:
    """
    Composite risk score 0-100, lower is better.
    Drawdown relative to the net result (in %), plus pnl volatility scaled down by 100.
    """
    reference = abs(total_pnl) if total_pnl != 0 else 1.0
    score = (max_drawdown / reference) * 100.0 + (volatility / 100.0)
    return max(0.0, min(100.0, score))
