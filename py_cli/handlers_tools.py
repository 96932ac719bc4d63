# py_cli/handlers_tools.py
import json
from typing import List, Dict, Any
from .models import CLIContext, CommandResponse
from .commands import ICommand, registry
from py_financial_math.core import calculate_pips, calculate_pnl
from py_financial_math.risk import calculate_pip_value, calculate_position_size, calculate_risk_amount

class CalcCommand(ICommand):
    name = "calc"
    description = "Forex calculators: pip value, position size, risk amount, pips, pnl."
    syntax = "calc <pip_value|position_size|risk|pips|pnl> <json_payload>"

    def execute(self, ctx: CLIContext, args: List[str]) -> CommandResponse:
        if len(args) < 2:
            return CommandResponse(False, f"Usage: {self.syntax}", error_code="INVALID_ARGS")

        sub_cmd = args[0].lower()
        try:
            payload = json.loads(" ".join(args[1:]))
        except json.JSONDecodeError:
            return CommandResponse(False, "Invalid JSON payload.", error_code="JSON_ERROR")
        if not isinstance(payload, dict):
            return CommandResponse(False, "Payload must be a JSON object.", error_code="JSON_ERROR")

        handlers = {
            "pip_value": self._pip_value,
            "position_size": self._position_size,
            "risk": self._risk,
            "pips": self._pips,
            "pnl": self._pnl,
        }
        handler = handlers.get(sub_cmd)
        if handler is None:
            return CommandResponse(False, f"Unknown sub-command: {sub_cmd}", error_code="UNKNOWN_SUBCOMMAND")

        try:
            return handler(payload)
        except (KeyError, TypeError, ValueError) as e:
            return CommandResponse(False, f"Invalid calculator input: {e}", error_code="INVALID_ARGS")

    def _pip_value(self, p: Dict[str, Any]) -> CommandResponse:
        pair = p["currency_pair"]
        lot_size = float(p.get("lot_size", 1.0))
        lot_type = p.get("lot_type", "standard")
        value = calculate_pip_value(pair, lot_size, lot_type)
        return CommandResponse(True, message=f"Pip Value {pair}: {value:.2f} per pip",
                               payload={"currency_pair": pair, "lot_size": lot_size, "lot_type": lot_type, "pip_value": value})

    def _position_size(self, p: Dict[str, Any]) -> CommandResponse:
        pair = p["currency_pair"]
        balance = float(p["balance"])
        risk_pct = float(p.get("risk_pct", 1.0))
        stop_pips = float(p["stop_loss_pips"])
        lots = calculate_position_size(balance, risk_pct, stop_pips, pair)
        return CommandResponse(True, message=f"Recommended Size {pair}: {lots:.2f} lots",
                               payload={"currency_pair": pair, "risk_amount": balance * risk_pct / 100.0, "recommended_lot_size": lots})

    def _risk(self, p: Dict[str, Any]) -> CommandResponse:
        pair = p["currency_pair"]
        lot_size = float(p["lot_size"])
        lot_type = p.get("lot_type", "standard")
        stop_pips = float(p["stop_loss_pips"])
        amount = calculate_risk_amount(lot_size, lot_type, stop_pips, pair)
        return CommandResponse(True, message=f"Risk Amount {pair}: {amount:.2f}",
                               payload={"currency_pair": pair, "risk_amount": amount})

    def _side(self, p: Dict[str, Any]) -> str:
        side = str(p.get("side", "long")).lower()
        if side not in ("long", "short"):
            raise ValueError(f"side must be 'long' or 'short', got {side}")
        return side

    def _pips(self, p: Dict[str, Any]) -> CommandResponse:
        pair = p["currency_pair"]
        side = self._side(p)
        pips = calculate_pips(float(p["entry_price"]), float(p["exit_price"]), pair, side=side)
        return CommandResponse(True, message=f"Pips {pair} ({side}): {pips:+.1f}",
                               payload={"currency_pair": pair, "side": side, "pips": pips})

    def _pnl(self, p: Dict[str, Any]) -> CommandResponse:
        side = self._side(p)
        pnl = calculate_pnl(float(p["entry_price"]), float(p["exit_price"]), float(p["quantity"]), side=side)
        return CommandResponse(True, message=f"PnL ({side}): {pnl:+.2f}",
                               payload={"side": side, "pnl": pnl})

# Register
registry.register(CalcCommand())
