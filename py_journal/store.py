import os
import json
import logging
from typing import List, Dict, Any, Optional

from .models import TradeRecord, TradingAccount

logger = logging.getLogger(__name__)


class JournalStore:
    """
    Read-only view over an exported journal.
    `path` is either a single JSON file or a directory scanned recursively for *.json.
    A file holds a list of trade documents or {"trades": [...], "accounts": [...]}.
    """
    def __init__(self, path: str):
        self.path = path
        self.trades: List[TradeRecord] = []
        self.accounts: List[TradingAccount] = []

    @property
    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> 'JournalStore':
        self.trades = []
        self.accounts = []
        if not self.exists:
            logger.warning("Journal path not found: %s", self.path)
            return self

        if os.path.isdir(self.path):
            for root, _, files in sorted(os.walk(self.path)):
                for file in sorted(files):
                    if file.endswith(".json"):
                        self._load_file(os.path.join(root, file))
        else:
            self._load_file(self.path)

        logger.debug("Loaded %d trades, %d accounts from %s", len(self.trades), len(self.accounts), self.path)
        return self

    def get_account(self, account_id: str) -> Optional[TradingAccount]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def _load_file(self, full_path: str):
        try:
            with open(full_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Skipping unreadable journal file %s: %s", full_path, e)
            return

        if isinstance(data, list):
            self._add_trades(data)
        elif isinstance(data, dict):
            if "trades" in data or "accounts" in data:
                self._add_trades(self._section(data, "trades", full_path))
                self._add_accounts(self._section(data, "accounts", full_path))
            else:
                # Single trade document
                self._add_trades([data])

    @staticmethod
    def _section(data: Dict[str, Any], key: str, full_path: str) -> List[Any]:
        """ data[key] as a list. Missing or null -> []; anything else is skipped with a warning. """
        value = data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("Skipping '%s' in %s: expected a list, got %s", key, full_path, type(value).__name__)
            return []
        return value

    def _add_trades(self, docs: List[Dict[str, Any]]):
        for doc in docs:
            if isinstance(doc, dict):
                self.trades.append(TradeRecord.from_dict(doc))

    def _add_accounts(self, docs: List[Dict[str, Any]]):
        for doc in docs:
            if isinstance(doc, dict):
                self.accounts.append(TradingAccount.from_dict(doc))
