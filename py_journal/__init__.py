from .models import TradeRecord, TradingAccount, TradeSide, TradeStatus, parse_trade_date
from .store import JournalStore
