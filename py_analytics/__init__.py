from .models import MetricsReport, Aggregates, TradeFilter, EquityPoint, DrawdownPoint, GroupStat, AccountStats
from .config import AnalyticsConfig, load_config
from .selection import select
from .sequencing import sequence
from .aggregation import aggregate
from .performance import PerformanceAnalyzer, build_report, compute_metrics
from .accounts import AccountAnalyzer
