# Expose key functions for cleaner imports
from .models import Ratio, RatioBound, UNBOUNDED, is_unbounded, cap_ratio, ratio_to_json
from .core import calculate_pnl, calculate_pips, calculate_r_multiple, calculate_holding_hours, is_finite_number
from .risk import calculate_pip_value, calculate_position_size, calculate_risk_amount, calculate_risk_score
from .series import calculate_drawdown_series, calculate_peak_series, calculate_max_drawdown
from .performance import profit_factor, recovery_factor, calculate_performance_score
