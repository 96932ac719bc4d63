"""
py_analytics/config.py
Engine tuning knobs. Defaults reproduce the documented formulas; a JSON file may override them.
"""
import os
import json
import logging
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)

GROUP_DIMENSIONS = ["symbol", "session", "weekday", "hour", "timeframe", "strategy", "side", "date"]


@dataclass(frozen=True)
class AnalyticsConfig:
    confidence_threshold: int = 7  # rating at or above counts as "confident"
    performance_weights: Tuple[float, float, float] = (0.3, 0.4, 0.3)  # win rate / profit factor / inverse risk
    profit_factor_cap: float = 10.0
    unknown_label: str = "Unknown"
    default_group_by: Tuple[str, ...] = ("symbol", "session", "weekday", "hour", "timeframe")
    log_dir: str = "logs"

    def validate(self) -> bool:
        """Returns True if the weights are sane and all dimensions are known."""
        return (
            len(self.performance_weights) == 3
            and all(w >= 0 for w in self.performance_weights)
            and self.profit_factor_cap > 0
            and 1 <= self.confidence_threshold <= 10
            and all(d in GROUP_DIMENSIONS for d in self.default_group_by)
        )


DEFAULT_CONFIG = AnalyticsConfig()


def load_config(config_path: str = "config/analytics.json") -> AnalyticsConfig:
    """
    Loads engine configuration from a JSON file.
    Returns the defaults if the file does not exist, is invalid or fails validation.
    """
    if not os.path.exists(config_path):
        return DEFAULT_CONFIG

    try:
        with open(config_path, "r") as f:
            data = json.load(f)

        config = AnalyticsConfig(
            confidence_threshold=int(data.get("confidence_threshold", DEFAULT_CONFIG.confidence_threshold)),
            performance_weights=tuple(data.get("performance_weights", DEFAULT_CONFIG.performance_weights)),
            profit_factor_cap=float(data.get("profit_factor_cap", DEFAULT_CONFIG.profit_factor_cap)),
            unknown_label=str(data.get("unknown_label", DEFAULT_CONFIG.unknown_label)),
            default_group_by=tuple(data.get("default_group_by", DEFAULT_CONFIG.default_group_by)),
            log_dir=str(data.get("log_dir", DEFAULT_CONFIG.log_dir)),
        )
    except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Config Error in %s: %s. Using defaults.", config_path, e)
        return DEFAULT_CONFIG

    if not config.validate():
        logger.warning("Config %s failed validation. Using defaults.", config_path)
        return DEFAULT_CONFIG
    return config
