"""
py_cli/models.py
Strict Data Structures (DTOs/Enums) for the CLI context.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional

from py_analytics.config import AnalyticsConfig, DEFAULT_CONFIG

class CLIMode(Enum):
    HUMAN = "HUMAN"
    BOT = "BOT"

@dataclass
class CLIContext:
    mode: CLIMode
    journal_path: Optional[str] = None # JSON file or directory of trade documents
    config: AnalyticsConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    user_id: str = "cli_user"

@dataclass
class CommandResponse:
    success: bool
    message: str = ""     # To be displayed to Human (Formatted Text)
    payload: Optional[Dict[str, Any]] = None # To be serialized for Bot (JSON)
    error_code: str = "OK" # Standardized Error Code for Bots
