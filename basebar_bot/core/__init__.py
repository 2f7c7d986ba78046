"""Core: config, types, logging."""

from basebar_bot.core.config import load_config, Config, StrategyConfig, Thresholds, Intraday, Daily
from basebar_bot.core.types import Bar, Trade, MarketEvent, Signal, SignalType, BarType
from basebar_bot.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "StrategyConfig",
    "Thresholds",
    "Intraday",
    "Daily",
    "Bar",
    "Trade",
    "MarketEvent",
    "Signal",
    "SignalType",
    "BarType",
    "setup_logging",
]
