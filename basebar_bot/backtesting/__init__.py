"""Backtesting: bar replay and YAML scenario fixtures."""

from basebar_bot.backtesting.engine import ReplayEngine, ReplayResult

__all__ = ["ReplayEngine", "ReplayResult"]
