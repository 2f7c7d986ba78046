"""Strategies: base interface and the base-bar reversal engine."""

from basebar_bot.strategies.base import BaseStrategy
from basebar_bot.strategies.base_bar_reversal import BaseBarReversalStrategy
from basebar_bot.strategies.classifier import classify

__all__ = ["BaseStrategy", "BaseBarReversalStrategy", "classify"]
