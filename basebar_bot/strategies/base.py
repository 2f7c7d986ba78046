"""Abstract strategy: consumes market events one at a time."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from basebar_bot.core.types import MarketEvent, Signal


class BaseStrategy(ABC):
    """Event-driven strategy. on_event is the only mutation entry point."""

    @abstractmethod
    def on_event(self, event: MarketEvent) -> Optional[Signal]:
        """
        Process one Bar or Trade in arrival order.
        Returns a Signal or None; never more than one per event.
        """
        pass
