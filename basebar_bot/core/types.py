"""
Core data types for market events and signals.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class SignalType(str, Enum):
    BUY = "Buy"
    SELL = "Sell"

    def reverse(self) -> "SignalType":
        return SignalType.SELL if self is SignalType.BUY else SignalType.BUY


class BarType(str, Enum):
    UP = "UpBar"
    DOWN = "DownBar"


@dataclass(frozen=True)
class Bar:
    """OHLCV candle. is_base_bar is set by the data feed."""
    open: float
    high: float
    low: float
    close: float
    volume: float
    is_base_bar: bool = False
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class Trade:
    """Single print / tick."""
    price: float
    size: float
    timestamp: Optional[datetime] = None


MarketEvent = Union[Bar, Trade]


@dataclass(frozen=True)
class Signal:
    """Advisory trading intent. Not an order and not a fill."""
    signal_type: SignalType
    trigger_price: float
    size: int
    reason: str

    @property
    def signed_size(self) -> int:
        return self.size if self.signal_type == SignalType.BUY else -self.size
