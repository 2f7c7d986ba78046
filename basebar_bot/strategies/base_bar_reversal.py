"""
Base-bar reversal strategy.

Waits for the feed to flag a base bar, enters on the first trade after it in
the base bar's direction (or against it with base_bar_opp), then reverses at
most once when price runs through the configured percentage targets.

States only move forward: AwaitingBase -> AwaitingInitialTrade -> Active.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from basebar_bot.core.config import StrategyConfig
from basebar_bot.core.types import Bar, BarType, MarketEvent, Signal, SignalType, Trade
from basebar_bot.strategies.base import BaseStrategy
from basebar_bot.strategies.classifier import classify
from basebar_bot.strategies.targets import (
    ReversalTarget,
    reverse_after_initial_bar,
    reverse_on_initial_bar,
)

logger = logging.getLogger("basebar_bot.strategy")

Observer = Callable[[str, dict], None]

REASON_FIRST_TRADE = "first trade"
REASON_REVERSE = "reverse trade"


@dataclass(frozen=True)
class BaseBarState:
    bar: Bar
    bar_type: BarType


@dataclass(frozen=True)
class AwaitingBase:
    pass


@dataclass(frozen=True)
class AwaitingInitialTrade:
    base: BaseBarState


@dataclass(frozen=True)
class Active:
    base: BaseBarState


StrategyState = Union[AwaitingBase, AwaitingInitialTrade, Active]


def log_observer(event: str, data: dict[str, Any]) -> None:
    """Default observer: one DEBUG line per engine event."""
    logger.debug("%s %s", event, data)


class BaseBarReversalStrategy(BaseStrategy):
    """
    One instance per symbol per session. Feed events in arrival order via on_event.

    observer, if given, is called as observer(event_name, data) after each decision;
    it only sees results and cannot change them. Observer exceptions are logged and dropped.
    """

    def __init__(self, config: StrategyConfig, observer: Optional[Observer] = None):
        self.config = config
        self.observer = observer or log_observer
        self._state: StrategyState = AwaitingBase()
        self._prev_bar: Optional[Bar] = None
        self._prev_bar_type: Optional[BarType] = None
        self._current_position: int = 0
        self._signal_count: int = 0
        self._post_initial_checked = False
        self._highest_close_bar: Optional[Bar] = None
        self._lowest_close_bar: Optional[Bar] = None

    @property
    def state(self) -> StrategyState:
        return self._state

    @property
    def current_position(self) -> int:
        return self._current_position

    @property
    def signal_count(self) -> int:
        return self._signal_count

    @property
    def prev_bar(self) -> Optional[Bar]:
        return self._prev_bar

    @property
    def prev_bar_type(self) -> Optional[BarType]:
        return self._prev_bar_type

    @property
    def highest_close_bar(self) -> Optional[Bar]:
        return self._highest_close_bar

    @property
    def lowest_close_bar(self) -> Optional[Bar]:
        return self._lowest_close_bar

    def on_event(self, event: MarketEvent) -> Optional[Signal]:
        if isinstance(event, Bar):
            return self._handle_bar(event)
        if isinstance(event, Trade):
            return self._handle_trade(event)
        raise TypeError(f"Unsupported market event: {type(event).__name__}")

    # --- event handlers ---

    def _handle_trade(self, trade: Trade) -> Optional[Signal]:
        state = self._state
        if not isinstance(state, AwaitingInitialTrade) or self._signal_count > 0:
            return None
        signal = self._first_trade(state.base.bar_type, trade.price)
        self._record(signal)
        self._notify("first_trade", {
            "symbol": self.config.symbol,
            "base_bar_type": state.base.bar_type.value,
            "price": trade.price,
            "size": signal.size,
        })
        return signal

    def _handle_bar(self, bar: Bar) -> Optional[Signal]:
        bar_type = classify(bar, self._prev_bar, self._prev_bar_type)
        signal: Optional[Signal] = None
        state = self._state

        if isinstance(state, AwaitingBase):
            if bar.is_base_bar and bar_type is not None:
                self._state = AwaitingInitialTrade(BaseBarState(bar=bar, bar_type=bar_type))
                self._notify("base_bar", {
                    "symbol": self.config.symbol,
                    "bar_type": bar_type.value,
                    "close": bar.close,
                })
        elif isinstance(state, AwaitingInitialTrade):
            self._state = Active(state.base)
            self._highest_close_bar = bar
            self._lowest_close_bar = bar
            hit = reverse_on_initial_bar(state.base.bar, self.config.thresholds, self._current_position, bar)
            self._observe_check("initial_bar", hit)
            if hit is not None:
                signal = self._reverse_trade(hit)
        elif isinstance(state, Active):
            if self._signal_count == 1 and not self._post_initial_checked:
                self._post_initial_checked = True
                hit = reverse_after_initial_bar(
                    state.base.bar,
                    self._prev_bar,
                    self._highest_close_bar,
                    self._lowest_close_bar,
                    self.config.thresholds,
                    self._current_position,
                    bar,
                )
                self._observe_check("after_initial_bar", hit)
                if hit is not None:
                    signal = self._reverse_trade(hit)
            self._update_extrema(bar)

        self._prev_bar = bar
        self._prev_bar_type = bar_type
        return signal

    # --- signal construction and bookkeeping ---

    def _first_trade(self, base_bar_type: BarType, price: float) -> Signal:
        signal_type = SignalType.BUY if base_bar_type == BarType.UP else SignalType.SELL
        if self.config.base_bar_opp:
            signal_type = signal_type.reverse()
        return Signal(
            signal_type=signal_type,
            trigger_price=price,
            size=math.floor(self.config.dollar_amount / price),
            reason=REASON_FIRST_TRADE,
        )

    def _reverse_trade(self, hit: ReversalTarget) -> Signal:
        """Flatten the open position and open the same dollar amount the other way."""
        size = math.floor(self.config.dollar_amount / hit.price) + abs(self._current_position)
        signal_type = SignalType.SELL if self._current_position > 0 else SignalType.BUY
        signal = Signal(
            signal_type=signal_type,
            trigger_price=hit.price,
            size=size,
            reason=f"{REASON_REVERSE}: {hit.rule}",
        )
        self._record(signal)
        self._notify("signal", {
            "symbol": self.config.symbol,
            "signal_type": signal.signal_type.value,
            "price": signal.trigger_price,
            "size": signal.size,
            "reason": signal.reason,
            "position": self._current_position,
        })
        return signal

    def _record(self, signal: Signal) -> None:
        self._current_position += signal.signed_size
        self._signal_count += 1

    def _update_extrema(self, bar: Bar) -> None:
        if self._highest_close_bar is None or bar.high > self._highest_close_bar.high:
            self._highest_close_bar = bar
        if self._lowest_close_bar is None or bar.low < self._lowest_close_bar.low:
            self._lowest_close_bar = bar

    def _notify(self, event: str, data: dict[str, Any]) -> None:
        """Call the observer. Its failures are logged and never reach on_event's caller."""
        try:
            self.observer(event, data)
        except Exception as e:
            logger.exception("Observer error on %s: %s", event, e)

    def _observe_check(self, check: str, hit: Optional[ReversalTarget]) -> None:
        self._notify("reversal_check", {
            "symbol": self.config.symbol,
            "check": check,
            "position": self._current_position,
            "fired": hit is not None,
            "price": hit.price if hit is not None else None,
            "rule": hit.rule if hit is not None else None,
        })
