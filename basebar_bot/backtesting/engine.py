"""
Replay engine: feeds a bar table through the strategy in order and collects signals.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from basebar_bot.core.config import StrategyConfig
from basebar_bot.core.types import Bar, Signal, Trade
from basebar_bot.strategies.base_bar_reversal import BaseBarReversalStrategy, Observer

logger = logging.getLogger("basebar_bot.backtest")

BAR_COLUMNS = ["open", "high", "low", "close", "volume"]


@dataclass
class ReplayResult:
    """Replay output: emitted signals in order and where the position ended."""
    signals: List[Signal] = field(default_factory=list)
    final_position: int = 0
    bars_processed: int = 0


def load_bars_csv(path: Path) -> pd.DataFrame:
    """Read a bar CSV (open, high, low, close, volume, optional is_base_bar and time)."""
    df = pd.read_csv(path)
    df.columns = [c.strip().lower() for c in df.columns]
    if "time" in df.columns:
        df["time"] = pd.to_datetime(df["time"])
    return df


def bars_from_frame(df: pd.DataFrame) -> List[Bar]:
    """Convert OHLCV rows to Bars. Missing is_base_bar column means no base bar."""
    missing = [c for c in BAR_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Bar frame missing columns: {', '.join(missing)}")
    has_flag = "is_base_bar" in df.columns
    has_time = "time" in df.columns
    bars = []
    for row in df.itertuples(index=False):
        bars.append(Bar(
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
            is_base_bar=bool(row.is_base_bar) if has_flag else False,
            timestamp=pd.Timestamp(row.time).to_pydatetime() if has_time else None,
        ))
    return bars


def signals_to_frame(signals: Iterable[Signal]) -> pd.DataFrame:
    """Tabulate signals for printing or CSV export."""
    rows = [
        {
            "signal_type": s.signal_type.value,
            "trigger_price": s.trigger_price,
            "size": s.size,
            "reason": s.reason,
        }
        for s in signals
    ]
    return pd.DataFrame(rows, columns=["signal_type", "trigger_price", "size", "reason"])


class ReplayEngine:
    """
    Runs a fresh strategy over historical bars.
    With trade_at_open, each bar is preceded by a Trade at that bar's open,
    standing in for the first print of the interval.
    """

    def __init__(
        self,
        config: StrategyConfig,
        trade_at_open: bool = True,
        observer: Optional[Observer] = None,
    ):
        self.config = config
        self.trade_at_open = trade_at_open
        self.observer = observer

    def run_bars(self, bars: Iterable[Bar]) -> ReplayResult:
        strategy = BaseBarReversalStrategy(self.config, observer=self.observer)
        result = ReplayResult()
        for bar in bars:
            if self.trade_at_open:
                signal = strategy.on_event(Trade(price=bar.open, size=1, timestamp=bar.timestamp))
                if signal is not None:
                    result.signals.append(signal)
            signal = strategy.on_event(bar)
            if signal is not None:
                result.signals.append(signal)
            result.bars_processed += 1
        result.final_position = strategy.current_position
        logger.info(
            "Replay %s: %d bars, %d signals, final position %d",
            self.config.symbol, result.bars_processed, len(result.signals), result.final_position,
        )
        return result

    def run(self, df: pd.DataFrame) -> ReplayResult:
        """Replay an OHLCV DataFrame (see bars_from_frame for columns)."""
        return self.run_bars(bars_from_frame(df))
