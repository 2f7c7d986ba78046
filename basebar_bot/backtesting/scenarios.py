"""
YAML scenario fixtures: a config, a bar sequence and the signals it must produce.

File layout:

    scenarios:
      - desc: "..."
        config: {symbol, trading_mode, dollar_amount, base_bar_opp, thresholds}
        bars:
          - {o: 100, h: 101, l: 99, c: 100, vol: 1000, is_base_bar: false}
        expected_signals:
          - {signal_type: Buy, signal_trigger_price: 100.0, size: 10, reason: first trade}
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Sequence

import yaml

from basebar_bot.backtesting.engine import ReplayEngine
from basebar_bot.core.config import StrategyConfig
from basebar_bot.core.types import Bar, Signal, SignalType

logger = logging.getLogger("basebar_bot.backtest.scenarios")


@dataclass
class Scenario:
    desc: str
    config: StrategyConfig
    bars: List[Bar] = field(default_factory=list)
    expected_signals: List[Signal] = field(default_factory=list)


def _bar_from_dict(data: dict[str, Any]) -> Bar:
    return Bar(
        open=float(data["o"]),
        high=float(data["h"]),
        low=float(data["l"]),
        close=float(data["c"]),
        volume=float(data.get("vol", 0)),
        is_base_bar=bool(data.get("is_base_bar", False)),
    )


def _signal_from_dict(data: dict[str, Any]) -> Signal:
    price = data.get("signal_trigger_price", data.get("trigger_price"))
    if price is None:
        raise ValueError(f"Expected signal has no trigger price: {data}")
    return Signal(
        signal_type=SignalType(data["signal_type"]),
        trigger_price=float(price),
        size=int(data["size"]),
        reason=str(data.get("reason", "")),
    )


def load_scenario_file(path: Path) -> List[Scenario]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    items = data.get("scenarios")
    if not isinstance(items, list):
        raise ValueError(f"{path}: expected a top-level 'scenarios' list")
    return [
        Scenario(
            desc=str(item.get("desc", "")),
            config=StrategyConfig.from_dict(item["config"]),
            bars=[_bar_from_dict(b) for b in item.get("bars", [])],
            expected_signals=[_signal_from_dict(s) for s in item.get("expected_signals", [])],
        )
        for item in items
    ]


def load_scenarios(directory: Path) -> List[Scenario]:
    """All scenarios from *.yaml / *.yml files in directory, files in name order."""
    paths = sorted(p for p in Path(directory).iterdir() if p.suffix in (".yaml", ".yml"))
    scenarios: List[Scenario] = []
    for path in paths:
        loaded = load_scenario_file(path)
        logger.debug("Loaded %d scenarios from %s", len(loaded), path.name)
        scenarios.extend(loaded)
    return scenarios


def run_scenario(scenario: Scenario) -> List[Signal]:
    """Replay the scenario bars with a trade at each bar's open."""
    return ReplayEngine(scenario.config, trade_at_open=True).run_bars(scenario.bars).signals


def compare_signals(actual: Sequence[Signal], expected: Sequence[Signal]) -> List[str]:
    """Mismatch descriptions; empty when the sequences agree."""
    problems = []
    if len(actual) != len(expected):
        problems.append(f"signal count {len(actual)} != expected {len(expected)}")
    for i, (a, e) in enumerate(zip(actual, expected)):
        if a.signal_type != e.signal_type:
            problems.append(f"[{i}] signal_type {a.signal_type.value} != {e.signal_type.value}")
        if not math.isclose(a.trigger_price, e.trigger_price, rel_tol=1e-9, abs_tol=1e-9):
            problems.append(f"[{i}] trigger_price {a.trigger_price} != {e.trigger_price}")
        if a.size != e.size:
            problems.append(f"[{i}] size {a.size} != {e.size}")
        if a.reason != e.reason:
            problems.append(f"[{i}] reason {a.reason!r} != {e.reason!r}")
    return problems
