#!/usr/bin/env python3
"""
Base-bar reversal CLI: scenarios | replay
Usage:
  python main.py scenarios [--dir test_scenarios] [--config config.yaml]
  python main.py replay --bars bars.csv [--config config.yaml]
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from basebar_bot.core.config import load_config
from basebar_bot.core.logger import setup_logging
from basebar_bot.backtesting.engine import ReplayEngine, load_bars_csv, signals_to_frame
from basebar_bot.backtesting.scenarios import compare_signals, load_scenarios, run_scenario


def run_scenarios(config_path: Path | None, scenarios_dir: Path | None) -> int:
    """Run every YAML scenario and report mismatches. Non-zero exit if any fail."""
    config = load_config(config_path, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    logger = logging.getLogger("basebar_bot")
    directory = scenarios_dir or config.scenarios_dir
    if not directory.is_dir():
        logger.error("Scenario directory not found: %s", directory)
        return 1
    scenarios = load_scenarios(directory)
    failed = 0
    for scenario in scenarios:
        problems = compare_signals(run_scenario(scenario), scenario.expected_signals)
        if problems:
            failed += 1
            logger.error("FAIL %s: %s", scenario.desc, "; ".join(problems))
        else:
            logger.info("ok   %s", scenario.desc)
    print(f"\n{len(scenarios) - failed}/{len(scenarios)} scenarios passed")
    return 1 if failed else 0


def run_replay(config_path: Path | None, bars_path: Path) -> int:
    """Replay a bar CSV through the configured strategy and print the signals."""
    config = load_config(config_path, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    logger = logging.getLogger("basebar_bot")
    if not bars_path.exists():
        logger.error("Bar file not found: %s", bars_path)
        return 1
    df = load_bars_csv(bars_path)
    engine = ReplayEngine(config.strategy, trade_at_open=config.trade_at_open)
    try:
        result = engine.run(df)
    except ValueError as e:
        logger.error("Cannot replay %s: %s", bars_path, e)
        return 1
    print(f"\n--- Replay {config.strategy.symbol} ---")
    print(f"Bars processed: {result.bars_processed}")
    print(f"Signals: {len(result.signals)}")
    if result.signals:
        print(signals_to_frame(result.signals).to_string(index=False))
    print(f"Final position: {result.final_position}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Base-bar reversal signal engine")
    sub = parser.add_subparsers(dest="mode", required=True)
    p_scen = sub.add_parser("scenarios", help="Run YAML scenario fixtures")
    p_scen.add_argument("--dir", type=Path, default=None, help="Scenario directory")
    p_scen.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    p_replay = sub.add_parser("replay", help="Replay a bar CSV")
    p_replay.add_argument("--bars", type=Path, required=True, help="CSV with open,high,low,close,volume[,is_base_bar,time]")
    p_replay.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    args = parser.parse_args()
    if args.mode == "scenarios":
        return run_scenarios(args.config, args.dir)
    return run_replay(args.config, args.bars)


if __name__ == "__main__":
    exit(main())
