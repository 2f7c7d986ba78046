"""Scenario fixtures under test_scenarios/ and the scenario loader."""

from pathlib import Path

import pytest
from basebar_bot.backtesting.scenarios import (
    compare_signals,
    load_scenario_file,
    load_scenarios,
    run_scenario,
)
from basebar_bot.core.types import Signal, SignalType

SCENARIO_DIR = Path(__file__).resolve().parents[1] / "test_scenarios"


def test_fixture_scenarios():
    scenarios = load_scenarios(SCENARIO_DIR)
    assert len(scenarios) >= 8
    for scenario in scenarios:
        problems = compare_signals(run_scenario(scenario), scenario.expected_signals)
        assert problems == [], f"{scenario.desc}: {problems}"


def test_load_scenario_file_shapes(tmp_path):
    path = tmp_path / "one.yml"
    path.write_text(
        "scenarios:\n"
        "  - desc: tiny\n"
        "    config:\n"
        "      symbol: SPY\n"
        "      trading_mode: {type: Daily, value: 1}\n"
        "      dollar_amount: 100\n"
        "    bars:\n"
        "      - {o: 10, h: 11, l: 9, c: 10, vol: 5, is_base_bar: false}\n"
        "    expected_signals:\n"
        "      - {signal_type: Sell, trigger_price: 10, size: 10, reason: first trade}\n"
    )
    (scenario,) = load_scenario_file(path)
    assert scenario.desc == "tiny"
    assert scenario.bars[0].close == 10.0
    assert scenario.expected_signals[0].signal_type == SignalType.SELL
    assert scenario.expected_signals[0].trigger_price == 10.0


def test_load_scenario_file_rejects_missing_list(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("desc: nothing here\n")
    with pytest.raises(ValueError):
        load_scenario_file(path)


def test_compare_signals_reports_differences():
    a = [Signal(SignalType.BUY, 106.0, 9, "first trade")]
    b = [Signal(SignalType.SELL, 106.0, 8, "first trade")]
    problems = compare_signals(a, b)
    assert any("signal_type" in p for p in problems)
    assert any("size" in p for p in problems)
    assert compare_signals(a, a) == []
    assert compare_signals(a, []) == ["signal count 1 != expected 0"]
