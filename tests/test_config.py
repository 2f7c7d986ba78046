"""Unit tests for core.config."""

import pytest
import yaml
from basebar_bot.core.config import (
    Daily,
    Intraday,
    StrategyConfig,
    Thresholds,
    load_config,
    trading_mode_from_dict,
)

ENV_KEYS = [
    "SYMBOL", "DOLLAR_AMOUNT", "BASE_BAR_OPP", "LOG_LEVEL",
    "BASE_BAR_PCT", "BASE_BAR_END_PCT", "NON_BASE_BAR_END_PCT",
    "NON_BASE_BAR_MIN_PCT", "NON_BASE_BAR_MAX_PCT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_round_trip_intraday():
    data = {
        "symbol": "AAPL",
        "trading_mode": {"type": "Intraday", "value": {"bar_minutes": 15, "base_bar_start_time": "09:45"}},
        "dollar_amount": 2500,
        "base_bar_opp": True,
        "thresholds": {
            "base_bar_pct": 0.5,
            "base_bar_end_pct": None,
            "non_base_bar_end_pct": 0.25,
            "non_base_bar_min_pct": None,
            "non_base_bar_max_pct": 1.5,
        },
    }
    cfg = StrategyConfig.from_dict(data)
    assert cfg.trading_mode == Intraday(bar_minutes=15, base_bar_start_time="09:45")
    assert cfg.thresholds.base_bar_end_pct is None
    assert cfg.to_dict() == data
    assert StrategyConfig.from_dict(cfg.to_dict()) == cfg


def test_round_trip_daily_through_yaml():
    cfg = StrategyConfig(symbol="MSFT", trading_mode=Daily(days=3), dollar_amount=500)
    text = yaml.safe_dump(cfg.to_dict())
    assert StrategyConfig.from_dict(yaml.safe_load(text)) == cfg
    assert cfg.to_dict()["trading_mode"] == {"type": "Daily", "value": 3}
    assert cfg.to_dict()["thresholds"] == {
        "base_bar_pct": None,
        "base_bar_end_pct": None,
        "non_base_bar_end_pct": None,
        "non_base_bar_min_pct": None,
        "non_base_bar_max_pct": None,
    }


def test_trading_mode_timeframe_string():
    mode = trading_mode_from_dict({"type": "Intraday", "value": {"bar_minutes": "1h", "base_bar_start_time": "10:00"}})
    assert mode.bar_minutes == 60


def test_trading_mode_unknown():
    with pytest.raises(ValueError):
        trading_mode_from_dict({"type": "Weekly", "value": 1})


def test_trading_mode_missing_start_time():
    with pytest.raises(ValueError, match="base_bar_start_time"):
        trading_mode_from_dict({"type": "Intraday", "value": {"bar_minutes": 5}})


def test_trading_mode_unquoted_start_time():
    # YAML 1.1 reads an unquoted 10:00 as the base-60 int 600
    data = yaml.safe_load("type: Intraday\nvalue:\n  bar_minutes: 5\n  base_bar_start_time: 10:00\n")
    with pytest.raises(ValueError, match="base_bar_start_time"):
        trading_mode_from_dict(data)
    quoted = yaml.safe_load("type: Intraday\nvalue:\n  bar_minutes: 5\n  base_bar_start_time: \"10:00\"\n")
    assert trading_mode_from_dict(quoted) == Intraday(bar_minutes=5, base_bar_start_time="10:00")


def test_strategy_config_with_timeframe_string():
    cfg = StrategyConfig.from_dict({
        "symbol": "SPY",
        "trading_mode": {"type": "Intraday", "value": {"bar_minutes": "15m", "base_bar_start_time": "09:30"}},
        "dollar_amount": 1000,
    })
    assert cfg.trading_mode.bar_minutes == 15
    assert cfg.to_dict()["trading_mode"]["value"]["bar_minutes"] == 15


def test_missing_fields():
    with pytest.raises(ValueError, match="dollar_amount"):
        StrategyConfig.from_dict({"symbol": "SPY", "trading_mode": {"type": "Daily", "value": 1}})


def test_thresholds_partial():
    th = Thresholds.from_dict({"base_bar_pct": 1})
    assert th.base_bar_pct == 1.0
    assert th.non_base_bar_max_pct is None


def test_load_config_file_and_env(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "strategy": {
            "symbol": "qqq",
            "trading_mode": {"type": "Daily", "value": 1},
            "dollar_amount": 5000,
            "thresholds": {"base_bar_pct": 0.5},
        },
        "logging": {"level": "DEBUG"},
        "replay": {"scenarios_dir": "fixtures", "trade_at_open": False},
    }))
    monkeypatch.setenv("BASE_BAR_END_PCT", "0.75")
    cfg = load_config(path, tmp_path)
    assert cfg.strategy.symbol == "QQQ"
    assert cfg.strategy.dollar_amount == 5000
    assert cfg.strategy.thresholds.base_bar_pct == 0.5
    assert cfg.strategy.thresholds.base_bar_end_pct == 0.75
    assert cfg.strategy.thresholds.non_base_bar_end_pct is None
    assert cfg.log_level == "DEBUG"
    assert cfg.scenarios_dir == tmp_path / "fixtures"
    assert cfg.trade_at_open is False


def test_load_config_defaults(tmp_path):
    cfg = load_config(tmp_path / "missing.yaml", tmp_path)
    assert cfg.strategy.symbol == "SPY"
    assert isinstance(cfg.strategy.trading_mode, Intraday)
    assert cfg.strategy.thresholds == Thresholds()
    assert cfg.trade_at_open is True
