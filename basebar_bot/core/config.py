"""
Strategy config model plus loading from config.yaml and .env.

The strategy model round-trips through plain dicts so it can be read from
YAML fixtures and written back out unchanged.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from basebar_bot.utils.timeframes import timeframe_minutes

THRESHOLD_FIELDS = (
    "base_bar_pct",
    "base_bar_end_pct",
    "non_base_bar_end_pct",
    "non_base_bar_min_pct",
    "non_base_bar_max_pct",
)


@dataclass(frozen=True)
class Intraday:
    """Intraday session: fixed bar length, base bar starts at a wall-clock time."""
    bar_minutes: int
    base_bar_start_time: str


@dataclass(frozen=True)
class Daily:
    """Daily bars; value is the number of days per bar."""
    days: int


TradingMode = Union[Intraday, Daily]


def trading_mode_from_dict(data: dict[str, Any]) -> TradingMode:
    """Parse {"type": "Intraday"|"Daily", "value": ...}."""
    kind = data.get("type")
    value = data.get("value")
    if kind == "Intraday":
        if not isinstance(value, dict):
            raise ValueError("Intraday trading_mode needs a mapping value")
        minutes = value.get("bar_minutes")
        if isinstance(minutes, str):
            minutes = timeframe_minutes(minutes)
        if minutes is None:
            raise ValueError("Intraday trading_mode missing bar_minutes")
        start = value.get("base_bar_start_time")
        if start is None:
            raise ValueError("Intraday trading_mode missing base_bar_start_time")
        # Unquoted 10:00 in YAML 1.1 loads as the int 600
        if not isinstance(start, str):
            raise ValueError(f"base_bar_start_time must be a quoted string, got {start!r}")
        return Intraday(bar_minutes=int(minutes), base_bar_start_time=start)
    if kind == "Daily":
        if value is None:
            raise ValueError("Daily trading_mode missing value")
        return Daily(days=int(value))
    raise ValueError(f"Unsupported trading_mode type: {kind!r}")


def trading_mode_to_dict(mode: TradingMode) -> dict[str, Any]:
    if isinstance(mode, Intraday):
        return {
            "type": "Intraday",
            "value": {"bar_minutes": mode.bar_minutes, "base_bar_start_time": mode.base_bar_start_time},
        }
    return {"type": "Daily", "value": mode.days}


@dataclass(frozen=True)
class Thresholds:
    """Reversal percentages. Each one is optional; None means the rule is off."""
    base_bar_pct: Optional[float] = None
    base_bar_end_pct: Optional[float] = None
    non_base_bar_end_pct: Optional[float] = None
    non_base_bar_min_pct: Optional[float] = None
    non_base_bar_max_pct: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Thresholds":
        data = data or {}
        return cls(**{
            name: (float(data[name]) if data.get(name) is not None else None)
            for name in THRESHOLD_FIELDS
        })

    def to_dict(self) -> dict[str, Optional[float]]:
        return {name: getattr(self, name) for name in THRESHOLD_FIELDS}


@dataclass(frozen=True)
class StrategyConfig:
    """Per-symbol configuration for the base-bar reversal strategy."""
    symbol: str
    trading_mode: TradingMode
    dollar_amount: float
    base_bar_opp: bool = False
    thresholds: Thresholds = field(default_factory=Thresholds)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StrategyConfig":
        missing = [k for k in ("symbol", "trading_mode", "dollar_amount") if k not in data]
        if missing:
            raise ValueError(f"Strategy config missing fields: {', '.join(missing)}")
        return cls(
            symbol=str(data["symbol"]),
            trading_mode=trading_mode_from_dict(data["trading_mode"]),
            dollar_amount=data["dollar_amount"],
            base_bar_opp=bool(data.get("base_bar_opp", False)),
            thresholds=Thresholds.from_dict(data.get("thresholds")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "trading_mode": trading_mode_to_dict(self.trading_mode),
            "dollar_amount": self.dollar_amount,
            "base_bar_opp": self.base_bar_opp,
            "thresholds": self.thresholds.to_dict(),
        }


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_bool(key: str, default: bool = False) -> bool:
        return os.getenv(key, str(default)).lower() in ("true", "1", "yes")

    def env_float(key: str, default: Optional[float]) -> Optional[float]:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            return float(raw)
        except ValueError:
            return default

    strategy = dict(data.get("strategy") or {})
    strategy.setdefault("symbol", "SPY")
    strategy.setdefault("trading_mode", {"type": "Intraday", "value": {"bar_minutes": 5, "base_bar_start_time": "09:30"}})
    strategy.setdefault("dollar_amount", 1000)
    thresholds = dict(strategy.get("thresholds") or {})

    strategy["symbol"] = env("SYMBOL", str(strategy["symbol"])).upper()
    strategy["dollar_amount"] = env_float("DOLLAR_AMOUNT", strategy["dollar_amount"])
    strategy["base_bar_opp"] = env_bool("BASE_BAR_OPP", strategy.get("base_bar_opp", False))
    for name in THRESHOLD_FIELDS:
        thresholds[name] = env_float(name.upper(), thresholds.get(name))
    strategy["thresholds"] = thresholds

    logging_cfg = data.get("logging", {})
    replay = data.get("replay", {})
    scenarios_dir = Path(replay.get("scenarios_dir", "test_scenarios"))
    if not scenarios_dir.is_absolute():
        scenarios_dir = root / scenarios_dir
    return Config(
        strategy=StrategyConfig.from_dict(strategy),
        log_level=env("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_dir=Path(logging_cfg.get("log_dir", "logs")),
        log_file=logging_cfg.get("log_file", "basebar_bot.log"),
        scenarios_dir=scenarios_dir,
        trade_at_open=bool(replay.get("trade_at_open", True)),
    )


class Config:
    """Unified configuration. Immutable after load."""

    __slots__ = (
        "strategy",
        "log_level", "log_dir", "log_file",
        "scenarios_dir", "trade_at_open",
    )

    def __init__(
        self,
        strategy: StrategyConfig,
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "basebar_bot.log",
        scenarios_dir: Path = None,
        trade_at_open: bool = True,
    ):
        self.strategy = strategy
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file
        self.scenarios_dir = Path(scenarios_dir) if scenarios_dir else Path("test_scenarios")
        self.trade_at_open = trade_at_open
