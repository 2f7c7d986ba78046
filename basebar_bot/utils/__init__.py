"""Utils: timeframes."""

from basebar_bot.utils.timeframes import timeframe_minutes

__all__ = ["timeframe_minutes"]
