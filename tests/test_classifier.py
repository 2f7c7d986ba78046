"""Unit tests for strategies.classifier."""

from basebar_bot.core.types import Bar, BarType
from basebar_bot.strategies.classifier import classify


def _bar(close: float) -> Bar:
    return Bar(open=close, high=close + 1, low=close - 1, close=close, volume=100)


def test_no_previous_bar():
    assert classify(_bar(100), None, None) is None
    assert classify(_bar(100), None, BarType.UP) is None


def test_up_and_down():
    prev = _bar(100)
    assert classify(_bar(101), prev, None) == BarType.UP
    assert classify(_bar(99), prev, BarType.UP) == BarType.DOWN


def test_equal_close_inherits():
    prev = _bar(100)
    assert classify(_bar(100), prev, BarType.DOWN) == BarType.DOWN
    assert classify(_bar(100), prev, BarType.UP) == BarType.UP
    assert classify(_bar(100), prev, None) is None


def test_idempotent():
    prev = _bar(100)
    bar = _bar(100)
    results = {classify(bar, prev, BarType.UP) for _ in range(5)}
    assert results == {BarType.UP}
