"""Up/down bar classification against the previous bar."""

from __future__ import annotations
from typing import Optional

from basebar_bot.core.types import Bar, BarType


def classify(bar: Bar, prev_bar: Optional[Bar], prev_classification: Optional[BarType]) -> Optional[BarType]:
    """
    UP if close rose, DOWN if it fell. An unchanged close inherits the previous
    classification. None when there is no previous bar, or a tie with nothing to inherit.
    """
    if prev_bar is None:
        return None
    if bar.close > prev_bar.close:
        return BarType.UP
    if bar.close < prev_bar.close:
        return BarType.DOWN
    return prev_classification
