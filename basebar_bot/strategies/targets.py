"""
Reversal price targets from percentage thresholds.

All functions are pure. Direction follows the open position: a long position
reverses on a move down (targets below the reference, min of targets, breached
when target >= bar low); a short reverses on a move up (targets above, max,
breached when target <= bar high). An unset threshold, missing reference bar or
flat position yields None rather than an error.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

from basebar_bot.core.config import Thresholds
from basebar_bot.core.types import Bar

RULE_INITIAL_BAR = "initial bar"
RULE_STAGE_A = "stage A"
RULE_STAGE_B = "stage B"


@dataclass(frozen=True)
class ReversalTarget:
    """A breached target: combined price and the rule that produced it."""
    price: float
    rule: str


def pct_below(reference: float, pct: float) -> float:
    return reference - reference * pct / 100.0


def pct_above(reference: float, pct: float) -> float:
    return reference + reference * pct / 100.0


def offset_target(reference: float, pct: Optional[float], is_long: bool) -> Optional[float]:
    """Target pct away from reference, against the position. None if pct is unset."""
    if pct is None:
        return None
    return pct_below(reference, pct) if is_long else pct_above(reference, pct)


def bar_extreme(bar: Bar, is_long: bool) -> float:
    """Low for a long position, high for a short."""
    return bar.low if is_long else bar.high


def combine_targets(targets: Sequence[Optional[float]], is_long: bool) -> Optional[float]:
    """Furthest target from price: min for long, max for short. None if any is missing."""
    if not targets or any(t is None for t in targets):
        return None
    return min(targets) if is_long else max(targets)


def is_breached(target: float, bar: Bar, is_long: bool) -> bool:
    if is_long:
        return target >= bar.low
    return target <= bar.high


def check_targets(targets: Sequence[Optional[float]], bar: Bar, is_long: bool) -> Optional[float]:
    """Combined target if the bar reached it, else None."""
    combined = combine_targets(targets, is_long)
    if combined is None or not is_breached(combined, bar, is_long):
        return None
    return combined


def base_bar_targets(base_bar: Bar, thresholds: Thresholds, is_long: bool) -> List[Optional[float]]:
    """base_bar_pct off the base close, base_bar_end_pct off the base low (long) / high (short)."""
    return [
        offset_target(base_bar.close, thresholds.base_bar_pct, is_long),
        offset_target(bar_extreme(base_bar, is_long), thresholds.base_bar_end_pct, is_long),
    ]


def stage_a_targets(
    base_bar: Bar,
    prev_bar: Optional[Bar],
    thresholds: Thresholds,
    is_long: bool,
) -> List[Optional[float]]:
    """Base bar targets plus non_base_bar_end (prev low/high) and non_base_bar_min (prev close)."""
    if prev_bar is None:
        return []
    return base_bar_targets(base_bar, thresholds, is_long) + [
        offset_target(bar_extreme(prev_bar, is_long), thresholds.non_base_bar_end_pct, is_long),
        offset_target(prev_bar.close, thresholds.non_base_bar_min_pct, is_long),
    ]


def stage_b_targets(extremum_bar: Optional[Bar], thresholds: Thresholds, is_long: bool) -> List[Optional[float]]:
    """non_base_bar_end off the extremum bar's low/high, non_base_bar_max off its close."""
    if extremum_bar is None:
        return []
    return [
        offset_target(bar_extreme(extremum_bar, is_long), thresholds.non_base_bar_end_pct, is_long),
        offset_target(extremum_bar.close, thresholds.non_base_bar_max_pct, is_long),
    ]


def reverse_on_initial_bar(
    base_bar: Bar,
    thresholds: Thresholds,
    position: int,
    bar: Bar,
) -> Optional[ReversalTarget]:
    """Check the first bar after the base bar against the base bar targets."""
    if position == 0:
        return None
    is_long = position > 0
    price = check_targets(base_bar_targets(base_bar, thresholds, is_long), bar, is_long)
    if price is None:
        return None
    return ReversalTarget(price=price, rule=RULE_INITIAL_BAR)


def reverse_after_initial_bar(
    base_bar: Bar,
    prev_bar: Optional[Bar],
    highest_bar: Optional[Bar],
    lowest_bar: Optional[Bar],
    thresholds: Thresholds,
    position: int,
    bar: Bar,
) -> Optional[ReversalTarget]:
    """
    Two-stage check. Stage B runs only when stage A did not fire.
    The extremum bar is highest_bar for a long position, lowest_bar for a short.
    """
    if position == 0:
        return None
    is_long = position > 0
    price = check_targets(stage_a_targets(base_bar, prev_bar, thresholds, is_long), bar, is_long)
    if price is not None:
        return ReversalTarget(price=price, rule=RULE_STAGE_A)
    extremum_bar = highest_bar if is_long else lowest_bar
    price = check_targets(stage_b_targets(extremum_bar, thresholds, is_long), bar, is_long)
    if price is not None:
        return ReversalTarget(price=price, rule=RULE_STAGE_B)
    return None
