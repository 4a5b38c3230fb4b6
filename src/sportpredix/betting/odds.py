"""Accumulator odds arithmetic."""

from __future__ import annotations

import math
from collections.abc import Iterable


def combine_odds(odds: Iterable[float]) -> float:
    """Accumulator odd: the product of every leg. ``1.0`` for no legs."""

    decimal = 1.0
    for odd in odds:
        decimal *= odd
    return decimal


def potential_win(stake: float, total_odd: float) -> float:
    return stake * total_odd


def implied_probability(decimal_odds: float) -> float:
    """Break-even win probability encoded by a decimal odd."""

    return 1.0 / decimal_odds


def expected_value(payout: float, decimal_odds: float, stake: float) -> float:
    """Average profit per repetition when the odd's implied probability is the true one."""

    return payout * implied_probability(decimal_odds) - stake


def is_valid_amount(amount: float) -> bool:
    return math.isfinite(amount) and amount > 0


def is_valid_odd(odd: float) -> bool:
    return math.isfinite(odd) and odd > 1.0
