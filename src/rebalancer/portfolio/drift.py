"""Drift of each holding's current weight from its target."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from rebalancer.core.exceptions import InvalidNavError
from rebalancer.core.models import DriftResult, Holding


def calculate_drift(total_nav: Decimal, holding: Holding) -> DriftResult:
    """Calculate a holding's current weight and drift from target.

    Args:
        total_nav: Fund NAV, must be positive
        holding: Holding to measure

    Returns:
        DriftResult where drift > 0 means overweight

    Raises:
        InvalidNavError: If total_nav is zero or negative
    """
    if total_nav <= 0:
        raise InvalidNavError(total_nav)

    current_weight = holding.market_value / total_nav
    return DriftResult(
        holding=holding,
        current_weight=current_weight,
        drift=current_weight - holding.target_weight,
    )


def calculate_drifts(
    total_nav: Decimal, holdings: Iterable[Holding]
) -> list[DriftResult]:
    """Calculate drift for every holding, in input order."""
    if total_nav <= 0:
        raise InvalidNavError(total_nav)
    return [calculate_drift(total_nav, h) for h in holdings]
