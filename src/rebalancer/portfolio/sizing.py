"""Convert drift into a signed trade value."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from rebalancer.core.models import DriftResult, SizedTrade


def size_required_trade(total_nav: Decimal, drift: DriftResult) -> SizedTrade:
    """Size the trade that fully erases a holding's drift.

    The caller must pass the same NAV that was used to calculate the drift.

    Args:
        total_nav: Fund NAV
        drift: Drift of the holding

    Returns:
        SizedTrade with a negative value for sells and positive for buys
    """
    return SizedTrade(
        drift_result=drift,
        required_trade_value=-drift.drift * total_nav,
    )


def size_required_trades(
    total_nav: Decimal, drifts: Iterable[DriftResult]
) -> list[SizedTrade]:
    """Size trades for a sequence of drift results, in input order."""
    return [size_required_trade(total_nav, d) for d in drifts]
