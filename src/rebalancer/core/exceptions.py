"""Rebalancing errors."""

from __future__ import annotations

from decimal import Decimal


class RebalanceError(Exception):
    """Base class for rebalancing failures."""


class InvalidNavError(RebalanceError, ValueError):
    """Fund NAV is zero or negative, so weights are undefined."""

    def __init__(self, total_nav: Decimal, fund_id: str | None = None) -> None:
        self.total_nav = total_nav
        self.fund_id = fund_id
        prefix = f"Fund {fund_id}: " if fund_id else ""
        super().__init__(f"{prefix}total NAV must be positive, got {total_nav}")


class NegativeAvailableCashError(RebalanceError):
    """Cash available for buys is negative after the reserve is held back."""

    def __init__(self, available_cash: Decimal) -> None:
        self.available_cash = available_cash
        super().__init__(
            f"Available cash after reserve and sell proceeds is negative: "
            f"{available_cash}"
        )
