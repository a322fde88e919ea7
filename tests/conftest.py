"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest

from rebalancer.config.fund_file import create_sample_fund
from rebalancer.core.models import DriftResult, Fund, Holding, SizedTrade


@pytest.fixture
def sample_fund() -> Fund:
    """Create the balanced sample fund (buys need 0.75 scaling)."""
    return create_sample_fund()


@pytest.fixture
def sample_holding() -> Holding:
    """Create an overweight holding at 1M NAV."""
    return Holding(
        security_id="BOND-ETF",
        units=Decimal("0"),
        market_value=Decimal("400000"),
        target_weight=Decimal("0.30"),
    )


@pytest.fixture
def make_trade() -> Callable[[str, str], SizedTrade]:
    """Build a SizedTrade directly from a required trade value."""

    def _make(security_id: str, required: str) -> SizedTrade:
        holding = Holding(security_id, Decimal("0"), Decimal("0"), Decimal("0"))
        drift = DriftResult(holding=holding, current_weight=Decimal("0"), drift=Decimal("0"))
        return SizedTrade(drift_result=drift, required_trade_value=Decimal(required))

    return _make
