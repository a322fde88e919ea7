"""YAML fund snapshot files."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from rebalancer.core.models import Fund, Holding


class FundFileError(Exception):
    """Fund file is missing or invalid."""


class HoldingEntry(BaseModel):
    """A holding as written in a fund file."""

    security_id: str = Field(min_length=1)
    units: Decimal = Decimal("0")
    market_value: Decimal
    target_weight: Decimal = Field(ge=0, le=1)

    def to_holding(self) -> Holding:
        return Holding(
            security_id=self.security_id,
            units=self.units,
            market_value=self.market_value,
            target_weight=self.target_weight,
        )


class FundFile(BaseModel):
    """Root of a fund file.

    NAV is not checked here; the rebalancer rejects a non-positive NAV.
    """

    fund_id: str
    total_nav: Decimal
    cash_balance: Decimal = Field(default=Decimal("0"), ge=0)
    min_cash_reserve: Decimal = Field(default=Decimal("0"), ge=0)
    min_trade_size: Decimal = Field(default=Decimal("0"), ge=0)
    holdings: list[HoldingEntry] = Field(default_factory=list)

    def to_fund(self) -> Fund:
        return Fund(
            fund_id=self.fund_id,
            holdings=tuple(h.to_holding() for h in self.holdings),
            total_nav=self.total_nav,
            cash_balance=self.cash_balance,
            min_cash_reserve=self.min_cash_reserve,
            min_trade_size=self.min_trade_size,
        )


def load_fund(path: Path | str) -> Fund:
    """Load a fund snapshot from a YAML file.

    Numbers may be written as YAML numbers or quoted strings; quoting keeps
    them exact.

    Args:
        path: Path to the fund file

    Returns:
        Fund built from the file

    Raises:
        FundFileError: If the file is missing, not YAML, or fails validation
    """
    path = Path(path)

    if not path.exists():
        raise FundFileError(f"Fund file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise FundFileError(f"Failed to parse fund file {path}: {e}") from e

    if not isinstance(data, dict):
        raise FundFileError(f"Fund file {path} must contain a mapping")

    try:
        fund = FundFile(**data).to_fund()
    except ValidationError as e:
        raise FundFileError(f"Invalid fund file {path}: {e}") from e

    logger.debug(f"Loaded fund {fund.fund_id} with {len(fund.holdings)} holdings")
    return fund


def fund_to_dict(fund: Fund) -> dict:
    """Serialize a fund with decimals rendered as strings."""
    return {
        "fund_id": fund.fund_id,
        "total_nav": str(fund.total_nav),
        "cash_balance": str(fund.cash_balance),
        "min_cash_reserve": str(fund.min_cash_reserve),
        "min_trade_size": str(fund.min_trade_size),
        "holdings": [
            {
                "security_id": h.security_id,
                "units": str(h.units),
                "market_value": str(h.market_value),
                "target_weight": str(h.target_weight),
            }
            for h in fund.holdings
        ],
    }


def save_fund(fund: Fund, path: Path | str) -> None:
    """Save a fund snapshot to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(fund_to_dict(fund), f, sort_keys=False)

    logger.info(f"Saved fund {fund.fund_id} to {path}")


def create_sample_fund() -> Fund:
    """Create a balanced sample fund whose buys need proportional scaling."""
    return Fund(
        fund_id="MF-BALANCED-001",
        total_nav=Decimal("10000000"),
        cash_balance=Decimal("200000"),
        min_cash_reserve=Decimal("100000"),
        min_trade_size=Decimal("5000"),
        holdings=(
            Holding("CDN-BOND-ETF", Decimal("50000"), Decimal("3200000"), Decimal("0.30")),
            Holding("CDN-EQ-ETF", Decimal("30000"), Decimal("2800000"), Decimal("0.30")),
            Holding("US-EQ-ETF", Decimal("20000"), Decimal("2500000"), Decimal("0.25")),
            Holding("INTL-EQ-ETF", Decimal("15000"), Decimal("1300000"), Decimal("0.15")),
        ),
    )
