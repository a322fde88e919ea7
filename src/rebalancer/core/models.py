"""Core domain models for the rebalancing pipeline.

Each pipeline stage has its own immutable type that wraps the value produced
by the stage before it:

    Holding -> DriftResult -> SizedTrade -> ConstrainedOrder
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum


class OrderAction(str, Enum):
    """Final instruction for a constrained order."""

    SELL = "sell"
    BUY = "buy"
    BUY_SCALED = "buy_scaled"
    SKIP = "skip"


@dataclass(frozen=True)
class Holding:
    """A single fund position.

    Attributes:
        security_id: Security identifier
        units: Number of units held
        market_value: Current market value of the position
        target_weight: Target fraction of fund NAV (0.0-1.0)
    """

    security_id: str
    units: Decimal
    market_value: Decimal
    target_weight: Decimal


@dataclass(frozen=True)
class Fund:
    """A fund snapshot handed to the rebalancer.

    Attributes:
        fund_id: Fund identifier
        holdings: Positions held by the fund
        total_nav: Net asset value used as the weight denominator
        cash_balance: Cash currently held
        min_cash_reserve: Cash that must stay in the fund
        min_trade_size: Trades smaller than this are skipped
    """

    fund_id: str
    holdings: tuple[Holding, ...]
    total_nav: Decimal
    cash_balance: Decimal = Decimal("0")
    min_cash_reserve: Decimal = Decimal("0")
    min_trade_size: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        """Store holdings as a tuple."""
        if not isinstance(self.holdings, tuple):
            object.__setattr__(self, "holdings", tuple(self.holdings))

    @property
    def available_cash(self) -> Decimal:
        """Cash above the reserve (negative when under-reserved)."""
        return self.cash_balance - self.min_cash_reserve

    @property
    def security_ids(self) -> list[str]:
        """Get all security identifiers in holding order."""
        return [h.security_id for h in self.holdings]

    def get_holding(self, security_id: str) -> Holding | None:
        """Get a holding by security identifier."""
        for holding in self.holdings:
            if holding.security_id == security_id:
                return holding
        return None

    def with_holdings(self, holdings: Iterable[Holding]) -> Fund:
        """Return a copy of the fund with a different holding sequence."""
        return replace(self, holdings=tuple(holdings))


@dataclass(frozen=True)
class DriftResult:
    """Current weight of a holding against its target."""

    holding: Holding
    current_weight: Decimal
    drift: Decimal

    @property
    def security_id(self) -> str:
        return self.holding.security_id


@dataclass(frozen=True)
class SizedTrade:
    """Signed trade value needed to erase a holding's drift.

    Negative values are sells, positive values are buys.
    """

    drift_result: DriftResult
    required_trade_value: Decimal

    @property
    def security_id(self) -> str:
        return self.drift_result.security_id

    @property
    def is_sell(self) -> bool:
        return self.required_trade_value < 0

    @property
    def is_buy(self) -> bool:
        return self.required_trade_value >= 0


@dataclass(frozen=True)
class ConstrainedOrder:
    """Trade after minimum size and cash constraints are applied."""

    sized_trade: SizedTrade
    adjusted_trade_value: Decimal
    action: OrderAction
    note: str = field(default="", compare=False)

    @property
    def security_id(self) -> str:
        return self.sized_trade.security_id

    @property
    def required_trade_value(self) -> Decimal:
        return self.sized_trade.required_trade_value

    @property
    def is_executable(self) -> bool:
        """Check if the order results in a non-zero trade."""
        if self.action == OrderAction.SKIP:
            return False
        return self.adjusted_trade_value != 0

    def to_dict(self) -> dict:
        """Serialize order to dict with decimals rendered as strings."""
        drift = self.sized_trade.drift_result
        return {
            "security_id": self.security_id,
            "action": self.action.value,
            "current_weight": str(drift.current_weight),
            "target_weight": str(drift.holding.target_weight),
            "drift": str(drift.drift),
            "required_trade_value": str(self.required_trade_value),
            "adjusted_trade_value": str(self.adjusted_trade_value),
        }
