"""Fund rebalancing: drift -> sizing -> constraints."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger

from rebalancer.core.exceptions import RebalanceError
from rebalancer.core.models import (
    ConstrainedOrder,
    DriftResult,
    Fund,
    OrderAction,
    SizedTrade,
)
from rebalancer.portfolio.constraints import (
    CashShortfallPolicy,
    ConstraintSummary,
    apply_constraints_with_summary,
)
from rebalancer.portfolio.drift import calculate_drift, calculate_drifts
from rebalancer.portfolio.sizing import size_required_trade, size_required_trades


@dataclass(frozen=True)
class RebalanceResult:
    """Outcome of rebalancing one fund.

    A failed rebalance carries errors and no orders; there is no partial
    result.

    Attributes:
        fund_id: Fund that was rebalanced
        orders: Constrained sells followed by constrained buys
        summary: Cash aggregates shared by all buys (None on failure)
        errors: Reasons the fund was rejected
        warnings: Non-fatal conditions, such as a clamped cash pool
    """

    fund_id: str
    orders: tuple[ConstrainedOrder, ...] = ()
    summary: ConstraintSummary | None = None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def needs_rebalance(self) -> bool:
        """Check if any order results in a trade."""
        return any(o.is_executable for o in self.orders)

    @property
    def sell_orders(self) -> list[ConstrainedOrder]:
        return [
            o for o in self.orders if o.action == OrderAction.SELL and o.is_executable
        ]

    @property
    def buy_orders(self) -> list[ConstrainedOrder]:
        """Get buy orders to submit, scaled or not.

        Buys scaled down to zero are left out.
        """
        return [
            o
            for o in self.orders
            if o.action in (OrderAction.BUY, OrderAction.BUY_SCALED)
            and o.is_executable
        ]

    @property
    def skipped_orders(self) -> list[ConstrainedOrder]:
        return [o for o in self.orders if o.action == OrderAction.SKIP]

    @property
    def total_sells(self) -> Decimal:
        """Total value of sell orders (positive)."""
        return sum((abs(o.adjusted_trade_value) for o in self.sell_orders), Decimal(0))

    @property
    def total_buys(self) -> Decimal:
        return sum((o.adjusted_trade_value for o in self.buy_orders), Decimal(0))

    @property
    def net_cash_change(self) -> Decimal:
        """Net change in cash (sells - buys)."""
        return self.total_sells - self.total_buys

    def get_order(self, security_id: str) -> ConstrainedOrder | None:
        """Get the order for a security."""
        for order in self.orders:
            if order.security_id == security_id:
                return order
        return None

    def to_dict(self) -> dict:
        """Serialize result with decimals rendered as strings."""
        return {
            "fund_id": self.fund_id,
            "succeeded": self.succeeded,
            "orders": [o.to_dict() for o in self.orders],
            "summary": self.summary.to_dict() if self.summary else None,
            "total_sells": str(self.total_sells),
            "total_buys": str(self.total_buys),
            "net_cash_change": str(self.net_cash_change),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class StageTrace:
    """Every pipeline stage for one holding, for inspection."""

    drift: DriftResult
    sized_trade: SizedTrade
    order: ConstrainedOrder
    summary: ConstraintSummary


def rebalance(
    fund: Fund,
    policy: CashShortfallPolicy = CashShortfallPolicy.CLAMP,
) -> RebalanceResult:
    """Compute constrained orders that move a fund toward its targets.

    The same fund always produces the same result, whatever the order of
    its holdings.

    Args:
        fund: Fund snapshot
        policy: Handling of negative cash after the reserve

    Returns:
        RebalanceResult; check `succeeded` before using the orders
    """
    if fund.total_nav <= 0:
        error = f"Fund {fund.fund_id}: total NAV must be positive, got {fund.total_nav}"
        logger.error(error)
        return RebalanceResult(fund_id=fund.fund_id, errors=(error,))

    drifts = calculate_drifts(fund.total_nav, fund.holdings)
    trades = size_required_trades(fund.total_nav, drifts)

    try:
        orders, summary = apply_constraints_with_summary(
            fund.min_trade_size, fund.available_cash, trades, policy
        )
    except RebalanceError as e:
        error = f"Fund {fund.fund_id}: {e}"
        logger.error(error)
        return RebalanceResult(fund_id=fund.fund_id, errors=(error,))

    warnings: tuple[str, ...] = ()
    if summary.cash_clamped:
        warnings = (
            f"Cash available for buys was negative "
            f"({fund.available_cash + summary.total_sell_proceeds}); "
            f"buys scaled to zero",
        )

    result = RebalanceResult(
        fund_id=fund.fund_id,
        orders=tuple(orders),
        summary=summary,
        warnings=warnings,
    )
    logger.info(
        f"Rebalanced {fund.fund_id}: {len(result.sell_orders)} sells, "
        f"{len(result.buy_orders)} buys, {len(result.skipped_orders)} skipped"
    )
    return result


class RebalanceEngine:
    """
    Stateless entry point holding rebalance configuration.

    Example:
        engine = RebalanceEngine(policy=CashShortfallPolicy.RAISE)
        result = engine.rebalance(fund)

        if result.succeeded and result.needs_rebalance:
            submit(result.sell_orders + result.buy_orders)
    """

    def __init__(self, policy: CashShortfallPolicy = CashShortfallPolicy.CLAMP) -> None:
        """Initialize rebalance engine.

        Args:
            policy: Handling of negative cash after the reserve
        """
        self.policy = policy

    def rebalance(self, fund: Fund) -> RebalanceResult:
        return rebalance(fund, self.policy)

    def explain(self, fund: Fund, security_id: str) -> StageTrace:
        """Trace one holding through every stage of a fund rebalance.

        Args:
            fund: Fund snapshot
            security_id: Holding to trace

        Returns:
            StageTrace with the drift, sizing and constrained stages

        Raises:
            KeyError: If the fund has no such holding
            RebalanceError: If the fund cannot be rebalanced
        """
        holding = fund.get_holding(security_id)
        if holding is None:
            raise KeyError(f"Fund {fund.fund_id} has no holding {security_id}")

        result = self.rebalance(fund)
        if not result.succeeded:
            raise RebalanceError("; ".join(result.errors))

        drift = calculate_drift(fund.total_nav, holding)
        return StageTrace(
            drift=drift,
            sized_trade=size_required_trade(fund.total_nav, drift),
            order=result.get_order(security_id),
            summary=result.summary,
        )
