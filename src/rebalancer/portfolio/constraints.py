"""Minimum size and cash constraints for sized trades.

Buys compete for a shared cash pool. Instead of letting each buy consume a
running balance in list order, the engine works in two phases:

1. Aggregate sell proceeds and total buy demand over all trades.
2. Scale every surviving buy by the same factor
   (available cash / total buy demand) when demand exceeds cash.

The result depends only on the set of trades, never on their order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from loguru import logger

from rebalancer.core.exceptions import NegativeAvailableCashError
from rebalancer.core.models import ConstrainedOrder, OrderAction, SizedTrade

ZERO = Decimal("0")


class CashShortfallPolicy(str, Enum):
    """What to do when cash for buys is negative after the reserve."""

    CLAMP = "clamp"  # Floor the cash pool at zero
    RAISE = "raise"  # Raise NegativeAvailableCashError


@dataclass(frozen=True)
class ConstraintSummary:
    """Aggregates computed before any buy is constrained.

    Attributes:
        available_cash: Cash above the reserve before any sells
        total_sell_proceeds: Proceeds of all sells that were not skipped
        total_available_cash: Cash pool buys may draw from
        total_buy_demand: Raw demand over all buys, including skipped ones
        scale_factor: Factor applied to buys, None if buys are unscaled
        cash_clamped: Whether a negative cash pool was floored at zero
    """

    available_cash: Decimal
    total_sell_proceeds: Decimal
    total_available_cash: Decimal
    total_buy_demand: Decimal
    scale_factor: Decimal | None = None
    cash_clamped: bool = False

    @property
    def is_scaled(self) -> bool:
        """Check if buy demand exceeds the cash pool."""
        return self.scale_factor is not None

    def to_dict(self) -> dict:
        """Serialize summary with decimals rendered as strings."""
        return {
            "available_cash": str(self.available_cash),
            "total_sell_proceeds": str(self.total_sell_proceeds),
            "total_available_cash": str(self.total_available_cash),
            "total_buy_demand": str(self.total_buy_demand),
            "scale_factor": (
                str(self.scale_factor) if self.scale_factor is not None else None
            ),
            "cash_clamped": self.cash_clamped,
        }


def _sum(values: Iterable[Decimal]) -> Decimal:
    # Sorted so context rounding cannot depend on input order
    return sum(sorted(values), ZERO)


def _below_minimum(trade: SizedTrade, min_trade_size: Decimal) -> bool:
    return abs(trade.required_trade_value) < min_trade_size


def partition_trades(
    trades: Iterable[SizedTrade],
) -> tuple[list[SizedTrade], list[SizedTrade]]:
    """Split trades into sells and buys, keeping relative order.

    Zero-value trades count as buys.
    """
    sells: list[SizedTrade] = []
    buys: list[SizedTrade] = []
    for trade in trades:
        (sells if trade.is_sell else buys).append(trade)
    return sells, buys


def constrain_sells(
    min_trade_size: Decimal, sells: Iterable[SizedTrade]
) -> list[ConstrainedOrder]:
    """Apply the minimum size filter to sells.

    Sells are never cash constrained.
    """
    orders = []
    for trade in sells:
        if _below_minimum(trade, min_trade_size):
            logger.debug(
                f"{trade.security_id}: sell {trade.required_trade_value} below "
                f"minimum {min_trade_size}, skipping"
            )
            orders.append(
                ConstrainedOrder(
                    sized_trade=trade,
                    adjusted_trade_value=ZERO,
                    action=OrderAction.SKIP,
                    note="below minimum trade size",
                )
            )
        else:
            orders.append(
                ConstrainedOrder(
                    sized_trade=trade,
                    adjusted_trade_value=trade.required_trade_value,
                    action=OrderAction.SELL,
                )
            )
    return orders


def summarize_constraints(
    available_cash: Decimal,
    constrained_sells: Sequence[ConstrainedOrder],
    buys: Sequence[SizedTrade],
    policy: CashShortfallPolicy = CashShortfallPolicy.CLAMP,
    min_trade_size: Decimal = ZERO,
) -> ConstraintSummary:
    """Compute the cash pool, buy demand and scale factor.

    Args:
        available_cash: Cash above the reserve
        constrained_sells: Sells after the minimum size filter
        buys: All buy trades, including ones that will be skipped
        policy: Handling of a negative cash pool
        min_trade_size: Minimum size used to tell which buys survive

    Returns:
        ConstraintSummary shared by every buy

    Raises:
        NegativeAvailableCashError: If the pool is negative, some buy passes
            the size filter, and policy is RAISE
    """
    total_sell_proceeds = _sum(
        abs(o.adjusted_trade_value)
        for o in constrained_sells
        if o.action != OrderAction.SKIP
    )
    total_available_cash = available_cash + total_sell_proceeds
    # Includes buys that will be skipped for size, so their demand still
    # dilutes the scale factor of the surviving buys.
    total_buy_demand = _sum(t.required_trade_value for t in buys)

    cash_clamped = False
    if total_available_cash < 0 and total_buy_demand > 0:
        # Only buys that pass the size filter could be sized negative
        if any(not _below_minimum(t, min_trade_size) for t in buys):
            if policy == CashShortfallPolicy.RAISE:
                raise NegativeAvailableCashError(total_available_cash)
            logger.warning(
                f"Cash for buys is {total_available_cash} after reserve and "
                f"sells, clamping to zero"
            )
            cash_clamped = True
        total_available_cash = ZERO

    scale_factor = None
    if total_buy_demand > 0 and total_buy_demand > total_available_cash:
        scale_factor = total_available_cash / total_buy_demand

    return ConstraintSummary(
        available_cash=available_cash,
        total_sell_proceeds=total_sell_proceeds,
        total_available_cash=total_available_cash,
        total_buy_demand=total_buy_demand,
        scale_factor=scale_factor,
        cash_clamped=cash_clamped,
    )


def constrain_buys(
    min_trade_size: Decimal,
    buys: Iterable[SizedTrade],
    summary: ConstraintSummary,
) -> list[ConstrainedOrder]:
    """Apply the minimum size filter and the shared scale factor to buys."""
    orders = []
    for trade in buys:
        if _below_minimum(trade, min_trade_size):
            logger.debug(
                f"{trade.security_id}: buy {trade.required_trade_value} below "
                f"minimum {min_trade_size}, skipping"
            )
            orders.append(
                ConstrainedOrder(
                    sized_trade=trade,
                    adjusted_trade_value=ZERO,
                    action=OrderAction.SKIP,
                    note="below minimum trade size",
                )
            )
        elif summary.scale_factor is not None:
            orders.append(
                ConstrainedOrder(
                    sized_trade=trade,
                    adjusted_trade_value=trade.required_trade_value
                    * summary.scale_factor,
                    action=OrderAction.BUY_SCALED,
                    note=f"scaled by {summary.scale_factor}",
                )
            )
        else:
            orders.append(
                ConstrainedOrder(
                    sized_trade=trade,
                    adjusted_trade_value=trade.required_trade_value,
                    action=OrderAction.BUY,
                )
            )
    return orders


def apply_constraints_with_summary(
    min_trade_size: Decimal,
    available_cash: Decimal,
    trades: Iterable[SizedTrade],
    policy: CashShortfallPolicy = CashShortfallPolicy.CLAMP,
) -> tuple[list[ConstrainedOrder], ConstraintSummary]:
    """Apply constraints and also return the aggregates used for buys."""
    sells, buys = partition_trades(trades)
    constrained_sells = constrain_sells(min_trade_size, sells)

    # Every aggregate is complete before the first buy is constrained
    summary = summarize_constraints(
        available_cash, constrained_sells, buys, policy, min_trade_size
    )

    constrained_buys = constrain_buys(min_trade_size, buys, summary)
    return constrained_sells + constrained_buys, summary


def apply_constraints(
    min_trade_size: Decimal,
    available_cash: Decimal,
    trades: Iterable[SizedTrade],
    policy: CashShortfallPolicy = CashShortfallPolicy.CLAMP,
) -> list[ConstrainedOrder]:
    """Turn sized trades into constrained orders.

    Args:
        min_trade_size: Trades with |value| strictly below this are skipped
        available_cash: Cash above the reserve, before sell proceeds
        trades: Sized trades for the whole fund
        policy: Handling of a negative cash pool

    Returns:
        Constrained sells followed by constrained buys
    """
    orders, _ = apply_constraints_with_summary(
        min_trade_size, available_cash, trades, policy
    )
    return orders
