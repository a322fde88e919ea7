"""Core domain models and types."""

from rebalancer.core.exceptions import (
    InvalidNavError,
    NegativeAvailableCashError,
    RebalanceError,
)
from rebalancer.core.models import (
    ConstrainedOrder,
    DriftResult,
    Fund,
    Holding,
    OrderAction,
    SizedTrade,
)

__all__ = [
    "ConstrainedOrder",
    "DriftResult",
    "Fund",
    "Holding",
    "InvalidNavError",
    "NegativeAvailableCashError",
    "OrderAction",
    "RebalanceError",
    "SizedTrade",
]
