"""Portfolio rebalancing pipeline."""

from rebalancer.portfolio.constraints import (
    CashShortfallPolicy,
    ConstraintSummary,
    apply_constraints,
    apply_constraints_with_summary,
)
from rebalancer.portfolio.drift import calculate_drift, calculate_drifts
from rebalancer.portfolio.rebalance import (
    RebalanceEngine,
    RebalanceResult,
    StageTrace,
    rebalance,
)
from rebalancer.portfolio.sizing import size_required_trade, size_required_trades

__all__ = [
    "CashShortfallPolicy",
    "ConstraintSummary",
    "RebalanceEngine",
    "RebalanceResult",
    "StageTrace",
    "apply_constraints",
    "apply_constraints_with_summary",
    "calculate_drift",
    "calculate_drifts",
    "rebalance",
    "size_required_trade",
    "size_required_trades",
]
