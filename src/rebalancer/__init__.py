"""Order-independent fund rebalancing pipeline."""

__version__ = "0.1.0"
