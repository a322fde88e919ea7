"""Settings and fund file handling."""

from rebalancer.config.fund_file import FundFileError, load_fund, save_fund
from rebalancer.config.settings import Settings, get_settings, setup_logging

__all__ = [
    "FundFileError",
    "Settings",
    "get_settings",
    "load_fund",
    "save_fund",
    "setup_logging",
]
