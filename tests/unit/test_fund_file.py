"""Tests for YAML fund files."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from rebalancer.config.fund_file import (
    FundFileError,
    create_sample_fund,
    fund_to_dict,
    load_fund,
    save_fund,
)
from rebalancer.core.models import Fund

FUND_YAML = """\
fund_id: TEST-FUND
total_nav: "1000000"
cash_balance: "50000"
min_cash_reserve: "10000"
min_trade_size: "1000"
holdings:
  - security_id: AAA
    units: "100"
    market_value: "600000"
    target_weight: "0.50"
  - security_id: BBB
    market_value: 400000
    target_weight: 0.5
"""


class TestLoadFund:
    """Tests for load_fund."""

    def test_load_fund(self, tmp_path: Path) -> None:
        """Test loading a valid fund file."""
        path = tmp_path / "fund.yaml"
        path.write_text(FUND_YAML)

        fund = load_fund(path)

        assert fund.fund_id == "TEST-FUND"
        assert fund.total_nav == Decimal("1000000")
        assert fund.available_cash == Decimal("40000")
        assert fund.min_trade_size == Decimal("1000")
        assert fund.security_ids == ["AAA", "BBB"]
        assert fund.holdings[0].units == Decimal("100")
        assert fund.holdings[0].target_weight == Decimal("0.50")

    def test_unquoted_numbers(self, tmp_path: Path) -> None:
        """Test YAML numbers are accepted and default units to zero."""
        path = tmp_path / "fund.yaml"
        path.write_text(FUND_YAML)

        bbb = load_fund(path).get_holding("BBB")

        assert bbb.market_value == Decimal("400000")
        assert bbb.target_weight == Decimal("0.5")
        assert bbb.units == 0

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test missing file raises FundFileError."""
        with pytest.raises(FundFileError, match="not found"):
            load_fund(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test unparseable YAML raises FundFileError."""
        path = tmp_path / "bad.yaml"
        path.write_text("fund_id: [unclosed")

        with pytest.raises(FundFileError, match="Failed to parse"):
            load_fund(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test a YAML list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(FundFileError, match="mapping"):
            load_fund(path)

    def test_negative_cash_rejected(self, tmp_path: Path) -> None:
        """Test negative cash balance fails validation."""
        path = tmp_path / "fund.yaml"
        path.write_text(FUND_YAML.replace('cash_balance: "50000"', 'cash_balance: "-1"'))

        with pytest.raises(FundFileError, match="Invalid fund file"):
            load_fund(path)

    def test_target_weight_out_of_range(self, tmp_path: Path) -> None:
        """Test target weight above 1 fails validation."""
        path = tmp_path / "fund.yaml"
        path.write_text(FUND_YAML.replace('target_weight: "0.50"', 'target_weight: "1.5"'))

        with pytest.raises(FundFileError):
            load_fund(path)

    def test_zero_nav_allowed(self, tmp_path: Path) -> None:
        """Test NAV is left for the rebalancer to reject."""
        path = tmp_path / "fund.yaml"
        path.write_text(FUND_YAML.replace('total_nav: "1000000"', 'total_nav: "0"'))

        assert load_fund(path).total_nav == 0


class TestSaveFund:
    """Tests for save_fund and the sample fund."""

    def test_save_then_load(self, tmp_path: Path, sample_fund: Fund) -> None:
        """Test a saved fund loads back unchanged."""
        path = tmp_path / "nested" / "fund.yaml"
        save_fund(sample_fund, path)

        assert load_fund(path) == sample_fund

    def test_fund_to_dict_uses_strings(self, sample_fund: Fund) -> None:
        """Test decimals are written as strings."""
        data = fund_to_dict(sample_fund)

        assert data["total_nav"] == "10000000"
        assert data["holdings"][0]["target_weight"] == "0.30"

    def test_sample_fund(self) -> None:
        """Test sample fund matches the balanced scenario."""
        fund = create_sample_fund()

        assert fund.fund_id == "MF-BALANCED-001"
        assert len(fund.holdings) == 4
        assert sum(h.target_weight for h in fund.holdings) == Decimal("1.00")
