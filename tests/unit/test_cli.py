"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from rebalancer.cli import app
from rebalancer.config.fund_file import create_sample_fund, save_fund

runner = CliRunner()


@pytest.fixture
def fund_file(tmp_path: Path) -> Path:
    """Write the sample fund to a temp file."""
    path = tmp_path / "fund.yaml"
    save_fund(create_sample_fund(), path)
    return path


class TestRunCommand:
    """Tests for `rebalancer run`."""

    def test_run_shows_cash_summary(self, fund_file: Path) -> None:
        """Test run prints the scale factor and cash pool."""
        result = runner.invoke(app, ["run", str(fund_file)])

        assert result.exit_code == 0
        assert "Cash for buys: $300,000.00" in result.output
        assert "Scale factor: 0.7500" in result.output
        assert "Total buys: $300,000.00" in result.output

    def test_run_json(self, fund_file: Path) -> None:
        """Test run can emit JSON."""
        result = runner.invoke(app, ["run", str(fund_file), "--json"])

        assert result.exit_code == 0
        assert '"scale_factor": "0.75"' in result.output
        assert '"action": "buy_scaled"' in result.output

    def test_run_missing_file(self, tmp_path: Path) -> None:
        """Test run exits with an error for a missing file."""
        result = runner.invoke(app, ["run", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_run_invalid_nav(self, tmp_path: Path) -> None:
        """Test run reports a rejected fund."""
        path = tmp_path / "fund.yaml"
        path.write_text('fund_id: BAD\ntotal_nav: "0"\nholdings: []\n')

        result = runner.invoke(app, ["run", str(path)])

        assert result.exit_code == 1
        assert "total NAV must be positive" in result.output

    def test_run_unknown_policy(self, fund_file: Path) -> None:
        """Test run rejects an unknown policy."""
        result = runner.invoke(app, ["run", str(fund_file), "--policy", "ignore"])

        assert result.exit_code == 1
        assert "unknown cash policy" in result.output

    def test_run_zero_cash_needs_no_rebalance(self, tmp_path: Path) -> None:
        """Test buys scaled to zero report no rebalancing needed."""
        path = tmp_path / "fund.yaml"
        path.write_text(
            "fund_id: NO-CASH\n"
            'total_nav: "1000"\n'
            'min_trade_size: "10"\n'
            "holdings:\n"
            '  - {security_id: B, market_value: "500", target_weight: "0.6"}\n'
        )

        result = runner.invoke(app, ["run", str(path)])

        assert result.exit_code == 0
        assert "No rebalancing needed" in result.output

    def test_run_raise_policy(self, tmp_path: Path) -> None:
        """Test raise policy fails an under-reserved fund."""
        path = tmp_path / "fund.yaml"
        path.write_text(
            "fund_id: SHORT\n"
            'total_nav: "1000"\n'
            'cash_balance: "0"\n'
            'min_cash_reserve: "1000"\n'
            "holdings:\n"
            '  - {security_id: A, market_value: "1000", target_weight: "0.5"}\n'
            '  - {security_id: B, market_value: "0", target_weight: "0.5"}\n'
        )

        result = runner.invoke(app, ["run", str(path), "--policy", "raise", "--json"])

        assert result.exit_code == 1
        assert '"succeeded": false' in result.output


class TestExplainCommand:
    """Tests for `rebalancer explain`."""

    def test_explain_holding(self, fund_file: Path) -> None:
        """Test explain shows each stage."""
        result = runner.invoke(app, ["explain", str(fund_file), "INTL-EQ-ETF"])

        assert result.exit_code == 0
        assert "Current weight: 13.0000%" in result.output
        assert "Required trade: $200,000.00" in result.output
        assert "Action: BUY_SCALED" in result.output
        assert "Adjusted trade: $150,000.00" in result.output

    def test_explain_unknown_security(self, fund_file: Path) -> None:
        """Test explain rejects an unknown security."""
        result = runner.invoke(app, ["explain", str(fund_file), "NOPE"])

        assert result.exit_code == 1
        assert "not held" in result.output


class TestSampleCommand:
    """Tests for `rebalancer sample` and `version`."""

    def test_sample_writes_file(self, tmp_path: Path) -> None:
        """Test sample writes a loadable fund file."""
        path = tmp_path / "sample.yaml"
        result = runner.invoke(app, ["sample", str(path)])

        assert result.exit_code == 0
        assert path.exists()

    def test_sample_refuses_overwrite(self, fund_file: Path) -> None:
        """Test sample keeps an existing file without --force."""
        result = runner.invoke(app, ["sample", str(fund_file)])
        assert result.exit_code == 1

    def test_sample_force(self, fund_file: Path) -> None:
        """Test sample overwrites with --force."""
        result = runner.invoke(app, ["sample", str(fund_file), "--force"])
        assert result.exit_code == 0

    def test_version(self) -> None:
        """Test version command."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
