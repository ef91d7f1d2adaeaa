"""Tests for the amm-kernel command line."""

import json

import pytest

from amm_kernel.cli import build_parser, main
from amm_kernel.config import CliConfig
from amm_kernel.math.tick import MIN_TICK, to_sqrt_ratio
from amm_kernel.math.twamm import calculate_next_sqrt_ratio
from amm_kernel.safe_int import UINT128_MAX, UINT256_MAX
from tests.helpers import TOKEN0, TOKEN1, TWO_POW_64, TWO_POW_128


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestCliConfig:
    """Tests for CliConfig."""

    def test_defaults(self, monkeypatch):
        """Without environment variables the defaults apply."""
        monkeypatch.delenv("AMM_KERNEL_LOG_LEVEL", raising=False)
        monkeypatch.delenv("AMM_KERNEL_LOG_JSON", raising=False)
        assert CliConfig.from_env() == CliConfig(log_level="warning", json_logs=False)

    def test_from_env(self, monkeypatch):
        """Environment variables configure logging."""
        monkeypatch.setenv("AMM_KERNEL_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("AMM_KERNEL_LOG_JSON", "1")
        assert CliConfig.from_env() == CliConfig(log_level="debug", json_logs=True)

    def test_invalid_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(ValueError):
            CliConfig(log_level="verbose")

    def test_overrides(self):
        """Command line flags override configured values."""
        config = CliConfig().with_overrides(log_level="info", json_logs=None)
        assert config == CliConfig(log_level="info", json_logs=False)


class TestCliCommands:
    """Tests for the CLI subcommands."""

    def test_sqrt_ratio(self, capsys):
        """sqrt-ratio prints the Q128 sqrt ratio of a tick."""
        code, out, _ = run(capsys, "sqrt-ratio", "1000000")
        assert code == 0
        assert json.loads(out)["sqrtRatio"] == str(to_sqrt_ratio(1000000))

    def test_sqrt_ratio_negative_tick(self, capsys):
        """Negative ticks are accepted as positionals."""
        code, out, _ = run(capsys, "sqrt-ratio", str(MIN_TICK))
        assert code == 0
        assert json.loads(out)["sqrtRatio"] == str(to_sqrt_ratio(MIN_TICK))

    def test_sqrt_ratio_out_of_range(self, capsys):
        """Out of range ticks exit with status 1."""
        code, out, err = run(capsys, "sqrt-ratio", str(MIN_TICK - 1))
        assert code == 1
        assert out == ""
        assert "out of range" in err

    def test_exp2(self, capsys):
        """exp2 accepts hex input."""
        code, out, _ = run(capsys, "exp2", hex(1 << 64))
        assert code == 0
        assert json.loads(out)["result"] == str(2 * TWO_POW_64)

    def test_exp2_out_of_domain(self, capsys):
        """exp2 beyond its domain exits with status 1."""
        code, _, err = run(capsys, "exp2", hex(1 << 70))
        assert code == 1
        assert "exp2" in err

    def test_next_sqrt_ratio(self, capsys):
        """next-sqrt-ratio matches calculate_next_sqrt_ratio."""
        code, out, _ = run(
            capsys,
            "next-sqrt-ratio",
            "--sqrt-ratio", str(TWO_POW_128),
            "--liquidity", "1000000000",
            "--sale-rate-token0", str(1000 << 32),
            "--sale-rate-token1", str(4000 << 32),
            "--time-elapsed", "100",
        )
        expected = calculate_next_sqrt_ratio(TWO_POW_128, 10**9, 1000 << 32, 4000 << 32, 100, 0)
        assert code == 0
        assert json.loads(out)["sqrtRatioNext"] == str(expected)

    @pytest.mark.parametrize(
        "option,value",
        [
            ("--fee", str(TWO_POW_64 + 1)),
            ("--liquidity", str(UINT128_MAX + 1)),
            ("--sale-rate-token1", str(UINT128_MAX + 1)),
            ("--time-elapsed", str(1 << 32)),
        ],
    )
    def test_next_sqrt_ratio_rejects_out_of_range(self, option, value):
        """Arguments outside their integer width are usage errors."""
        argv = {
            "--sqrt-ratio": str(TWO_POW_128),
            "--liquidity": "1",
            "--sale-rate-token0": str(1 << 32),
            "--sale-rate-token1": str(1 << 32),
            "--time-elapsed": "1",
            option: value,
        }
        with pytest.raises(SystemExit) as exc_info:
            main(["next-sqrt-ratio", *[item for pair in argv.items() for item in pair]])
        assert exc_info.value.code == 2

    def test_next_sqrt_ratio_arithmetic_error(self, capsys):
        """Arithmetic overflow exits with status 1 instead of a traceback."""
        code, out, err = run(
            capsys,
            "next-sqrt-ratio",
            "--sqrt-ratio", str(UINT256_MAX),
            "--liquidity", "1",
            "--sale-rate-token0", str(1 << 32),
            "--sale-rate-token1", str(1 << 32),
            "--time-elapsed", "1",
        )
        assert code == 1
        assert out == ""
        assert "Error" in err

    def test_quote(self, capsys, write_snapshot):
        """quote prints the quote of a snapshot pool as JSON."""
        path = write_snapshot(
            {
                "kind": "fullRange",
                "key": {"token0": TOKEN0, "token1": TOKEN1},
                "sqrtRatio": str(TWO_POW_128),
                "liquidity": "1000000000",
            }
        )
        code, out, _ = run(capsys, "quote", str(path), "--token", str(TOKEN1), "--amount", "1000")
        result = json.loads(out)
        assert code == 0
        assert result["calculatedAmount"] == "999"
        assert result["consumedAmount"] == "1000"
        assert result["isPriceIncreasing"] is True
        assert result["executionResources"] == {"noOverridePriceChange": "1"}
        assert result["stateAfter"]["liquidity"] == "1000000000"

    def test_quote_oracle_with_meta(self, capsys, write_snapshot):
        """quote passes --meta to the pool as the block time."""
        path = write_snapshot(
            {
                "kind": "oracle",
                "token1": TOKEN1,
                "sqrtRatio": str(TWO_POW_128),
                "liquidity": "1000000000",
                "lastSnapshotTime": 1,
            }
        )
        code, out, _ = run(
            capsys, "quote", str(path), "--token", "0", "--amount", "1000", "--meta", "2"
        )
        result = json.loads(out)
        assert code == 0
        assert result["calculatedAmount"] == "999"
        assert result["executionResources"]["snapshotsWritten"] == "1"
        assert result["stateAfter"]["lastSnapshotTime"] == "2"

    def test_quote_invalid_token(self, capsys, write_snapshot):
        """Quote errors exit with status 1."""
        path = write_snapshot(
            {
                "key": {"token0": TOKEN0, "token1": TOKEN1},
                "sqrtRatio": str(TWO_POW_128),
                "liquidity": "1",
            }
        )
        code, _, err = run(capsys, "quote", str(path), "--token", "12345", "--amount", "1")
        assert code == 1
        assert "Error" in err

    def test_quote_missing_file(self, capsys, tmp_path):
        """Unreadable snapshots exit with status 1."""
        code, _, _ = run(
            capsys, "quote", str(tmp_path / "missing.json"), "--token", "1", "--amount", "1"
        )
        assert code == 1

    def test_subcommand_required(self):
        """A subcommand is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
