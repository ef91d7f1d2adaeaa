"""Command line interface for the AMM kernel.

Usage:
    amm-kernel sqrt-ratio TICK
    amm-kernel exp2 X
    amm-kernel next-sqrt-ratio --sqrt-ratio S --liquidity L \\
        --sale-rate-token0 R0 --sale-rate-token1 R1 --time-elapsed T [--fee F]
    amm-kernel quote SNAPSHOT --token TOKEN --amount AMOUNT \\
        [--sqrt-ratio-limit S] [--meta BLOCK_TIME]

Integers accept decimal or 0x hex notation. Results are printed as JSON on
stdout, with integers rendered as decimal strings.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from amm_kernel import __version__
from amm_kernel.config import LOG_LEVELS, CliConfig
from amm_kernel.log_config import configure_logging
from amm_kernel.math.errors import KernelMathError
from amm_kernel.math.tick import to_sqrt_ratio
from amm_kernel.math.twamm import calculate_next_sqrt_ratio, exp2
from amm_kernel.quoting.errors import PoolError
from amm_kernel.quoting.parsing import (
    parse_int,
    parse_pool_json,
    validate_uint32,
    validate_uint64,
    validate_uint128,
    validate_uint256,
)
from amm_kernel.quoting.types import QuoteParams, TokenAmount
from amm_kernel.safe_int import SafeIntError

logger = structlog.get_logger()


def _jsonable(value: Any) -> Any:
    """Convert quote results to JSON-friendly values (ints as strings)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            _camel(f.name): _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)
        }
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return str(value)
    return value


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def cmd_sqrt_ratio(args: argparse.Namespace) -> int:
    sqrt_ratio = to_sqrt_ratio(args.tick)
    if sqrt_ratio is None:
        logger.error("tick_out_of_range", tick=args.tick)
        print(f"Error: tick {args.tick} is out of range", file=sys.stderr)
        return 1
    _emit({"tick": str(args.tick), "sqrtRatio": str(sqrt_ratio)})
    return 0


def cmd_exp2(args: argparse.Namespace) -> int:
    result = exp2(args.x)
    _emit({"x": str(args.x), "result": str(result)})
    return 0


def cmd_next_sqrt_ratio(args: argparse.Namespace) -> int:
    result = calculate_next_sqrt_ratio(
        sqrt_ratio=args.sqrt_ratio,
        liquidity=args.liquidity,
        sale_rate_token0=args.sale_rate_token0,
        sale_rate_token1=args.sale_rate_token1,
        time_elapsed=args.time_elapsed,
        fee=args.fee,
    )
    _emit({"sqrtRatioNext": str(result)})
    return 0


def cmd_quote(args: argparse.Namespace) -> int:
    if args.snapshot == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(args.snapshot).read_text()

    pool = parse_pool_json(raw)
    quote = pool.quote(
        QuoteParams(
            token_amount=TokenAmount(amount=args.amount, token=args.token),
            sqrt_ratio_limit=args.sqrt_ratio_limit,
            meta=args.meta,
        )
    )
    logger.info(
        "quote_computed",
        pool=type(pool).__name__,
        consumed_amount=quote.consumed_amount,
        calculated_amount=quote.calculated_amount,
    )
    _emit(_jsonable(quote))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amm-kernel",
        description="Integer math and pool quoting for Ekubo-style AMMs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Log level (default: AMM_KERNEL_LOG_LEVEL or warning)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Render logs as JSON (default: AMM_KERNEL_LOG_JSON)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sqrt_ratio = subparsers.add_parser("sqrt-ratio", help="Convert a tick to a Q128 sqrt ratio")
    sqrt_ratio.add_argument("tick", type=parse_int)
    sqrt_ratio.set_defaults(func=cmd_sqrt_ratio)

    exp2_parser = subparsers.add_parser("exp2", help="2^x for a signed Q64.64 exponent")
    exp2_parser.add_argument("x", type=parse_int)
    exp2_parser.set_defaults(func=cmd_exp2)

    next_sqrt_ratio = subparsers.add_parser(
        "next-sqrt-ratio", help="Sqrt ratio after TWAMM virtual order execution"
    )
    next_sqrt_ratio.add_argument("--sqrt-ratio", type=validate_uint256, required=True)
    next_sqrt_ratio.add_argument("--liquidity", type=validate_uint128, required=True)
    next_sqrt_ratio.add_argument("--sale-rate-token0", type=validate_uint128, required=True)
    next_sqrt_ratio.add_argument("--sale-rate-token1", type=validate_uint128, required=True)
    next_sqrt_ratio.add_argument("--time-elapsed", type=validate_uint32, required=True)
    next_sqrt_ratio.add_argument(
        "--fee", type=validate_uint64, default=0, help="Fee as a fraction of 2^64"
    )
    next_sqrt_ratio.set_defaults(func=cmd_next_sqrt_ratio)

    quote = subparsers.add_parser("quote", help="Quote a swap against a pool snapshot")
    quote.add_argument("snapshot", help="Path to a JSON pool snapshot, or - for stdin")
    quote.add_argument("--token", type=validate_uint256, required=True)
    quote.add_argument(
        "--amount",
        type=parse_int,
        required=True,
        help="Signed amount: positive for exact input, negative for exact output",
    )
    quote.add_argument("--sqrt-ratio-limit", type=validate_uint256, default=None)
    quote.add_argument("--meta", type=validate_uint256, default=None, help="Block timestamp")
    quote.set_defaults(func=cmd_quote)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = CliConfig.from_env().with_overrides(
        log_level=args.log_level, json_logs=args.json_logs
    )
    configure_logging(config)

    try:
        return int(args.func(args))
    except (
        KernelMathError,
        PoolError,
        SafeIntError,
        ValidationError,
        ValueError,
        OSError,
    ) as err:
        logger.error("command_failed", command=args.command, error=str(err))
        print(f"Error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
