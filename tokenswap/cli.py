"""Command line pool quoting tool.

Usage:
    tokenswap --config pool.json swap --reserve-a 1000 --reserve-b 1000 --amount 100
    tokenswap --config pool.json deposit --reserve-a 1000 --reserve-b 1000 --amount 10 \
        --direction b_to_a
    tokenswap --config pool.json withdraw --reserve-a 1000 --reserve-b 1000 --pool-tokens 5000
    tokenswap --config pool.json value --reserve-a 1000 --reserve-b 1000

Every command prints one JSON object on stdout. When the pool configuration
is invalid or the request cannot be priced, the object has an "error" key
and the exit code is 1. Logs go to stderr.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from tokenswap.curve import Fees, SwapCurve, TradeDirection
from tokenswap.errors import SwapError
from tokenswap.models import PoolConfig

logger = structlog.get_logger()


def configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokenswap",
        description="Quote swaps, deposits and withdrawals against a token swap pool",
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Pool configuration JSON file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    reserves = argparse.ArgumentParser(add_help=False)
    reserves.add_argument("--reserve-a", type=int, required=True, help="Pool reserve of token A")
    reserves.add_argument("--reserve-b", type=int, required=True, help="Pool reserve of token B")

    direction = argparse.ArgumentParser(add_help=False)
    direction.add_argument(
        "--direction",
        type=TradeDirection,
        choices=list(TradeDirection),
        metavar="{a_to_b,b_to_a}",
        default=TradeDirection.A_TO_B,
        help="Trade direction; for deposits and withdrawals, the token that moves",
    )

    liquidity = argparse.ArgumentParser(add_help=False)
    liquidity.add_argument(
        "--pool-supply",
        type=int,
        default=None,
        help="Outstanding pool tokens (default: the supply of a newly created pool)",
    )
    amounts = liquidity.add_mutually_exclusive_group(required=True)
    amounts.add_argument("--amount", type=int, help="One-sided amount of the source token")
    amounts.add_argument("--pool-tokens", type=int, help="Pool tokens, moving both tokens")

    commands = parser.add_subparsers(dest="command", required=True)

    swap = commands.add_parser("swap", parents=[reserves, direction], help="Quote a swap with fees")
    swap.add_argument("--amount", type=int, required=True, help="Source amount, fees included")

    commands.add_parser("deposit", parents=[reserves, direction, liquidity], help="Quote a deposit")
    commands.add_parser(
        "withdraw", parents=[reserves, direction, liquidity], help="Quote a withdrawal"
    )
    commands.add_parser("value", parents=[reserves], help="Normalized value of the pool")

    return parser


def _swap_reserves(args: argparse.Namespace) -> tuple[int, int]:
    if args.direction is TradeDirection.A_TO_B:
        return args.reserve_a, args.reserve_b
    return args.reserve_b, args.reserve_a


def run_command(
    args: argparse.Namespace,
    swap_curve: SwapCurve,
    fees: Fees,
    pool_supply: int,
) -> dict[str, Any] | None:
    """Run the selected command; None means the request cannot be priced."""
    if args.command == "swap":
        swap_source_amount, swap_destination_amount = _swap_reserves(args)
        swap_result = swap_curve.swap(
            args.amount, swap_source_amount, swap_destination_amount, args.direction, fees
        )
        return None if swap_result is None else dataclasses.asdict(swap_result)

    if args.command == "value":
        value = swap_curve.calculator.normalized_value(args.reserve_a, args.reserve_b)
        return None if value is None else {"normalized_value": str(value)}

    if args.pool_supply is not None:
        pool_supply = args.pool_supply

    if args.command == "deposit":
        if args.pool_tokens is not None:
            deposit = swap_curve.deposit_all_token_types(
                args.pool_tokens, pool_supply, args.reserve_a, args.reserve_b
            )
            return None if deposit is None else dataclasses.asdict(deposit)
        pool_tokens = swap_curve.deposit_single_token_type(
            args.amount, args.reserve_a, args.reserve_b, pool_supply, args.direction, fees
        )
        return None if pool_tokens is None else {"pool_tokens": pool_tokens}

    if args.pool_tokens is not None:
        withdrawal = swap_curve.withdraw_all_token_types(
            args.pool_tokens, pool_supply, args.reserve_a, args.reserve_b, fees
        )
        return None if withdrawal is None else dataclasses.asdict(withdrawal)
    pool_tokens = swap_curve.withdraw_single_token_type_exact_out(
        args.amount, args.reserve_a, args.reserve_b, pool_supply, args.direction, fees
    )
    return None if pool_tokens is None else {"pool_tokens": pool_tokens}


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def main(argv: list[str] | None = None) -> int:
    """Entry point for the tokenswap command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = PoolConfig.from_json_file(args.config)
    except (OSError, ValidationError) as e:
        logger.error("config_load_failed", path=str(args.config), error=str(e))
        _emit({"error": f"cannot load pool configuration: {e}"})
        return 1

    swap_curve = config.to_swap_curve()
    fees = config.to_fees()
    try:
        pool_supply = swap_curve.initialize(fees, args.reserve_a, args.reserve_b)
        result = run_command(args, swap_curve, fees, pool_supply)
    except SwapError as e:
        _emit({"error": str(e), "error_type": type(e).__name__})
        return 1

    if result is None:
        logger.info("quote_rejected", command=args.command, curve_type=swap_curve.curve_type.value)
        _emit({"error": f"{args.command} cannot be priced"})
        return 1

    _emit({"command": args.command, "curve_type": swap_curve.curve_type.value, **result})
    return 0


if __name__ == "__main__":
    sys.exit(main())
