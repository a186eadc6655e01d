"""
Command-line calculator over commodity values.

Usage:
    commodity-calc '$100.00' + 200
    commodity-calc '$100.00' / 50000000 --full
    commodity-calc '10 AAPL' '*' '$15.25' --config settings.yaml

Operands are amount literals (see ``commodity_kernel.parsing``). Operators
are ``+ - * /`` and are applied left to right with no precedence.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from commodity_kernel.config import apply_settings, load_settings
from commodity_kernel.domain.commodity import get_registry
from commodity_kernel.domain.operations import Operation, apply
from commodity_kernel.domain.value import Value
from commodity_kernel.exceptions import CommodityKernelError
from commodity_kernel.formatting import format_value
from commodity_kernel.logging_config import (
    configure_logging,
    get_logger,
    operation_scope,
)
from commodity_kernel.parsing import parse_value

logger = get_logger("cli")

OPERATORS = {
    "+": Operation.ADD,
    "-": Operation.SUBTRACT,
    "*": Operation.MULTIPLY,
    "x": Operation.MULTIPLY,
    "/": Operation.DIVIDE,
}


def evaluate(tokens: list[str], *, exact: bool = False) -> Value:
    """
    Evaluate ``operand (operator operand)*`` left to right.

    Raises:
        ValueError: on a malformed token sequence.
        CommodityKernelError: from parsing or arithmetic.
    """
    if not tokens or len(tokens) % 2 == 0:
        raise ValueError("expected: OPERAND [OPERATOR OPERAND]...")

    result = parse_value(tokens[0], exact=exact)
    for index in range(1, len(tokens), 2):
        symbol = tokens[index]
        operation = OPERATORS.get(symbol)
        if operation is None:
            raise ValueError(f"unknown operator {symbol!r}")
        operand = parse_value(tokens[index + 1], exact=exact)
        with operation_scope(operation.value):
            result = apply(operation, result, operand)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commodity-calc",
        description="Evaluate arithmetic over commodity amounts.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Quote '*' and amounts with '$' to protect them from the shell. "
            "Put -- before an expression that starts with '-'."
        ),
    )
    parser.add_argument(
        "expression",
        nargs="+",
        help="OPERAND [OPERATOR OPERAND]...",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Print at each amount's full internal precision",
    )
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Construct operands as exact (keep-precision) amounts",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (precision and commodity options)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Emit debug logs to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.config is not None:
            apply_settings(load_settings(args.config), get_registry())
        result = evaluate(args.expression, exact=args.exact)
    except CommodityKernelError as e:
        logger.debug("evaluation_failed", exc_info=True)
        print(f"error: {e.code}: {e}", file=sys.stderr)
        return 1
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(format_value(result, full_precision=args.full))
    return 0


if __name__ == "__main__":
    sys.exit(main())
