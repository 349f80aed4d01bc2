"""
Command-line interface for exercising the Paylink merchant API.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Optional, Sequence, Tuple

import requests

from .api import create_merchant_client
from .core.client import MerchantClient
from .core.errors import PaylinkError

__all__ = ["build_parser", "main", "parse_override", "run_cli"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def parse_override(value: str) -> Tuple[str, str]:
    """Split a ``--set PAYLINK_KEY=value`` argument into its key and value."""
    key, sep, val = value.partition("=")
    key = key.strip()
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {value!r}")
    return key, val


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paylink-payments",
        description="Run a single Paylink merchant API operation",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYLINK_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=parse_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override a PAYLINK_* variable without editing the .env file",
    )
    parser.add_argument(
        "--environment",
        choices=("test", "production"),
        default=None,
        help="Gateway environment (default: PAYLINK_ENVIRONMENT or test)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get_invoice = commands.add_parser("get-invoice", help="Show an invoice")
    get_invoice.add_argument("transaction_no")

    cancel_invoice = commands.add_parser("cancel-invoice", help="Cancel a pending invoice")
    cancel_invoice.add_argument("transaction_no")

    payment_url = commands.add_parser("payment-url", help="Print the payment page URL")
    payment_url.add_argument("transaction_no")

    digital = commands.add_parser(
        "send-digital-product",
        help="Deliver digital product data for a paid order",
    )
    digital.add_argument("order_number")
    digital.add_argument("message")
    return parser


def _run_command(client: MerchantClient, args: argparse.Namespace) -> Any:
    if args.command == "get-invoice":
        return client.get_invoice(args.transaction_no).raw
    if args.command == "cancel-invoice":
        return {
            "transactionNo": args.transaction_no,
            "cancelled": client.cancel_invoice(args.transaction_no),
        }
    if args.command == "payment-url":
        return {"url": client.payment_page_url(args.transaction_no)}
    return client.send_digital_product(args.message, args.order_number)


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(message)s")

    try:
        client = create_merchant_client(
            session=requests.Session(),
            environment=args.environment,
            env_file=args.env_file,
            overrides=dict(args.set or ()),
        )
    except PaylinkError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        result = _run_command(client, args)
    except PaylinkError as exc:
        logging.error("%s failed: %s", args.command, exc)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    return 0


def main() -> None:
    raise SystemExit(run_cli())
