"""
Minimal script that uses the public API to create a Paylink invoice.
"""

from __future__ import annotations

import argparse
import logging
import sys

from paylink_payments import (
    InvoiceOptions,
    PaylinkError,
    ProductLineItem,
    create_merchant_client,
)
from paylink_payments.cli import LOG_LEVELS, parse_override


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a Paylink invoice using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYLINK_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=parse_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="INFO")
    parser.add_argument("--order-number", default="123456789")
    parser.add_argument("--client-name", default="Mohammed Ali")
    parser.add_argument("--client-mobile", default="0512345678")
    parser.add_argument("--callback-url", default="https://example.com")
    parser.add_argument(
        "--card-brand",
        action="append",
        default=None,
        help="Restrict the payment page to this brand (repeatable)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(message)s")

    products = [
        ProductLineItem(title="Book", price=50.0, qty=2),
        ProductLineItem(title="Pen", price=7.0, qty=10),
    ]
    amount = sum(product.price * product.qty for product in products)

    try:
        client = create_merchant_client(
            env_file=args.env_file,
            overrides=dict(args.set or ()),
        )
        invoice = client.add_invoice(
            amount=amount,
            client_mobile=args.client_mobile,
            client_name=args.client_name,
            order_number=args.order_number,
            products=products,
            callback_url=args.callback_url,
            options=InvoiceOptions(supported_card_brands=args.card_brand or ()),
        )
    except PaylinkError as exc:
        logging.error("Invoice creation failed: %s", exc)
        return 1

    logging.info("Invoice %s is %s", invoice.transaction_no, invoice.order_status)
    logging.info("Payment page: %s", invoice.url or client.payment_page_url(invoice.transaction_no))
    return 0


if __name__ == "__main__":
    sys.exit(main())
