"""
Helpers for constructing the JSON payloads sent to the Paylink gateway.

Every builder validates its input completely before returning, so a bad
product or option never results in a partially-sent request.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from .errors import InvalidArgumentError
from .models import CardDetails, InvoiceOptions, ProductLineItem, _to_decimal

__all__ = [
    "RECURRING_TYPES",
    "VALID_CARD_BRANDS",
    "build_card_payment_body",
    "build_invoice_body",
    "build_recurring_payment_body",
    "filter_card_brands",
    "serialize_products",
]

VALID_CARD_BRANDS = ("mada", "visaMastercard", "amex", "tabby", "tamara", "stcpay", "urpay")

RECURRING_TYPES = ("Custom", "Daily", "Weekly", "Monthly")

MAX_RECURRING_INTERVAL_DAYS = 180
MAX_RECURRING_RETRY_COUNT = 5


def filter_card_brands(brands: Optional[Iterable[Any]]) -> List[str]:
    """Keep only recognised brand names, in their original order."""
    if not brands:
        return []
    return [brand for brand in brands if isinstance(brand, str) and brand in VALID_CARD_BRANDS]


def serialize_products(products: Sequence[Any]) -> List[Dict[str, Any]]:
    if products is None:
        return []
    serialized: List[Dict[str, Any]] = []
    for index, product in enumerate(products):
        if not isinstance(product, ProductLineItem):
            raise InvalidArgumentError(
                f"Invalid product type at index {index}: each product must be a "
                f"ProductLineItem, got {type(product).__name__}"
            )
        serialized.append(product.to_dict())
    return serialized


def _positive_amount(value: Any, field_name: str) -> float:
    amount = _to_decimal(value, field_name)
    if amount <= 0:
        raise InvalidArgumentError(f"{field_name} must be greater than zero")
    return float(amount)


def build_invoice_body(
    *,
    amount: Any,
    client_mobile: str,
    client_name: str,
    order_number: str,
    products: Sequence[ProductLineItem],
    callback_url: str,
    options: Optional[InvoiceOptions] = None,
) -> Dict[str, Any]:
    """Build the ``/api/addInvoice`` request body."""
    options = options or InvoiceOptions()
    return {
        "amount": _positive_amount(amount, "amount"),
        "callBackUrl": callback_url,
        "cancelUrl": options.cancel_url,
        "clientEmail": options.client_email,
        "clientMobile": client_mobile,
        "currency": options.currency,
        "clientName": client_name,
        "note": options.note,
        "orderNumber": order_number,
        "products": serialize_products(products),
        "smsMessage": options.sms_message,
        "supportedCardBrands": filter_card_brands(options.supported_card_brands),
        "displayPending": options.display_pending,
    }


def build_card_payment_body(
    *,
    amount: Any,
    client_mobile: str,
    client_name: str,
    order_number: str,
    products: Sequence[ProductLineItem],
    card: CardDetails,
    callback_url: str,
    options: Optional[InvoiceOptions] = None,
) -> Dict[str, Any]:
    """Build the ``/api/payInvoice`` request body, card data nested under ``card``."""
    if not isinstance(card, CardDetails):
        raise InvalidArgumentError("card must be a CardDetails instance")
    body = build_invoice_body(
        amount=amount,
        client_mobile=client_mobile,
        client_name=client_name,
        order_number=order_number,
        products=products,
        callback_url=callback_url,
        options=options,
    )
    body["card"] = card.to_dict()
    return body


def _integer(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidArgumentError(f"{field_name} must be an integer, got {value!r}")


def build_recurring_payment_body(
    *,
    payment_value: Any,
    customer_name: str,
    customer_mobile: str,
    recurring_type: str,
    recurring_interval_days: Any,
    recurring_iterations: Any,
    recurring_retry_count: Any,
    callback_url: str,
    currency_code: Optional[str] = None,
    customer_email: Optional[str] = None,
    payment_note: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the ``/api/registerPayment`` request body.

    ``recurring_interval_days`` is only range-checked for ``Custom``
    schedules; the gateway ignores it for the fixed ones.
    """
    value = _positive_amount(payment_value, "payment_value")

    if recurring_type not in RECURRING_TYPES:
        raise InvalidArgumentError(
            f"recurring_type must be one of {', '.join(RECURRING_TYPES)}, got {recurring_type!r}"
        )

    interval_days = _integer(recurring_interval_days, "recurring_interval_days")
    if recurring_type == "Custom" and not 1 <= interval_days <= MAX_RECURRING_INTERVAL_DAYS:
        raise InvalidArgumentError(
            f"recurring_interval_days must be between 1 and {MAX_RECURRING_INTERVAL_DAYS}"
        )

    iterations = _integer(recurring_iterations, "recurring_iterations")
    if iterations < 0:
        raise InvalidArgumentError("recurring_iterations must not be negative")

    retry_count = _integer(recurring_retry_count, "recurring_retry_count")
    if not 0 <= retry_count <= MAX_RECURRING_RETRY_COUNT:
        raise InvalidArgumentError(
            f"recurring_retry_count must be between 0 and {MAX_RECURRING_RETRY_COUNT}"
        )

    return {
        "payment": {
            "value": value,
            "currencyCode": currency_code,
            "paymentNote": payment_note,
        },
        "customer": {
            "name": customer_name,
            "mobile": customer_mobile,
            "email": customer_email,
        },
        "urls": {
            "callback": callback_url,
        },
        "recurring": {
            "type": recurring_type,
            "intervalDays": interval_days,
            "iterations": iterations,
            "retryCount": retry_count,
        },
    }
