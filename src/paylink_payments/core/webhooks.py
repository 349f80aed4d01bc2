"""
Typed views of the two payloads Paylink posts to merchant webhooks.

Receiving the HTTP request is up to the host application. Its endpoint must
answer with :data:`WEBHOOK_ACK_STATUS`; any other status makes the gateway
redeliver, up to :data:`WEBHOOK_MAX_RETRIES` times.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

__all__ = [
    "ActivationStatus",
    "PaymentStatus",
    "WEBHOOK_ACK_STATUS",
    "WEBHOOK_MAX_RETRIES",
]

WEBHOOK_ACK_STATUS = 200
WEBHOOK_MAX_RETRIES = 10


@dataclass(frozen=True)
class ActivationStatus:
    """Merchant activation notification sent to partners."""

    profile_no: Optional[str]
    email: Optional[str]
    mobile: Optional[str]
    civil_id: Optional[str]
    license_type: Optional[str]
    license_name: Optional[str]
    license_number: Optional[str]
    status: Optional[str]
    error_msg: Optional[str]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ActivationStatus":
        return cls(
            profile_no=payload.get("profileNo"),
            email=payload.get("email"),
            mobile=payload.get("mobile"),
            civil_id=payload.get("civilId"),
            license_type=payload.get("licenseType"),
            license_name=payload.get("licenseName"),
            license_number=payload.get("licenseNumber"),
            status=payload.get("status"),
            error_msg=payload.get("errorMsg"),
        )


@dataclass(frozen=True)
class PaymentStatus:
    amount: Any
    mobile: Optional[str]
    merchant_email: Optional[str]
    transaction_no: Optional[str]
    merchant_order_number: Optional[str]
    order_status: Optional[str]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PaymentStatus":
        return cls(
            amount=payload.get("amount"),
            mobile=payload.get("mobile"),
            merchant_email=payload.get("merchantEmail"),
            transaction_no=payload.get("transactionNo"),
            merchant_order_number=payload.get("merchantOrderNumber"),
            order_status=payload.get("orderStatus"),
        )
