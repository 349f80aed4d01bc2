"""
Value objects exchanged with the Paylink gateway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .errors import InvalidArgumentError

__all__ = [
    "CardDetails",
    "GatewayOrderRequest",
    "InvoiceOptions",
    "InvoiceResult",
    "ProductLineItem",
    "RecurringInvoiceDetails",
    "RecurringPaymentResult",
    "RecurringResponse",
]

Number = Union[Decimal, float, int, str]
Accessor = Union[str, Callable[[Any], Any]]

_FIELD_NAMES = (
    "title",
    "price",
    "qty",
    "description",
    "is_digital",
    "image_src",
    "specific_vat",
    "product_cost",
)
_REQUIRED_FIELDS = ("title", "price", "qty")
_WIRE_TO_FIELD = {
    "isDigital": "is_digital",
    "imageSrc": "image_src",
    "specificVat": "specific_vat",
    "productCost": "product_cost",
}


def _to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{field_name} must be a number, got {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidArgumentError(
            f"{field_name} must be a valid decimal number, got {value!r}"
        ) from exc
    if not result.is_finite():
        raise InvalidArgumentError(f"{field_name} must be finite, got {value!r}")
    return result


def _wire_number(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _as_float(value: Any) -> float:
    return 0.0 if value is None else float(value)


@dataclass(frozen=True)
class ProductLineItem:
    """
    One purchasable line on an invoice.

    ``price``, ``specific_vat`` and ``product_cost`` are normalised to
    :class:`~decimal.Decimal`; the wire form sends them as JSON numbers.
    """

    title: str
    price: Decimal
    qty: int
    description: Optional[str] = None
    is_digital: bool = False
    image_src: Optional[str] = None
    specific_vat: Optional[Decimal] = None
    product_cost: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise InvalidArgumentError("Product title must be a non-empty string")

        price = _to_decimal(self.price, "price")
        if price < 0:
            raise InvalidArgumentError("Product price must not be negative")
        object.__setattr__(self, "price", price)

        if isinstance(self.qty, bool) or not isinstance(self.qty, int):
            raise InvalidArgumentError(f"Product qty must be an integer, got {self.qty!r}")
        if self.qty < 0:
            raise InvalidArgumentError("Product qty must not be negative")

        for name in ("specific_vat", "product_cost"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _to_decimal(value, name))

        object.__setattr__(self, "is_digital", _as_bool(self.is_digital))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "price": float(self.price),
            "qty": self.qty,
            "description": self.description,
            "isDigital": self.is_digital,
            "imageSrc": self.image_src,
            "specificVat": _wire_number(self.specific_vat),
            "productCost": _wire_number(self.product_cost),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProductLineItem":
        return cls(
            title=data.get("title"),
            price=data.get("price", 0),
            qty=data.get("qty", 0),
            description=data.get("description"),
            is_digital=_as_bool(data.get("isDigital")),
            image_src=data.get("imageSrc"),
            specific_vat=data.get("specificVat"),
            product_cost=data.get("productCost"),
        )

    @classmethod
    def from_items(
        cls,
        items: Iterable[Any],
        key_map: Mapping[str, Accessor],
    ) -> List["ProductLineItem"]:
        """
        Build line items from arbitrary caller records.

        ``key_map`` maps a line-item field (``title``, ``price``, ``qty``,
        ``description``, ``is_digital``, ``image_src``, ``specific_vat``,
        ``product_cost``; the camelCase wire names are accepted too) to either
        the key holding that value in each item mapping, or a callable that
        extracts it from the item::

            ProductLineItem.from_items(
                cart,
                {"title": "name", "price": "amount", "qty": lambda row: row["n"]},
            )

        ``title``, ``price`` and ``qty`` must be mapped.
        """
        accessors: Dict[str, Accessor] = {}
        for name, accessor in key_map.items():
            field_name = _WIRE_TO_FIELD.get(name, name)
            if field_name not in _FIELD_NAMES:
                raise InvalidArgumentError(f"Unknown product field '{name}' in key map")
            accessors[field_name] = accessor

        missing = [name for name in _REQUIRED_FIELDS if name not in accessors]
        if missing:
            raise InvalidArgumentError(
                f"Key map is missing the required field(s): {', '.join(missing)}"
            )

        products: List[ProductLineItem] = []
        for index, item in enumerate(items):
            values: Dict[str, Any] = {}
            for field_name, accessor in accessors.items():
                if callable(accessor):
                    values[field_name] = accessor(item)
                    continue
                if not isinstance(item, Mapping):
                    raise InvalidArgumentError(f"Item at index {index} is not a mapping")
                if accessor not in item:
                    if field_name in _REQUIRED_FIELDS:
                        raise InvalidArgumentError(
                            f"Item at index {index} is missing the required key "
                            f"'{accessor}' ({field_name})"
                        )
                    continue
                values[field_name] = item[accessor]
            try:
                products.append(cls(**values))
            except InvalidArgumentError as exc:
                raise InvalidArgumentError(f"Item at index {index}: {exc.message}") from exc
        return products


@dataclass(frozen=True)
class InvoiceOptions:
    """Optional invoice fields and their gateway defaults."""

    cancel_url: Optional[str] = None
    client_email: Optional[str] = None
    currency: Optional[str] = "SAR"
    note: Optional[str] = None
    sms_message: Optional[str] = None
    supported_card_brands: Sequence[Any] = ()
    display_pending: bool = True


@dataclass(frozen=True)
class CardDetails:
    """
    Raw cardholder data for direct payments.

    Values are forwarded to the gateway untouched; the representation never
    shows the full number or the security code.
    """

    number: str
    security_code: str
    expiry_month: str
    expiry_year: str

    def __repr__(self) -> str:
        tail = str(self.number)[-4:]
        return f"CardDetails(number='****{tail}', expiry='{self.expiry_month}/{self.expiry_year}')"

    __str__ = __repr__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expiry": {
                "month": self.expiry_month,
                "year": self.expiry_year,
            },
            "number": self.number,
            "securityCode": self.security_code,
        }


@dataclass(frozen=True)
class GatewayOrderRequest:
    """The order request as echoed back by the gateway."""

    amount: float = 0.0
    order_number: str = ""
    callback_url: str = ""
    client_email: str = ""
    client_name: str = ""
    client_mobile: str = ""
    note: str = ""
    cancel_url: str = ""
    products: Tuple[Mapping[str, Any], ...] = ()
    supported_card_brands: Tuple[str, ...] = ()
    currency: str = ""
    sms_message: str = ""
    display_pending: bool = True
    receivers: Any = None
    partner_portion: Any = None
    metadata: Any = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "GatewayOrderRequest":
        if not isinstance(data, Mapping):
            data = {}
        products = tuple(
            dict(product) for product in data.get("products") or () if isinstance(product, Mapping)
        )
        return cls(
            amount=_as_float(data.get("amount")),
            order_number=_as_text(data.get("orderNumber")),
            callback_url=_as_text(data.get("callBackUrl")),
            client_email=_as_text(data.get("clientEmail")),
            client_name=_as_text(data.get("clientName")),
            client_mobile=_as_text(data.get("clientMobile")),
            note=_as_text(data.get("note")),
            cancel_url=_as_text(data.get("cancelUrl")),
            products=products,
            supported_card_brands=tuple(data.get("supportedCardBrands") or ()),
            currency=_as_text(data.get("currency")),
            sms_message=_as_text(data.get("smsMessage")),
            display_pending=_as_bool(data.get("displayPending"), default=True),
            receivers=data.get("receivers"),
            partner_portion=data.get("partnerPortion"),
            metadata=data.get("metadata"),
        )


@dataclass(frozen=True)
class InvoiceResult:
    gateway_order_request: GatewayOrderRequest
    amount: float
    transaction_no: str
    order_status: str
    payment_errors: Optional[List[Any]]
    url: str
    qr_url: str
    mobile_url: str
    check_url: str
    success: bool
    digital_order: bool
    foreign_currency_rate: Any = None
    payment_receipt: Any = None
    metadata: Any = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "InvoiceResult":
        return cls(
            gateway_order_request=GatewayOrderRequest.from_dict(payload.get("gatewayOrderRequest")),
            amount=_as_float(payload.get("amount")),
            transaction_no=_as_text(payload.get("transactionNo")),
            order_status=_as_text(payload.get("orderStatus")),
            payment_errors=payload.get("paymentErrors"),
            url=_as_text(payload.get("url")),
            qr_url=_as_text(payload.get("qrUrl")),
            mobile_url=_as_text(payload.get("mobileUrl")),
            check_url=_as_text(payload.get("checkUrl")),
            success=_as_bool(payload.get("success")),
            digital_order=_as_bool(payload.get("digitalOrder")),
            foreign_currency_rate=payload.get("foreignCurrencyRate"),
            payment_receipt=payload.get("paymentReceipt"),
            metadata=payload.get("metadata"),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class RecurringResponse:
    is_success: bool
    message: Optional[str]
    validation_errors: Any

    def as_dict(self) -> Dict[str, Any]:
        return {
            "isSuccess": self.is_success,
            "message": self.message,
            "validationErrors": self.validation_errors,
        }


@dataclass(frozen=True)
class RecurringInvoiceDetails:
    payment_url: Optional[str]
    customer_reference: Optional[str]
    user_defined_field: Any
    recurring_id: Optional[str]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "paymentUrl": self.payment_url,
            "customerReference": self.customer_reference,
            "userDefinedField": self.user_defined_field,
            "recurringId": self.recurring_id,
        }


@dataclass(frozen=True)
class RecurringPaymentResult:
    """
    Outcome of a recurring payment registration.

    A gateway reply with ``isSuccess: false`` is still a result; callers
    inspect :attr:`is_success` rather than catching an exception.
    """

    response: Optional[RecurringResponse]
    invoice_details: Optional[RecurringInvoiceDetails]
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_success(self) -> bool:
        return self.response is not None and self.response.is_success

    def as_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.response is not None:
            result["response"] = self.response.as_dict()
        if self.invoice_details is not None:
            result["invoiceDetails"] = self.invoice_details.as_dict()
        return result

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> "RecurringPaymentResult":
        response = None
        block = payload.get("response")
        if isinstance(block, Mapping) and block:
            response = RecurringResponse(
                is_success=_as_bool(block.get("isSuccess")),
                message=block.get("message"),
                validation_errors=block.get("validationErrors"),
            )

        invoice_details = None
        block = payload.get("invoiceDetails")
        if isinstance(block, Mapping) and block:
            invoice_details = RecurringInvoiceDetails(
                payment_url=block.get("paymentUrl"),
                customer_reference=block.get("customerReference"),
                user_defined_field=block.get("userDefinedField"),
                recurring_id=block.get("recurringId"),
            )

        return cls(response=response, invoice_details=invoice_details, raw=dict(payload))
