"""
HTTP clients for the Paylink merchant and partner APIs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union
from urllib.parse import quote

import requests

from .config import (
    DEFAULT_TIMEOUT_SECONDS,
    Actor,
    ClientSettings,
    Environment,
    EnvironmentConfig,
    GatewayCredentials,
)
from .errors import (
    ConfigurationError,
    EnvironmentRestrictionError,
    GatewayRequestError,
    InvalidArgumentError,
)
from .models import (
    CardDetails,
    InvoiceOptions,
    InvoiceResult,
    ProductLineItem,
    RecurringPaymentResult,
)
from .payloads import (
    build_card_payment_body,
    build_invoice_body,
    build_recurring_payment_body,
)
from .responses import (
    handle_response_error,
    is_empty,
    is_success_status,
    response_json,
)
from .session import JSON_HEADERS, AuthSession

__all__ = [
    "ApiClient",
    "MERCHANT_SEARCH_TYPES",
    "MerchantClient",
    "PartnerClient",
    "handle_response_error",
]

MERCHANT_SEARCH_TYPES = ("cr", "freelancer", "mobile", "email", "accountNo")

_UNAUTHORIZED_STATUSES = (401, 403)

_UNREADABLE_REPLY_ERRORS = (TypeError, ValueError, AttributeError)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class ApiClient:
    """
    Shared request machinery: authenticate, send, interpret.

    An instance owns one :class:`AuthSession`. It is meant to be used by one
    logical session at a time; the token cache itself is lock-protected.
    """

    actor: Actor = Actor.MERCHANT

    def __init__(
        self,
        config: EnvironmentConfig,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if config.actor is not self.actor:
            raise ConfigurationError(
                f"{type(self).__name__} needs {self.actor.value} credentials, "
                f"got {config.actor.value}"
            )
        self.config = config
        self.session = session or requests.Session()
        self.timeout = timeout
        self.auth = AuthSession(config, session=self.session, timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        session: Optional[requests.Session] = None,
    ) -> "ApiClient":
        return cls(settings.resolve(), session=session, timeout=settings.timeout_seconds)

    @property
    def environment(self) -> Environment:
        return self.config.environment

    def _request(
        self,
        method: str,
        path: str,
        default_error: str,
        *,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        token = self.auth.ensure_token()
        url = self.config.url(path)
        headers = dict(JSON_HEADERS)
        headers["Authorization"] = f"Bearer {token}"

        logging.info("Sending %s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                json=body,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise GatewayRequestError(f"Request to {url} timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise GatewayRequestError(f"Request to {url} failed: {exc}") from exc

        if response.status_code in _UNAUTHORIZED_STATUSES:
            self.auth.invalidate(token)
        if not is_success_status(response.status_code):
            handle_response_error(response, default_error)
        return response

    def _call(
        self,
        method: str,
        path: str,
        default_error: str,
        *,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        allow_empty: bool = False,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        With ``allow_empty`` unset the body must be a non-empty JSON object;
        otherwise any JSON value, including an empty list, is accepted.
        ``parse`` turns the body into a typed result; a body it cannot read
        raises :class:`GatewayRequestError` like any other failed reply.
        """
        response = self._request(method, path, default_error, body=body, params=params)
        payload = response_json(response)
        if payload is None:
            handle_response_error(response, default_error)
        if not allow_empty and (is_empty(payload) or not isinstance(payload, dict)):
            handle_response_error(response, default_error)
        if parse is None:
            return payload
        try:
            return parse(payload)
        except _UNREADABLE_REPLY_ERRORS as exc:
            logging.warning("Unreadable Paylink reply to %s %s: %s", method, path, exc)
            handle_response_error(response, default_error)


class MerchantClient(ApiClient):
    """
    Merchant operations: invoices, direct card payments, recurring payments
    and digital product delivery.
    """

    actor = Actor.MERCHANT

    @classmethod
    def create(
        cls,
        environment: Union[Environment, str, None] = None,
        api_id: Optional[str] = None,
        secret_key: Optional[str] = None,
        *,
        persist_token: bool = False,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> "MerchantClient":
        credentials = GatewayCredentials.merchant(api_id, secret_key, persist_token=persist_token)
        config = EnvironmentConfig.resolve(environment, credentials)
        return cls(config, session=session, timeout=timeout)

    @classmethod
    def test(cls, api_id: Optional[str] = None, secret_key: Optional[str] = None, **kwargs: Any) -> "MerchantClient":
        return cls.create(Environment.TEST, api_id, secret_key, **kwargs)

    @classmethod
    def production(cls, api_id: Optional[str], secret_key: Optional[str], **kwargs: Any) -> "MerchantClient":
        return cls.create(Environment.PRODUCTION, api_id, secret_key, **kwargs)

    def payment_page_url(self, transaction_no: str) -> str:
        return self.config.payment_page_url(transaction_no)

    def add_invoice(
        self,
        amount: Any,
        client_mobile: str,
        client_name: str,
        order_number: str,
        products: Sequence[ProductLineItem],
        callback_url: str,
        options: Optional[InvoiceOptions] = None,
    ) -> InvoiceResult:
        """
        Create an invoice and return the gateway's view of it.

        The buyer pays ``amount`` regardless of the product prices. Unknown
        entries in ``options.supported_card_brands`` are dropped.
        """
        body = build_invoice_body(
            amount=amount,
            client_mobile=client_mobile,
            client_name=client_name,
            order_number=order_number,
            products=products,
            callback_url=callback_url,
            options=options,
        )
        result = self._call(
            "POST",
            "/api/addInvoice",
            "Failed to add the invoice",
            body=body,
            parse=InvoiceResult.from_response,
        )
        logging.info(
            "Paylink invoice %s created for order %s (%s)",
            result.transaction_no,
            order_number,
            result.order_status,
        )
        return result

    def get_invoice(self, transaction_no: str) -> InvoiceResult:
        return self._call(
            "GET",
            f"/api/getInvoice/{_segment(transaction_no)}",
            "Failed to get the invoice",
            parse=InvoiceResult.from_response,
        )

    def cancel_invoice(self, transaction_no: str) -> bool:
        """
        Cancel a pending invoice.

        Only the literal string ``"true"`` in the reply's ``success`` field
        counts as a successful cancellation.
        """
        default_error = "Failed to cancel the invoice"
        response = self._request(
            "POST",
            "/api/cancelInvoice",
            default_error,
            body={"transactionNo": transaction_no},
        )
        payload = response_json(response)
        if not isinstance(payload, dict) or not payload.get("success"):
            handle_response_error(response, default_error)
        return payload["success"] == "true"

    def process_payment_with_card_info(
        self,
        amount: Any,
        client_mobile: str,
        client_name: str,
        order_number: str,
        products: Sequence[ProductLineItem],
        card: CardDetails,
        callback_url: str,
        options: Optional[InvoiceOptions] = None,
    ) -> InvoiceResult:
        """
        Create an invoice and charge the given card in one call.

        Card data goes to the gateway as-is; format checks are the
        gateway's job.
        """
        body = build_card_payment_body(
            amount=amount,
            client_mobile=client_mobile,
            client_name=client_name,
            order_number=order_number,
            products=products,
            card=card,
            callback_url=callback_url,
            options=options,
        )
        return self._call(
            "POST",
            "/api/payInvoice",
            "Failed to process the payment for this direct invoice",
            body=body,
            parse=InvoiceResult.from_response,
        )

    def recurring_payment(
        self,
        payment_value: Any,
        customer_name: str,
        customer_mobile: str,
        recurring_type: str,
        recurring_interval_days: int,
        recurring_iterations: int,
        recurring_retry_count: int,
        callback_url: str,
        currency_code: Optional[str] = None,
        customer_email: Optional[str] = None,
        payment_note: Optional[str] = None,
    ) -> RecurringPaymentResult:
        """
        Register a recurring charge schedule.

        ``recurring_iterations=0`` means unbounded. A reply whose
        ``response.isSuccess`` is false is returned, not raised.
        """
        body = build_recurring_payment_body(
            payment_value=payment_value,
            customer_name=customer_name,
            customer_mobile=customer_mobile,
            recurring_type=recurring_type,
            recurring_interval_days=recurring_interval_days,
            recurring_iterations=recurring_iterations,
            recurring_retry_count=recurring_retry_count,
            callback_url=callback_url,
            currency_code=currency_code,
            customer_email=customer_email,
            payment_note=payment_note,
        )
        return self._call(
            "POST",
            "/api/registerPayment",
            "Failed to add this recurring payment",
            body=body,
            parse=RecurringPaymentResult.from_response,
        )

    def send_digital_product(self, message: str, order_number: str) -> Dict[str, Any]:
        return self._call(
            "POST",
            "/api/sendDigitalProduct",
            "Failed to send the digital product",
            body={"message": message, "orderNumber": order_number},
        )


class PartnerClient(ApiClient):
    """
    Partner operations: merchant lookup, sandbox archival and the four-step
    merchant onboarding (check license, validate mobile, add info, confirm
    with Nafath). Each onboarding step takes the ``signature`` and
    ``session_uuid`` returned by the previous one.
    """

    actor = Actor.PARTNER

    @classmethod
    def create(
        cls,
        environment: Union[Environment, str, None],
        profile_no: Optional[str],
        api_key: Optional[str],
        *,
        persist_token: bool = False,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> "PartnerClient":
        credentials = GatewayCredentials.partner(profile_no, api_key, persist_token=persist_token)
        config = EnvironmentConfig.resolve(environment, credentials)
        return cls(config, session=session, timeout=timeout)

    @classmethod
    def test(cls, profile_no: Optional[str], api_key: Optional[str], **kwargs: Any) -> "PartnerClient":
        return cls.create(Environment.TEST, profile_no, api_key, **kwargs)

    @classmethod
    def production(cls, profile_no: Optional[str], api_key: Optional[str], **kwargs: Any) -> "PartnerClient":
        return cls.create(Environment.PRODUCTION, profile_no, api_key, **kwargs)

    def get_my_merchants(self) -> Any:
        return self._call(
            "GET",
            "/rest/partner/getMyMerchants",
            "Failed to get your merchants",
            allow_empty=True,
        )

    def get_merchant_keys(self, search_type: str, search_value: str, profile_no: str) -> Any:
        if search_type not in MERCHANT_SEARCH_TYPES:
            raise InvalidArgumentError(
                f"search_type must be one of {', '.join(MERCHANT_SEARCH_TYPES)}, got {search_type!r}"
            )
        return self._call(
            "GET",
            f"/rest/partner/getMerchantKeys/{_segment(search_type)}/{_segment(search_value)}",
            "Failed to retrieve API credentials of the merchant",
            params={"profileNo": profile_no},
            allow_empty=True,
        )

    def archive_merchant(self, key: str, key_type: str, partner_profile_no: str) -> Any:
        """Archive a sandbox merchant. Refused outright in production."""
        if self.config.is_production:
            raise EnvironmentRestrictionError(
                "archive_merchant is only available in the test environment"
            )
        return self._call(
            "POST",
            f"/rest/partner/test/archive-merchant/{_segment(partner_profile_no)}",
            "Failed to archive this merchant",
            body={"keyType": key_type, "key": key},
            allow_empty=True,
        )

    def check_license(
        self,
        registration_type: str,
        license_number: str,
        mobile_number: str,
        hijri_year: str,
        hijri_month: str,
        hijri_day: str,
        partner_profile_no: str,
    ) -> Any:
        return self._call(
            "POST",
            "/api/partner/register/check-license",
            "Failed to check license",
            body={
                "registrationType": registration_type,
                "licenseNumber": license_number,
                "mobileNumber": mobile_number,
                "hijriYear": hijri_year,
                "hijriMonth": hijri_month,
                "hijriDay": hijri_day,
                "partnerProfileNo": partner_profile_no,
            },
            allow_empty=True,
        )

    def validate_mobile(
        self,
        signature: str,
        session_uuid: str,
        mobile: str,
        otp: str,
        partner_profile_no: str,
    ) -> Any:
        return self._call(
            "POST",
            "/api/partner/register/validate-otp",
            "Failed to validate mobile",
            body={
                "signature": signature,
                "sessionUuid": session_uuid,
                "mobile": mobile,
                "otp": otp,
                "partnerProfileNo": partner_profile_no,
            },
            allow_empty=True,
        )

    def add_info(
        self,
        signature: str,
        session_uuid: str,
        mobile: str,
        partner_profile_no: str,
        iban: str,
        bank_name: str,
        category_description: str,
        sales_volume: str,
        selling_scope: str,
        national_id: str,
        license_name: str,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
    ) -> Any:
        return self._call(
            "POST",
            "/api/partner/register/add-info",
            "Failed to add information",
            body={
                "signature": signature,
                "sessionUuid": session_uuid,
                "mobile": mobile,
                "partnerProfileNo": partner_profile_no,
                "iban": iban,
                "bankName": bank_name,
                "categoryDescription": category_description,
                "salesVolume": sales_volume,
                "sellingScope": selling_scope,
                "nationalId": national_id,
                "licenseName": license_name,
                "email": email,
                "firstName": first_name,
                "lastName": last_name,
                "password": password,
            },
            allow_empty=True,
        )

    def confirming_with_nafath(
        self,
        signature: str,
        session_uuid: str,
        mobile: str,
        partner_profile_no: str,
    ) -> Any:
        return self._call(
            "POST",
            "/api/partner/register/confirm-account",
            "Failed to confirm with Nafath",
            body={
                "signature": signature,
                "sessionUuid": session_uuid,
                "mobile": mobile,
                "partnerProfileNo": partner_profile_no,
            },
            allow_empty=True,
        )
