"""
Core primitives for talking to the Paylink gateway.
"""

from .client import (
    MERCHANT_SEARCH_TYPES,
    ApiClient,
    MerchantClient,
    PartnerClient,
)
from .config import (
    Actor,
    ClientSettings,
    Environment,
    EnvironmentConfig,
    GatewayCredentials,
    load_client_settings,
)
from .environment import SettingsEnvironment, build_environment
from .errors import (
    AuthenticationError,
    ConfigurationError,
    EnvironmentRestrictionError,
    GatewayRequestError,
    InvalidArgumentError,
    PaylinkError,
)
from .models import (
    CardDetails,
    GatewayOrderRequest,
    InvoiceOptions,
    InvoiceResult,
    ProductLineItem,
    RecurringInvoiceDetails,
    RecurringPaymentResult,
    RecurringResponse,
)
from .payloads import (
    RECURRING_TYPES,
    VALID_CARD_BRANDS,
    build_card_payment_body,
    build_invoice_body,
    build_recurring_payment_body,
    filter_card_brands,
)
from .responses import handle_response_error
from .session import AuthSession
from .webhooks import (
    WEBHOOK_ACK_STATUS,
    WEBHOOK_MAX_RETRIES,
    ActivationStatus,
    PaymentStatus,
)

__all__ = [
    "MERCHANT_SEARCH_TYPES",
    "RECURRING_TYPES",
    "VALID_CARD_BRANDS",
    "WEBHOOK_ACK_STATUS",
    "WEBHOOK_MAX_RETRIES",
    "ActivationStatus",
    "Actor",
    "ApiClient",
    "AuthSession",
    "AuthenticationError",
    "CardDetails",
    "ClientSettings",
    "ConfigurationError",
    "Environment",
    "EnvironmentConfig",
    "EnvironmentRestrictionError",
    "GatewayCredentials",
    "GatewayOrderRequest",
    "GatewayRequestError",
    "InvalidArgumentError",
    "InvoiceOptions",
    "InvoiceResult",
    "MerchantClient",
    "PartnerClient",
    "PaylinkError",
    "PaymentStatus",
    "ProductLineItem",
    "RecurringInvoiceDetails",
    "RecurringPaymentResult",
    "RecurringResponse",
    "SettingsEnvironment",
    "build_card_payment_body",
    "build_environment",
    "build_invoice_body",
    "build_recurring_payment_body",
    "filter_card_brands",
    "handle_response_error",
    "load_client_settings",
]
