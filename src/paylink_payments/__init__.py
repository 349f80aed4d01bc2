"""
Public facade for the Paylink payments client package.

The most useful pieces are re-exported here so integrators can
``from paylink_payments import ...`` without navigating the package.
"""

from .api import create_merchant_client, create_partner_client
from .core import (
    RECURRING_TYPES,
    VALID_CARD_BRANDS,
    ActivationStatus,
    ApiClient,
    AuthenticationError,
    AuthSession,
    CardDetails,
    ClientSettings,
    ConfigurationError,
    Environment,
    EnvironmentConfig,
    EnvironmentRestrictionError,
    GatewayCredentials,
    GatewayOrderRequest,
    GatewayRequestError,
    InvalidArgumentError,
    InvoiceOptions,
    InvoiceResult,
    MerchantClient,
    PartnerClient,
    PaylinkError,
    PaymentStatus,
    ProductLineItem,
    RecurringPaymentResult,
    filter_card_brands,
    load_client_settings,
)

__all__ = (
    "RECURRING_TYPES",
    "VALID_CARD_BRANDS",
    "ActivationStatus",
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
    "RecurringPaymentResult",
    "create_merchant_client",
    "create_partner_client",
    "filter_card_brands",
    "load_client_settings",
)
