"""
Public, high-level helpers for building Paylink clients.
"""

from __future__ import annotations

from typing import Mapping, Optional, Union

import requests

from .core.client import MerchantClient, PartnerClient
from .core.config import (
    Actor,
    ClientSettings,
    Environment,
    load_client_settings,
)

__all__ = [
    "create_merchant_client",
    "create_partner_client",
]


def _check_exclusive(settings: Optional[ClientSettings], extras: tuple) -> None:
    if settings is not None and any(item is not None and item != {} for item in extras):
        raise ValueError(
            "Provide either pre-built ClientSettings or individual parameters, not both."
        )


def create_merchant_client(
    *,
    settings: Optional[ClientSettings] = None,
    session: Optional[requests.Session] = None,
    environment: Union[Environment, str, None] = None,
    api_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    persist_token: Optional[bool] = None,
    timeout_seconds: Union[float, int, str, None] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
) -> MerchantClient:
    """
    Construct a :class:`MerchantClient`.

    Callers can either supply ready-made :class:`ClientSettings` or let the
    helper read them from ``PAYLINK_*`` variables, with keyword arguments
    taking precedence. Sandbox clients work with no configuration at all.
    """
    _check_exclusive(
        settings,
        (environment, api_id, secret_key, persist_token, timeout_seconds, overrides, base),
    )
    if settings is None:
        settings = load_client_settings(
            actor=Actor.MERCHANT,
            environment=environment,
            key_id=api_id,
            secret=secret_key,
            persist_token=persist_token,
            timeout_seconds=timeout_seconds,
            env_file=env_file,
            overrides=overrides,
            base=base,
        )
    return MerchantClient.from_settings(settings, session=session)


def create_partner_client(
    *,
    settings: Optional[ClientSettings] = None,
    session: Optional[requests.Session] = None,
    environment: Union[Environment, str, None] = None,
    profile_no: Optional[str] = None,
    api_key: Optional[str] = None,
    persist_token: Optional[bool] = None,
    timeout_seconds: Union[float, int, str, None] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
) -> PartnerClient:
    """
    Construct a :class:`PartnerClient`; see :func:`create_merchant_client`.

    Partner clients always need a profile number and API key.
    """
    _check_exclusive(
        settings,
        (environment, profile_no, api_key, persist_token, timeout_seconds, overrides, base),
    )
    if settings is None:
        settings = load_client_settings(
            actor=Actor.PARTNER,
            environment=environment,
            key_id=profile_no,
            secret=api_key,
            persist_token=persist_token,
            timeout_seconds=timeout_seconds,
            env_file=env_file,
            overrides=overrides,
            base=base,
        )
    return PartnerClient.from_settings(settings, session=session)
