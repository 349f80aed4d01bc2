"""
Environment resolution and settings loading for Paylink clients.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .environment import build_environment
from .errors import ConfigurationError

__all__ = [
    "Actor",
    "ClientSettings",
    "Environment",
    "EnvironmentConfig",
    "GatewayCredentials",
    "load_client_settings",
]

PRODUCTION_API_URL = "https://restapi.paylink.sa"
TEST_API_URL = "https://restpilot.paylink.sa"

PRODUCTION_PAYMENT_PAGE_URL = "https://payment.paylink.sa/pay/order"
TEST_PAYMENT_PAGE_URL = "https://paymentpilot.paylink.sa/pay/info"

# Public sandbox merchant published by Paylink for integration testing.
DEFAULT_TEST_API_ID = "APP_ID_1123453311"
DEFAULT_TEST_SECRET_KEY = "0662abb5-13c7-38ab-cd12-236e58f43766"

DEFAULT_TIMEOUT_SECONDS = 30.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class Environment(str, Enum):
    TEST = "test"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: Union["Environment", str, None]) -> "Environment":
        """
        Map a free-text tag onto an environment.

        Only the literal ``"production"`` selects production. Anything else,
        including ``None``, selects the sandbox.
        """
        if isinstance(value, Environment):
            return value
        if value == cls.PRODUCTION.value:
            return cls.PRODUCTION
        return cls.TEST


class Actor(str, Enum):
    MERCHANT = "merchant"
    PARTNER = "partner"


_AUTH_PATHS = {
    Actor.MERCHANT: "/api/auth",
    Actor.PARTNER: "/api/partner/auth",
}

# (key id, secret, persist token) variable names per actor and environment.
_SETTINGS_ENV_KEYS: Dict[Tuple[Actor, Environment], Tuple[str, str, str]] = {
    (Actor.MERCHANT, Environment.TEST): (
        "PAYLINK_TESTING_APP_ID",
        "PAYLINK_TESTING_SECRET_KEY",
        "PAYLINK_TESTING_PERSIST_TOKEN",
    ),
    (Actor.MERCHANT, Environment.PRODUCTION): (
        "PAYLINK_PRODUCTION_APP_ID",
        "PAYLINK_PRODUCTION_SECRET_KEY",
        "PAYLINK_PRODUCTION_PERSIST_TOKEN",
    ),
    (Actor.PARTNER, Environment.TEST): (
        "PAYLINK_TESTING_PROFILE_NO",
        "PAYLINK_TESTING_API_KEY",
        "PAYLINK_TESTING_PERSIST_TOKEN",
    ),
    (Actor.PARTNER, Environment.PRODUCTION): (
        "PAYLINK_PRODUCTION_PROFILE_NO",
        "PAYLINK_PRODUCTION_API_KEY",
        "PAYLINK_PRODUCTION_PERSIST_TOKEN",
    ),
}


@dataclass(frozen=True)
class GatewayCredentials:
    """
    The credential pair one actor authenticates with.

    Merchants use ``apiId`` + ``secretKey``; partners use ``profileNo`` +
    ``apiKey``. ``persist_token`` is forwarded to the gateway unchanged.
    """

    actor: Actor = Actor.MERCHANT
    key_id: Optional[str] = None
    secret: Optional[str] = None
    persist_token: bool = False

    @classmethod
    def merchant(
        cls,
        api_id: Optional[str] = None,
        secret_key: Optional[str] = None,
        *,
        persist_token: bool = False,
    ) -> "GatewayCredentials":
        return cls(Actor.MERCHANT, api_id, secret_key, persist_token)

    @classmethod
    def partner(
        cls,
        profile_no: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        persist_token: bool = False,
    ) -> "GatewayCredentials":
        return cls(Actor.PARTNER, profile_no, api_key, persist_token)

    def __repr__(self) -> str:
        return (
            f"GatewayCredentials(actor={self.actor.value!r}, key_id={self.key_id!r}, "
            f"secret={'***' if self.secret else None}, persist_token={self.persist_token})"
        )


@dataclass(frozen=True)
class EnvironmentConfig:
    environment: Environment
    actor: Actor
    api_base_url: str
    payment_page_base_url: str
    key_id: str
    secret: str
    persist_token: bool = False

    @property
    def api_id(self) -> str:
        return self.key_id

    @property
    def secret_key(self) -> str:
        return self.secret

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    @property
    def auth_path(self) -> str:
        return _AUTH_PATHS[self.actor]

    def url(self, path: str) -> str:
        return f"{self.api_base_url}{path}"

    def payment_page_url(self, transaction_no: str) -> str:
        return f"{self.payment_page_base_url}/{transaction_no}"

    def authentication_body(self) -> Dict[str, Any]:
        if self.actor is Actor.PARTNER:
            return {
                "profileNo": self.key_id,
                "apiKey": self.secret,
                "persistToken": self.persist_token,
            }
        return {
            "apiId": self.key_id,
            "secretKey": self.secret,
            "persistToken": self.persist_token,
        }

    def __repr__(self) -> str:
        return (
            f"EnvironmentConfig(environment={self.environment.value!r}, "
            f"actor={self.actor.value!r}, api_base_url={self.api_base_url!r}, "
            f"key_id={self.key_id!r}, persist_token={self.persist_token})"
        )

    @classmethod
    def resolve(
        cls,
        environment: Union[Environment, str, None],
        credentials: Optional[GatewayCredentials] = None,
    ) -> "EnvironmentConfig":
        """
        Resolve base URLs and the credential pair for ``environment``.

        Production never falls back to the sandbox credentials: a missing key
        fails here, before any client exists. Merchant sandbox clients fill in
        whichever half of the pair the caller left unset.
        """
        env = Environment.parse(environment)
        creds = credentials if credentials is not None else GatewayCredentials()
        key_id, secret = creds.key_id, creds.secret

        if env is Environment.PRODUCTION:
            if key_id is None or secret is None:
                raise ConfigurationError(
                    f"missing credentials for production ({creds.actor.value})"
                )
            api_base_url = PRODUCTION_API_URL
            payment_page_base_url = PRODUCTION_PAYMENT_PAGE_URL
        else:
            if creds.actor is Actor.MERCHANT:
                key_id = DEFAULT_TEST_API_ID if key_id is None else key_id
                secret = DEFAULT_TEST_SECRET_KEY if secret is None else secret
            elif key_id is None or secret is None:
                raise ConfigurationError(
                    "profileNo and apiKey are required for partner clients"
                )
            api_base_url = TEST_API_URL
            payment_page_base_url = TEST_PAYMENT_PAGE_URL

        return cls(
            environment=env,
            actor=creds.actor,
            api_base_url=api_base_url,
            payment_page_base_url=payment_page_base_url,
            key_id=key_id,
            secret=secret,
            persist_token=creds.persist_token,
        )


def _parse_bool(raw: Optional[str], field_name: str) -> bool:
    if raw is None:
        return False
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{field_name} must be a boolean, got '{raw}'")


def _parse_timeout(raw: Union[float, int, str, None]) -> float:
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"PAYLINK_TIMEOUT_SECONDS must be a number, got '{raw}'"
        ) from exc
    if timeout <= 0:
        raise ConfigurationError("PAYLINK_TIMEOUT_SECONDS must be greater than zero")
    return timeout


@dataclass(frozen=True)
class ClientSettings:
    environment: Environment
    credentials: GatewayCredentials
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def resolve(self) -> EnvironmentConfig:
        return EnvironmentConfig.resolve(self.environment, self.credentials)


def load_client_settings(
    *,
    actor: Union[Actor, str] = Actor.MERCHANT,
    environment: Union[Environment, str, None] = None,
    key_id: Optional[str] = None,
    secret: Optional[str] = None,
    persist_token: Optional[bool] = None,
    timeout_seconds: Union[float, int, str, None] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
) -> ClientSettings:
    """
    Read client settings from ``PAYLINK_*`` variables.

    Explicit keyword arguments win over ``overrides``, which win over the
    ``.env`` file and ``base`` (``os.environ`` by default). The environment
    comes from ``environment`` or ``PAYLINK_ENVIRONMENT`` and defaults to
    the sandbox.
    """
    variables = build_environment(env_file=env_file, base=base, overrides=overrides)

    actor = Actor(actor)
    env = Environment.parse(
        environment if environment is not None else variables.get("PAYLINK_ENVIRONMENT")
    )
    id_key, secret_key, persist_key = _SETTINGS_ENV_KEYS[(actor, env)]

    if persist_token is None:
        persist_token = _parse_bool(variables.get(persist_key), persist_key)
    if timeout_seconds is None:
        timeout_seconds = variables.get("PAYLINK_TIMEOUT_SECONDS")

    credentials = GatewayCredentials(
        actor=actor,
        key_id=key_id if key_id is not None else variables.get(id_key),
        secret=secret if secret is not None else variables.get(secret_key),
        persist_token=persist_token,
    )
    return ClientSettings(
        environment=env,
        credentials=credentials,
        timeout_seconds=_parse_timeout(timeout_seconds),
    )
