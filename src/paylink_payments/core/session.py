"""
Bearer-token lifecycle for one Paylink client.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import requests

from .config import DEFAULT_TIMEOUT_SECONDS, EnvironmentConfig
from .errors import AuthenticationError
from .responses import extract_error_message, is_success_status, response_json

__all__ = ["AuthSession", "JSON_HEADERS"]

JSON_HEADERS = {
    "accept": "application/json",
    "content-type": "application/json",
}


class AuthSession:
    """
    Lazily obtains and caches the gateway bearer token.

    The cached token is trusted until :meth:`invalidate` is called; there is
    no re-validation and no automatic retry. ``ensure_token`` and
    ``invalidate`` share a lock so concurrent callers never run two
    authentication exchanges at once.
    """

    def __init__(
        self,
        config: EnvironmentConfig,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.timeout = timeout
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token or None

    def ensure_token(self) -> str:
        with self._lock:
            if self._token:
                return self._token
            self._token = None
            self._token = self._authenticate()
            return self._token

    def invalidate(self, token: Optional[str] = None) -> None:
        """
        Drop the cached token.

        When ``token`` is given, the cache is cleared only if it still holds
        that token, so a rejection of an old token never discards a newer one.
        """
        with self._lock:
            if token is not None and self._token != token:
                return
            if self._token:
                logging.info("Discarding cached Paylink %s token", self.config.actor.value)
            self._token = None

    def _authenticate(self) -> str:
        url = self.config.url(self.config.auth_path)
        logging.info("Authenticating Paylink %s at %s", self.config.actor.value, url)
        try:
            response = self.session.post(
                url,
                json=self.config.authentication_body(),
                headers=JSON_HEADERS,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise AuthenticationError(
                f"Authentication request to {url} timed out after {self.timeout}s"
            ) from exc
        except requests.RequestException as exc:
            raise AuthenticationError(f"Authentication request to {url} failed: {exc}") from exc

        payload = response_json(response)
        token = payload.get("id_token") if isinstance(payload, dict) else None
        if not is_success_status(response.status_code) or not token:
            message = extract_error_message(response, "Failed to authenticate")
            logging.warning("Paylink authentication failed with status %s", response.status_code)
            raise AuthenticationError(
                f"{message}, Status code: {response.status_code}",
                status_code=response.status_code,
            )
        return str(token)
