"""Request signing for BTSE private endpoints."""

import hashlib
import hmac
import logging
import time
from collections.abc import Callable

from btse_adapter.errors import AuthenticationError
from btse_adapter.execution.btse.router import Surface

logger = logging.getLogger(__name__)


def milliseconds() -> int:
    return int(time.time() * 1000)


def create_signature(secret: str, nonce: int | str, path: str, body: str | None = None) -> str:
    """HMAC-SHA384 hex digest of ``"/" + path + nonce [+ body]``."""
    content = f"/{path}{nonce}" if body is None else f"/{path}{nonce}{body}"
    return hmac.new(secret.encode("utf-8"), content.encode("utf-8"), hashlib.sha384).hexdigest()


def clean_signature_path(host: str, surface: Surface, url: str) -> str:
    """Strip the product-line prefix so the path is relative to spot or futures.

    Example: ``https://api.btse.com/spot/api/v3.1/order`` -> ``api/v3.1/order``
    """
    url = url.split("?", 1)[0]
    prefix = f"{host.rstrip('/')}/{surface.product_line}/"
    if url.startswith(prefix):
        return url[len(prefix):]
    return url


class RequestSigner:
    """Builds authentication headers for private calls.

    Nonces are wall-clock milliseconds minus the cached clock offset and are
    strictly increasing per signer.
    """

    def __init__(
        self,
        api_key: str,
        secret: str,
        host: str,
        clock: Callable[[], int] = milliseconds,
    ) -> None:
        self._api_key = api_key
        self._secret = secret
        self._host = host
        self._clock = clock
        self._time_difference = 0
        self._last_nonce = 0

    @property
    def time_difference(self) -> int:
        return self._time_difference

    def sync_clock(self, server_time: int) -> int:
        """Store offset between local clock and server time.

        Args:
            server_time: Server time in epoch milliseconds (``epoch`` * 1000)

        Returns:
            Offset in milliseconds (local - server)
        """
        self._time_difference = self._clock() - server_time
        logger.info(f"Clock offset to BTSE is {self._time_difference} ms")
        return self._time_difference

    def nonce(self) -> int:
        value = self._clock() - self._time_difference
        if value <= self._last_nonce:
            value = self._last_nonce + 1
        self._last_nonce = value
        return value

    def check_credentials(self, operation: str) -> None:
        """Raise AuthenticationError if the API key or secret is missing."""
        missing = [
            name
            for name, value in (("api_key", self._api_key), ("secret", self._secret))
            if not value
        ]
        if missing:
            raise AuthenticationError(
                f"{operation} requires credentials; missing {', '.join(missing)}"
            )

    def sign(
        self,
        surface: Surface,
        method: str,
        url: str,
        body: str | None = None,
        operation: str = "request",
    ) -> dict[str, str]:
        """Produce headers for a private request.

        Args:
            surface: Surface the request goes to
            method: HTTP verb
            url: Full request URL
            body: Serialized JSON body, only for verbs that carry one
            operation: Operation name used in error messages

        Returns:
            Header dict with btse-nonce, btse-api, btse-sign
        """
        self.check_credentials(operation)
        nonce = self.nonce()
        path = clean_signature_path(self._host, surface, url)
        signed_body = body if method.upper() == "POST" else None
        headers = {
            "btse-nonce": str(nonce),
            "btse-api": self._api_key,
            "btse-sign": create_signature(self._secret, nonce, path, signed_body),
        }
        if body is not None:
            headers["Content-Type"] = "application/json"
        logger.debug(f"Signed {method} /{path} with nonce {nonce}")
        return headers
