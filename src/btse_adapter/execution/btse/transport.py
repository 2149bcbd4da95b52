"""HTTP transport used to dispatch BTSE requests."""

import json
import logging
from typing import Any, Protocol

import aiohttp

from btse_adapter.errors import TransportError

logger = logging.getLogger(__name__)


class HttpTransport(Protocol):
    """Boundary the adapter dispatches requests through.

    Implementations return the decoded JSON body or raise TransportError.
    Retries and backoff belong here, not in the adapter.
    """

    async def send(
        self,
        url: str,
        method: str,
        headers: dict[str, str],
        body: str | None = None,
    ) -> Any: ...

    async def close(self) -> None: ...


class AiohttpTransport:
    """Single-attempt transport backed by an aiohttp session."""

    def __init__(self, timeout: float = 10.0, user_agent: str = "btse-adapter") -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._user_agent = user_agent
        self._session: aiohttp.ClientSession | None = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
            )
        return self._session

    async def send(
        self,
        url: str,
        method: str,
        headers: dict[str, str],
        body: str | None = None,
    ) -> Any:
        session = self._ensure_session()
        try:
            async with session.request(method, url, headers=headers, data=body) as response:
                text = await response.text()
                if response.status >= 400:
                    raise TransportError(
                        f"{method} {url} returned HTTP {response.status}",
                        url=url,
                        status=response.status,
                        body=text,
                    )
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        if not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise TransportError(
                f"{method} {url} returned non-JSON body", url=url, body=text
            ) from e

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("Closed HTTP session")
