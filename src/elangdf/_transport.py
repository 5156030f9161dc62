"""HTTP transport for the DF instrument and third-party lookups."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from elangdf._constants import USER_AGENT
from elangdf.config import DfConfig
from elangdf.exceptions import DfTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    def url(self, endpoint: str) -> str:
        ...

    async def request(
        self,
        method: str,
        url: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        ...


class RawResponse:
    """Status code and body text of a completed HTTP exchange."""

    __slots__ = ("status", "text", "url")

    def __init__(self, status: int, text: str, url: str = "") -> None:
        self.status = status
        self.text = text
        self.url = url

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise DfTransportError(
                f"Invalid JSON from {self.url}: {self.text[:200]}",
                status_code=self.status,
                endpoint=self.url,
            ) from exc


class HttpTransport:
    """aiohttp-backed transport returning raw status + body text.

    Status interpretation is left to the endpoint modules because the
    instrument's endpoints disagree on what counts as success (``2xx`` vs
    exactly ``200``).
    """

    def __init__(self, config: DfConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def url(self, endpoint: str) -> str:
        """Resolve an instrument endpoint path against the configured base URL."""
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self._config.base_url}{endpoint}"

    async def request(
        self,
        method: str,
        url: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        headers: dict[str, str] = {
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        data = json.dumps(dict(json_body)) if json_body is not None else None

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                data=data,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                return RawResponse(resp.status, text, url)
        except TimeoutError as exc:
            raise DfTransportError(f"Request to {url} timed out", endpoint=url) from exc
        except aiohttp.ClientError as exc:
            raise DfTransportError(f"Request to {url} failed: {exc}", endpoint=url) from exc
        except UnicodeDecodeError as exc:
            raise DfTransportError(f"Undecodable response from {url}: {exc}", endpoint=url) from exc
