"""HTTP transport with token authentication."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pydwelo._constants import USER_AGENT
from pydwelo._redact import redact_for_log
from pydwelo.config import DweloConfig
from pydwelo.exceptions import DweloTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`pydwelo.client.DweloClient`.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        ...


class HttpTransport:
    """JSON-over-HTTP transport that signs every request with the API token."""

    def __init__(self, config: DweloConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "authorization": f"Token {self._config.token}",
            "user-agent": USER_AGENT,
        }

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        An empty body decodes to ``None``; command endpoints commonly
        answer that way.

        Raises
        ------
        DweloTransportError
            On network errors, non-2xx responses, or a body that is not JSON.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = self._headers()
        query = {k: str(v) for k, v in params.items()} if params else None

        _logger.debug(
            "%s %s params=%s payload=%s headers=%s",
            method,
            url,
            query,
            redact_for_log(payload),
            redact_for_log(headers),
        )

        try:
            async with self._http.request(
                method,
                url,
                params=query,
                json=dict(payload) if payload is not None else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
                if not 200 <= status < 300:
                    raise DweloTransportError(
                        f"HTTP {status} from {endpoint}: {redact_for_log(text, max_string=200)}",
                        status_code=status,
                        endpoint=endpoint,
                    )
        except DweloTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise DweloTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DweloTransportError(
                f"Invalid JSON from {endpoint}: {redact_for_log(text, max_string=200)}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
