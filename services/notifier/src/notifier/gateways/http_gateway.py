"""
Shared HTTP plumbing for REST-based SMS gateways.

Uses :mod:`httpx` for async HTTP and :mod:`tenacity` to retry requests
that never reached the provider.  Only connection-establishment errors
are retried: once a request may have been received, retrying could
deliver the same emergency SMS twice.
"""

from __future__ import annotations

from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .base import SMSGateway

# Defaults, overridable via constructor.
_DEFAULT_MAX_ATTEMPTS = 2
_DEFAULT_TIMEOUT_S = 10.0
_DEFAULT_BACKOFF_S = 0.5

_RETRYABLE = (httpx.ConnectError, httpx.ConnectTimeout)


class HTTPGateway(SMSGateway):
    """Base for gateways that talk to their provider over HTTPS.

    Args:
        max_attempts: Attempts per request on connection errors (default 2).
        timeout: Per-request timeout in seconds (default 10).
        backoff: Initial back-off between attempts in seconds.
    """

    def __init__(
        self,
        *,
        max_attempts: int = _DEFAULT_MAX_ATTEMPTS,
        timeout: float = _DEFAULT_TIMEOUT_S,
        backoff: float = _DEFAULT_BACKOFF_S,
    ) -> None:
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.backoff = backoff
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Return (and lazily create) the shared ``httpx.AsyncClient``."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _post_form(
        self,
        url: str,
        data: dict[str, str],
        *,
        headers: dict[str, str] | None = None,
        auth: Any | None = None,
    ) -> httpx.Response:
        """POST form-encoded *data* to *url*.

        Non-2xx responses are returned, not raised; the caller decides how
        to read the provider's error body.

        Raises:
            httpx.HTTPError: On transport failure after all attempts.
        """

        @retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff, max=5),
            retry=retry_if_exception_type(_RETRYABLE),
            reraise=True,
        )
        async def _inner() -> httpx.Response:
            client = await self._get_client()
            return await client.post(
                url,
                data=data,
                headers={"Accept": "application/json", **(headers or {})},
                auth=auth,
            )

        return await _inner()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
