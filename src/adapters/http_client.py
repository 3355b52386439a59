"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, default headers and the TLS verification policy.
- Makes testing easy: the transport can be swapped for `httpx.MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings
from core.domain.models import HttpRequestSpec
from core.errors import ResponseBodyError, SendRequestError
from core.interfaces.sender import RawResponse, RequestSender

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with the tool's defaults.

    Why a builder:
    - Centralizes timeouts/headers so every request behaves the same.
    - TLS verification is off unless configured, so self-signed echo servers work.
    - Redirects are reported, not followed.
    """

    settings = settings or AppSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        verify=settings.verify_tls,
        follow_redirects=False,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


class HttpxSender(RequestSender):
    """Sends parsed requests through a shared `httpx.Client`."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def send(self, request: HttpRequestSpec) -> RawResponse:
        try:
            outgoing = self._client.build_request(
                request.method.value,
                request.url,
                headers=request.headers,
                content=request.body,
            )
            response = self._client.send(outgoing, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SendRequestError(exc) from exc

        try:
            content = response.read()
        except httpx.HTTPError as exc:
            raise ResponseBodyError(exc) from exc
        finally:
            response.close()

        logger.debug("%s %s -> %d", request.method.value, request.url, response.status_code)
        return RawResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            headers=dict(response.headers),
            content=content,
        )
