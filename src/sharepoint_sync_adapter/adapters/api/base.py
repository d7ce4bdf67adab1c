"""
Shared HTTP utilities for store clients.

The helper provides a thin HTTPX wrapper for the asynchronous store clients: it
keeps one connection pool per client instance, avoids global state, and surfaces
rich error messages when endpoints fail. Requests are not retried; a
failed request is reported to the adapter exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Mapping, MutableMapping, Optional, Tuple

import httpx

from ...core.logging import get_logger, log_progress
from ..base import AdapterError

DEFAULT_TIMEOUT = 30.0


class APIError(AdapterError):
    """Raised when an HTTP API call fails."""


@dataclass(slots=True)
class BaseAPIClient:
    """
    Base asynchronous HTTP client.

    Parameters
    ----------
    base_url:
        Root URL for the upstream service.
    timeout:
        Request timeout in seconds.
    default_headers:
        Headers automatically attached to every request.
    auth:
        Optional ``(username, password)`` pair sent as HTTP basic credentials.
    transport:
        Optional HTTPX transport, mainly used to plug in ``httpx.MockTransport``.
    """

    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    default_headers: MutableMapping[str, str] = field(default_factory=dict)
    auth: Optional[Tuple[str, str]] = None
    transport: Optional[httpx.AsyncBaseTransport] = None
    logger: LoggerAdapter = field(init=False, repr=False)
    _client: Optional[httpx.AsyncClient] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}",
            extra={"base_url": self.base_url},
        )

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=dict(self.default_headers),
            auth=self.auth,
            transport=self.transport,
            follow_redirects=True,
        )

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def aclose(self) -> None:
        """Close the underlying connection pool. The client may be reused afterwards."""

        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def __aenter__(self) -> "BaseAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise APIError(f"HTTP {exc.response.status_code} error for {exc.request.method} {exc.request.url}: {exc.response.text}") from exc

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        log_progress(self.logger, "HTTP request", level=logging.DEBUG, extra={"method": method, "url": url})
        client = self._ensure_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            log_progress(
                self.logger,
                "HTTP error during request",
                level=logging.ERROR,
                extra={"method": method, "url": url, "error": str(exc)},
            )
            raise APIError(f"HTTP error while calling {method} {url}: {exc}") from exc

        self._raise_for_status(response)
        log_progress(
            self.logger,
            "HTTP response",
            level=logging.DEBUG,
            extra={"status_code": response.status_code, "url": str(response.url)},
        )
        return response

    @staticmethod
    def _decode_json(response: httpx.Response) -> Any:
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise APIError(f"Failed to decode JSON from {response.url}: {exc}") from exc

    async def _get_json(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        response = await self._request("GET", url, params=params)
        return self._decode_json(response)

    async def _post_json(
        self,
        url: str,
        *,
        json_body: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        merged_headers: MutableMapping[str, str] = dict(self.default_headers)
        if headers:
            merged_headers.update(headers)
        response = await self._request("POST", url, json=json_body, headers=merged_headers)
        return self._decode_json(response)
