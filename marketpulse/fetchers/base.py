"""Shared JSON-over-HTTP client and error taxonomy for market-data providers."""

import logging
import time
from typing import Any

import httpx
import orjson
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from marketpulse.models.config import ProviderConfig


logger = logging.getLogger(__name__)


class MarketDataError(Exception):
    """Base class for provider errors."""

    def __init__(self, message: str, response_text: str | None = None):
        super().__init__(message)
        self.response_text = response_text


class NetworkError(MarketDataError):
    """Non-2xx status or transport failure."""

    def __init__(
        self,
        message: str,
        response_text: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, response_text)
        self.status_code = status_code


class MalformedResponse(MarketDataError):
    """Response is missing expected fields or is not valid JSON."""


class NotFound(MarketDataError):
    """Requested entity does not exist at the provider."""


class ProviderClient:
    """Base client for a JSON REST provider.

    Handles lazy connection setup, rate limiting, retries on transient
    transport errors and mapping of failures onto the error taxonomy.
    """

    name = "provider"

    def __init__(self, config: ProviderConfig, transport: httpx.BaseTransport | None = None):
        self.config = config
        self._transport = transport
        self._client: httpx.Client | None = None
        self._last_request_time: float = 0.0

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                headers=dict(self.config.headers),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "ProviderClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _rate_limit(self) -> None:
        """Apply rate limiting between requests."""
        if self.config.rate_limit.requests_per_second <= 0:
            return

        min_interval = 1.0 / self.config.rate_limit.requests_per_second
        elapsed = time.time() - self._last_request_time

        if elapsed < min_interval:
            time.sleep(min_interval - elapsed)

    def _make_request(self, path: str, params: dict[str, Any]) -> httpx.Response:
        """Make HTTP request with retry logic."""
        client = self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.config.retry.max_attempts),
            wait=wait_exponential(
                multiplier=self.config.retry.backoff_multiplier,
                min=self.config.retry.initial_delay,
            ),
            reraise=True,
        )
        def _do_request() -> httpx.Response:
            self._rate_limit()
            self._last_request_time = time.time()
            response = client.get(path, params=params)
            response.raise_for_status()
            return response

        return _do_request()

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` and decode the JSON body.

        Raises:
            NotFound: On HTTP 404
            NetworkError: On any other non-2xx status or transport failure
            MalformedResponse: If the body is not valid JSON
        """
        params = dict(params or {})
        logger.debug(f"{self.name} GET {path} params={self._loggable(params)}")

        try:
            response = self._make_request(path, params)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            snippet = e.response.text[:500]
            if status == 404:
                raise NotFound(f"{self.name}: {path} not found", snippet) from e
            raise NetworkError(f"API error: {status}", snippet, status_code=status) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{self.name} request failed: {e}") from e

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise MalformedResponse(
                f"{self.name}: failed to parse JSON: {e}", response.text[:500]
            ) from e

    @staticmethod
    def _loggable(params: dict[str, Any]) -> dict[str, Any]:
        """Params with the API key masked."""
        return {k: ("***" if "key" in k.lower() else v) for k, v in params.items()}
