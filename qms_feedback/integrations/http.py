"""HTTP access to the feedback API.

All calls go through ``ApiClient`` so that every transport, timeout and
decoding failure surfaces as a ``FeedbackClientError``.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Iterator

import httpx

from qms_feedback.core.config import Settings
from qms_feedback.core.exceptions import (
    FeedbackClientError,
    MalformedResponseError,
    NetworkError,
    NoConnectivityError,
    RequestTimeoutError,
    UnknownError,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin async wrapper around ``httpx.AsyncClient`` for the feedback API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ApiClient":
        """Build a client from application settings."""
        return cls(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    async def get(self, path: str) -> httpx.Response:
        """Issue a GET request."""
        return await self._send("GET", path)

    async def post_json(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        """Issue a POST request with a JSON body."""
        return await self._send(
            "POST",
            path,
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        # httpx timeouts apply per phase; wait_for bounds the whole exchange
        try:
            return await asyncio.wait_for(
                self._client.request(method, path, **kwargs),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.debug(f"{method} {path} timed out after {self._timeout}s")
            raise RequestTimeoutError(self._timeout) from e
        except httpx.ConnectError as e:
            logger.debug(f"{method} {path} could not connect: {e}")
            raise NoConnectivityError() from e
        except httpx.HTTPError as e:
            logger.debug(f"{method} {path} transport error: {e}")
            raise NetworkError(f"Network error: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def decode_json(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, raising ``MalformedResponseError`` otherwise."""
    try:
        data = response.json()
    except ValueError as e:
        raise MalformedResponseError(details={"reason": str(e)}) from e

    if not isinstance(data, dict):
        raise MalformedResponseError(details={"reason": "expected a JSON object"})
    return data


@contextmanager
def client_errors(operation: str) -> Iterator[None]:
    """Wrap anything that is not already a ``FeedbackClientError``."""
    try:
        yield
    except FeedbackClientError as e:
        logger.warning(f"{operation} failed: {e.error_code}: {e.message}")
        raise
    except Exception as e:
        logger.error(f"{operation} failed unexpectedly: {e}")
        raise UnknownError(str(e)) from e
