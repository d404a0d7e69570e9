# src/pinecone_kit/http.py

"""HTTP binding for the Pinecone REST API.

Thin layer over an ``httpx.AsyncClient``:
- Every path is resolved against a fixed base URL
- Every request carries the ``Api-Key`` header
- Non-2xx responses are translated into ``PineconeError`` when the body
  is structured, otherwise the original httpx error is raised unchanged

No retries, no timeouts of its own. Those belong to the injected client.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from .errors import ErrorDetail, PineconeError
from .observability import names
from .observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)

API_KEY_HEADER = "Api-Key"


def translate_error(error: httpx.HTTPStatusError) -> Exception:
    """Map a failed response to the error the caller should see.

    Returns a ``PineconeError`` chained to ``error`` when the body is JSON
    with a ``message`` field, otherwise ``error`` itself.
    """
    response = error.response
    if not response.content:
        return error

    try:
        body = response.json()
    except ValueError:
        logger.error("Failed reading HTTPError response body", exc_info=True)
        return error

    if not isinstance(body, dict) or not body.get("message"):
        return error

    details = body.get("details")
    if details is not None and not (
        isinstance(details, list) and all(isinstance(d, dict) for d in details)
    ):
        logger.error("Unexpected error details in response body: %r", details)
        return error

    translated = PineconeError(
        body["message"],
        code=body.get("code"),
        status=response.status_code,
        details=[
            ErrorDetail(type_url=d.get("typeUrl", ""), value=d.get("value", ""))
            for d in details
        ]
        if details
        else None,
    )
    translated.__cause__ = error
    return translated


class ApiClient:
    """Request-issuing object bound to one base URL and API key."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        # No timeout of our own; callers set one on the injected client.
        self._http = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(timeout=None)
        )
        self.metrics_hook = metrics_hook

    @property
    def base_url(self) -> str:
        return self._base_url

    def extend(self, *, base_url: str) -> "ApiClient":
        """Same credentials and transport, different host."""
        return ApiClient(
            api_key=self._api_key,
            base_url=base_url,
            http_client=self._http,
            metrics_hook=self.metrics_hook,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def get(
        self, path: str, *, params: Sequence[tuple[str, str]] | None = None
    ) -> httpx.Response:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None) -> httpx.Response:
        return await self._request("POST", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        return await self._request("DELETE", path)

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Sequence[tuple[str, str]] | None = None,
    ) -> httpx.Response:
        url = self._url(path)
        logger.debug("Pinecone request: %s %s", method, url)

        response = await self._http.request(
            method,
            url,
            json=json,
            params=list(params) if params else None,
            headers={API_KEY_HEADER: self._api_key},
        )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.metrics_hook.increment(
                names.PINECONE_ERRORS_TOTAL,
                labels={"status": str(response.status_code)},
            )
            logger.debug(
                "Pinecone request failed: %s %s -> %d",
                method,
                url,
                response.status_code,
            )
            translated = translate_error(e)
            if translated is e:
                raise
            raise translated from e

        return response
