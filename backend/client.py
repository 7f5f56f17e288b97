"""
Specialist backend client.

Posts function-call arguments to backend routes and returns the decoded JSON.
"""

import logging
from typing import Any, Optional

import httpx

from orchestration.errors import BackendError


logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class BackendClient:
    """
    Async client for the geocoding / specialty / specialist routes.

    The underlying httpx client is created lazily and reused across requests.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def url_for(self, route: str) -> str:
        return f"{self._base_url}/{route.lstrip('/')}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def call(self, route: str, arguments: str) -> Any:
        """
        Invoke a backend route with the LLM-supplied arguments.

        Args:
            route: Backend path relative to the base URL (e.g. "specialist/find")
            arguments: Raw JSON string, sent as the request body untouched

        Returns:
            Decoded JSON response. Error bodies from the backend are returned
            as-is so the LLM can react to them.

        Raises:
            BackendError: on transport failure or a non-JSON response body
        """
        url = self.url_for(route)
        body = arguments if arguments and arguments.strip() else "{}"
        logger.debug(f"backend call start url={url} body_bytes={len(body)}")

        try:
            response = await self._get_client().post(url, content=body.encode("utf-8"), headers=_JSON_HEADERS)
        except httpx.HTTPError as exc:
            detail = (str(exc) or "").strip() or "connection_failed_or_timeout"
            logger.warning(f"backend call http_error url={url} error={detail}")
            raise BackendError(f"backend_unreachable: {detail}") from exc

        if response.status_code >= 400:
            logger.warning(f"backend call url={url} returned status={response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(
                f"backend_invalid_json: url={url} status={response.status_code}"
            ) from exc

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
