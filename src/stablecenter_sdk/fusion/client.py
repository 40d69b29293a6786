"""Shared HTTP transport for the Fusion+ API."""

import logging
from typing import Any, Dict, Optional, Type

import httpx

from ..config import ResolvedSwapServiceConfig
from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class FusionApiClient:
    """Thin async wrapper around the upstream REST API.

    Adds the bearer token, decodes JSON and turns every transport or
    protocol failure into the caller's ``UpstreamError`` subclass. Nothing
    is retried here; callers decide.
    """

    def __init__(
        self,
        config: ResolvedSwapServiceConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = config.api_url
        self._auth_key = config.auth_key
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def close(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        error_cls: Type[UpstreamError],
        json: Optional[Dict[str, Any]] = None,
        allow_empty: bool = False,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON object.

        Args:
            method: HTTP method
            path: Path below the API base URL
            error_cls: Error raised on any failure
            json: Optional JSON body
            allow_empty: Treat an empty 2xx body as ``{}``

        Raises:
            error_cls: On transport errors, non-2xx responses or bad JSON
        """
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self._auth_key}",
            "Accept": "application/json",
        }
        logger.debug("%s %s", method, url)

        try:
            response = await self._http_client.request(
                method, url, headers=headers, json=json
            )
        except httpx.HTTPError as exc:
            raise error_cls(f"Request to {url} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)

        if not response.is_success:
            raise error_cls(
                f"Fusion API error ({response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        if not response.text.strip():
            if allow_empty:
                return {}
            raise error_cls(
                "Fusion API returned an empty response",
                status_code=response.status_code,
                body="",
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise error_cls(
                f"Failed to parse response: {response.text}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise error_cls(
                "Fusion API returned a non-object response",
                status_code=response.status_code,
                body=response.text,
            )
        return data
