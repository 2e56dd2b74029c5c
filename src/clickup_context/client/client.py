"""
ClickUp v2 HTTP client.

Issues one authenticated request per upstream resource and returns the parsed
JSON body. Every failure (non-success status or transport error) is raised as
UpstreamError; callers never see httpx exceptions.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol, TypeVar

import httpx

from clickup_context.constants import CLICKUP_API_V2
from clickup_context.exceptions import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ClickUpClient")


class UpstreamClient(Protocol):
    """Anything that can fetch a ClickUp resource path."""

    async def fetch(
        self,
        path: str,
        method: str = "GET",
        *,
        token: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any: ...


def _error_detail(response: httpx.Response) -> str:
    """Extract a readable message from a ClickUp error response.

    ClickUp returns JSON like {"err": "Team not authorized", "ECODE": "OAUTH_027"}.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("err"):
        return str(body["err"])
    if response.reason_phrase:
        return response.reason_phrase
    return f"HTTP error {response.status_code}"


class ClickUpClient:
    """
    Async client for the ClickUp v2 REST API.

    Usage:
        async with ClickUpClient() as client:
            spaces = await client.fetch("/team/123/space", token="pk_...")

    An existing httpx.AsyncClient may be passed in; the ClickUpClient then
    does not close it.
    """

    def __init__(
        self,
        base_url: str = CLICKUP_API_V2,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def fetch(
        self,
        path: str,
        method: str = "GET",
        *,
        token: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Fetch one resource.

        Args:
            path: Resource path relative to the API root (e.g. "/team/1/space")
            method: HTTP method
            token: Opaque ClickUp token, sent as the Authorization header
            body: Optional JSON body
            params: Optional query parameters

        Returns:
            Parsed JSON payload

        Raises:
            UpstreamError: On non-success status or transport failure
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Authorization": token, "Content-Type": "application/json"}

        logger.debug("ClickUp %s %s", method, path)
        try:
            response = await self._http.request(
                method,
                url,
                headers=headers,
                json=body,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.error("ClickUp request %s %s failed: %s", method, path, e)
            raise UpstreamError(f"ClickUp API unreachable: {e}") from e

        if not response.is_success:
            message = _error_detail(response)
            logger.warning(
                "ClickUp %s %s returned %s: %s", method, path, response.status_code, message
            )
            raise UpstreamError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "ClickUp API returned a non-JSON body", status_code=response.status_code
            ) from e

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self: T) -> T:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
