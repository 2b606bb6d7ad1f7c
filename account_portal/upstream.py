"""
Client for the upstream account backend.

The portal owns no data: every read and write is relayed to an authenticated
backend service. This module wraps an httpx.AsyncClient and turns backend
outcomes into either an UpstreamResponse (relayed to the caller verbatim) or
an UpstreamError carrying a structured kind:

    2xx                         -> UpstreamResponse
    404                         -> UpstreamError(NOT_FOUND)
    409                         -> UpstreamError(CONFLICT)
    other 4xx (401, 403, ...)   -> UpstreamResponse (the backend's answer stands)
    5xx / transport failure     -> UpstreamError(UNEXPECTED)

The caller's bearer token is passed in explicitly on every call; the client
never looks one up on its own.

Lifecycle:
  One UpstreamClient is created per application lifespan (see main.py) and
  injected into route handlers by dependencies.get_upstream_client().
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from account_portal.config import settings
from account_portal.exceptions import UpstreamError, UpstreamErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamResponse:
    """Status and decoded body of a backend response."""
    status_code: int
    data: Any


class UpstreamClient:
    """Relays requests to the backend, attaching the caller's bearer token."""

    def __init__(self, http_client: httpx.AsyncClient):
        self._http = http_client

    async def get(self, path: str, token: str | None) -> UpstreamResponse:
        return await self.request("GET", path, token)

    async def put(self, path: str, token: str | None, payload: Any) -> UpstreamResponse:
        return await self.request("PUT", path, token, payload)

    async def request(
        self,
        method: str,
        path: str,
        token: str | None,
        payload: Any = None,
    ) -> UpstreamResponse:
        """
        Send one request to the backend.

        Args:
            method: HTTP method.
            path: Backend path, relative to UPSTREAM_BASE_URL.
            token: The caller's bearer token, or None to send no credentials.
            payload: JSON body, or None for no body.

        Raises:
            UpstreamError: For 404, 409, 5xx and transport failures.
        """
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(method, path, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Upstream %s %s failed: %s", method, path, exc.__class__.__name__)
            raise UpstreamError(UpstreamErrorKind.UNEXPECTED) from exc

        status_code = response.status_code
        if status_code == 404:
            raise UpstreamError(UpstreamErrorKind.NOT_FOUND, status_code)
        if status_code == 409:
            raise UpstreamError(UpstreamErrorKind.CONFLICT, status_code)
        if status_code >= 500:
            logger.warning("Upstream %s %s returned %d", method, path, status_code)
            raise UpstreamError(UpstreamErrorKind.UNEXPECTED, status_code)

        return UpstreamResponse(status_code=status_code, data=_decode_body(response))

    async def aclose(self) -> None:
        await self._http.aclose()


def _decode_body(response: httpx.Response) -> Any:
    """Decode JSON bodies; plain-text bodies are returned as a string."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def create_upstream_client() -> UpstreamClient:
    """Build a client pointed at the configured backend."""
    http_client = httpx.AsyncClient(
        base_url=settings.UPSTREAM_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
    )
    return UpstreamClient(http_client)
