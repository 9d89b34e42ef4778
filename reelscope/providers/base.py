"""Shared HTTP plumbing for source adapters.

Every network-backed adapter inherits from :class:`HttpSourceAdapter`,
which owns the injected ``httpx.AsyncClient`` and translates every httpx
failure into :class:`~reelscope.utils.errors.UpstreamFailureError` so the
orchestrator sees a single per-attempt error type.
"""

from __future__ import annotations

from typing import Any

import httpx

from reelscope.interfaces.source_adapter import ISourceAdapter
from reelscope.utils.errors import UpstreamFailureError
from reelscope.utils.logging import get_logger

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)
_ERROR_BODY_LIMIT = 200


def _describe_error_body(response: httpx.Response) -> str:
    """Pull a short, human-readable reason out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:_ERROR_BODY_LIMIT].strip()
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if payload.get("message"):
            return str(payload["message"])
    return ""


class HttpSourceAdapter(ISourceAdapter):
    """Base class for adapters that talk to an upstream over HTTP.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``; injected so tests can supply a mock
        transport and the application can reuse one connection pool.
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client
        self._logger = get_logger(__name__)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        provider = self.get_provider_name()
        try:
            response = await self._http.request(
                method,
                url,
                params=params,
                headers=headers,
                json=json_body,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamFailureError(
                message=f"Timeout calling {url}: {exc}",
                provider_name=provider,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailureError(
                message=f"HTTP error calling {url}: {exc}",
                provider_name=provider,
            ) from exc

        if response.status_code >= 400:
            reason = _describe_error_body(response)
            message = f"HTTP {response.status_code}"
            if reason:
                message = f"{message}: {reason}"
            self._logger.warning(
                "upstream_http_error",
                provider=provider,
                url=url,
                status=response.status_code,
            )
            raise UpstreamFailureError(
                message=message,
                provider_name=provider,
                status_code=response.status_code,
            )
        return response

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._send("GET", url, params=params, headers=headers)
        return self._decode_json(response, url)

    async def _post_json(
        self,
        url: str,
        *,
        json_body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._send("POST", url, json_body=json_body, headers=headers)
        return self._decode_json(response, url)

    async def _get_text(self, url: str, *, headers: dict[str, str] | None = None) -> str:
        response = await self._send("GET", url, headers=headers)
        return response.text

    def _decode_json(self, response: httpx.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamFailureError(
                message=f"Non-JSON response from {url}",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
            ) from exc
