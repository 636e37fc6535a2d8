from __future__ import annotations

import logging
import typing as t

import httpx

from ..core.models import CoralResponse, SavedCredentials
from ..errors import UpstreamError
from ..utils.resilience import CircuitBreaker
from .base import CoralClient

_logger = logging.getLogger(__name__)


class ProxyCoralClient(CoralClient):
    """Coral client that talks to a Coral proxy over HTTP.

    The proxy authenticates with the Nintendo Account session token and
    returns the unwrapped ``result`` of each upstream call:

    - ``GET {base_url}/announcements``
    - ``GET {base_url}/friends``
    - ``GET {base_url}/webservices``
    - ``GET {base_url}/activeevent``
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout_seconds: float = 10.0,
        circuit_breaker: t.Optional[CircuitBreaker] = None,
        http_client: t.Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._breaker = circuit_breaker
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    @classmethod
    def from_credentials(
        cls,
        token: str,
        credentials: SavedCredentials,
        proxy_url: t.Optional[str] = None,
        **kwargs: t.Any,
    ) -> "ProxyCoralClient":
        base_url = proxy_url or credentials.proxy_url
        if not base_url:
            raise ValueError("A proxy URL is required to build a ProxyCoralClient")
        return cls(base_url, token, **kwargs)

    async def get_announcements(self) -> CoralResponse:
        return await self._call("/announcements")

    async def get_friend_list(self) -> CoralResponse:
        return await self._call("/friends")

    async def get_web_services(self) -> CoralResponse:
        return await self._call("/webservices")

    async def get_active_event(self) -> CoralResponse:
        return await self._call("/activeevent")

    async def _call(self, path: str) -> CoralResponse:
        if self._breaker is None:
            return await self._fetch(path)

        # 4xx replies are about this token, not upstream health; the breaker
        # may be shared between users so they must not count as failures.
        client_error: t.Optional[UpstreamError] = None

        async def guarded() -> t.Optional[CoralResponse]:
            nonlocal client_error
            try:
                return await self._fetch(path)
            except UpstreamError as exc:
                if 400 <= exc.status_code < 500:
                    client_error = exc
                    return None
                raise

        response = await self._breaker.run(guarded)
        if client_error is not None:
            raise client_error
        return t.cast(CoralResponse, response)

    async def _fetch(self, path: str) -> CoralResponse:
        url = self._base_url + path
        try:
            response = await self._http.get(url, headers={"Authorization": f"na {self._token}"})
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request to {url} failed: {exc}", status_code=0) from exc
        _logger.debug("GET %s -> %s", url, response.status_code)

        if response.status_code >= 400:
            try:
                body: t.Any = response.json()
            except ValueError:
                body = response.text
            message = body.get("error_message") if isinstance(body, dict) else None
            raise UpstreamError(
                message or f"Unexpected status {response.status_code} from {url}",
                status_code=response.status_code,
                body=body,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"Invalid JSON from {url}", status_code=response.status_code, body=response.text
            ) from exc

        return CoralResponse(
            result=result,
            status=0,
            correlation_id=response.headers.get("x-correlation-id", ""),
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()
