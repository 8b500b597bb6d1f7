"""
aiohttp-based HTTP client for server tests.

All requests go to one host (default http://localhost); tests address
resources by path. The client owns an aiohttp.ClientSession for its
lifetime and is used as an async context manager:

    async with HttpClient("http://localhost:8080") as client:
        response = await client.get("/status")
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import TYPE_CHECKING

import aiohttp

from ..exceptions import HttpClientError
from .models import HttpRequest, HttpResponse

if TYPE_CHECKING:
    from ..suite.models import AuthConfig

logger = logging.getLogger(__name__)

DEFAULT_HOST_URL = "http://localhost"
DEFAULT_TIMEOUT_MS = 30000


def normalize_resource(resource: str) -> str:
    """Escape literal spaces so a resource can be sent as-is."""
    return resource.replace(" ", "%20")


class HttpClient:
    """
    HTTP client bound to a single test host.

    Attributes:
        host_url: Scheme, host and optional port, without trailing slash
    """

    def __init__(
        self,
        host_url: str = DEFAULT_HOST_URL,
        auth_config: "AuthConfig | None" = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        follow_redirects: bool = True,
    ):
        self.host_url = host_url.rstrip("/")
        self._auth_config = auth_config
        self._timeout_ms = timeout_ms
        self._follow_redirects = follow_redirects
        self._session: aiohttp.ClientSession | None = None

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    def request_url(self, resource: str) -> str:
        """Get the fully qualified URL for a resource."""
        resource = normalize_resource(resource)
        if resource and not resource.startswith("/"):
            resource = "/" + resource
        return self.host_url + resource

    def _build_headers(self, request: HttpRequest) -> dict[str, str]:
        headers: dict[str, str] = {}
        self._apply_auth_headers(headers)
        # Request headers win over auth defaults
        headers.update(request.headers)
        return headers

    def _apply_auth_headers(self, headers: dict[str, str]) -> None:
        """Apply authentication headers based on auth config."""
        if self._auth_config is None:
            return

        auth_type = self._auth_config.type.value

        if auth_type == "bearer":
            token = self._auth_config.token
            if token:
                headers["Authorization"] = f"Bearer {token}"
                logger.debug("Applied bearer auth header")

        elif auth_type == "api_key":
            key = self._auth_config.key
            header_name = self._auth_config.header or "X-API-Key"
            if key:
                headers[header_name] = key
                logger.debug(f"Applied API key auth header: {header_name}")

        elif auth_type == "basic":
            username = self._auth_config.username
            password = self._auth_config.password
            if username and password:
                credentials = base64.b64encode(
                    f"{username}:{password}".encode()
                ).decode("ascii")
                headers["Authorization"] = f"Basic {credentials}"
                logger.debug("Applied basic auth header")

    async def connect(self) -> None:
        """Create the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            logger.info(f"HTTP session opened for {self.host_url}")

    async def disconnect(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
            logger.info(f"HTTP session closed for {self.host_url}")

    async def execute(self, request: HttpRequest) -> HttpResponse:
        """
        Send a request and read the whole response.

        Args:
            request: The request to send

        Returns:
            HttpResponse with status, headers and body

        Raises:
            HttpClientError: If the client is not connected, the request
                timed out or the connection failed
        """
        url = self.request_url(request.resource)
        if not self.is_connected:
            raise HttpClientError("Client not connected. Use 'async with' or call connect() first.", url)

        timeout = aiohttp.ClientTimeout(total=self._timeout_ms / 1000)
        logger.debug(f"{request.method} {url}")

        try:
            async with self._session.request(
                request.method,
                url,
                headers=self._build_headers(request),
                data=request.body,
                timeout=timeout,
                allow_redirects=self._follow_redirects,
            ) as resp:
                body = await resp.read()
                response = HttpResponse(
                    url=url,
                    status=resp.status,
                    reason=resp.reason or "",
                    headers=list(resp.headers.items()),
                    body=body,
                    charset=resp.charset or "utf-8",
                )
        except asyncio.TimeoutError as e:
            raise HttpClientError(
                f"{request.method} {url} timed out after {self._timeout_ms}ms", url
            ) from e
        except aiohttp.ClientConnectorError as e:
            raise HttpClientError(f"Connection failed: {e}", url) from e
        except aiohttp.ClientError as e:
            raise HttpClientError(f"HTTP error: {e}", url) from e

        logger.debug(f"{request.method} {url} -> {response.status}")
        return response

    async def get(self, resource: str, headers: dict[str, str] | None = None) -> HttpResponse:
        request = HttpRequest.get(resource)
        for name, value in (headers or {}).items():
            request.set_header(name, value)
        return await self.execute(request)

    async def post(
        self,
        resource: str,
        data: bytes | str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        request = HttpRequest.post(resource, data)
        for name, value in (headers or {}).items():
            request.set_header(name, value)
        return await self.execute(request)

    async def __aenter__(self) -> HttpClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"HttpClient(host_url={self.host_url!r}, status={status})"
