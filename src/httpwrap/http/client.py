"""Async HTTP client with success/error notification channels."""

from __future__ import annotations

import asyncio
import inspect
import logging
import ssl
from collections.abc import Mapping
from pathlib import Path
from types import TracebackType
from typing import Union

import aiohttp

from .. import __version__
from ..auth import get_bearer_token
from ..models.config import ClientConfig
from ..security.trust import TrustStore, default_trust_store, set_root_ca
from .headers import build_request, merge_headers
from .types import HttpRequest, HttpResult, ResultCallback

logger = logging.getLogger(__name__)

RequestBody = Union[bytes, str, None]


class AsyncHttpClient:
    """
    Async HTTP client built on a shared aiohttp session.

    Features:
    - Default headers and a bearer token merged into every request
    - Typed results: every verb returns an HttpResult, never raises for
      HTTP or transport failures
    - Success/error listeners notified for every completed request
    - Fire-and-forget submission via submit()
    - Optional total timeout and extra root CA certificates

    Example:
        client = AsyncHttpClient(ClientConfig(headers={"Accept": "application/json"}))
        client.on_success(lambda result: print(result.content))
        client.on_error(lambda result: print(result.status_code, result.message))

        async with client:
            result = await client.get("https://example.com/api/items")
            client.submit("POST", "https://example.com/api/items", b'{"name": "x"}')
    """

    # Exceptions that mean no usable response was received
    TRANSPORT_EXCEPTIONS = (
        aiohttp.ClientError,
        asyncio.TimeoutError,
        OSError,
    )

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            config: Client configuration (defaults to ClientConfig())
            headers: Default headers; shorthand for ClientConfig(headers=...)

        Raises:
            NetworkError: With status 0 if config.root_ca cannot be loaded
        """
        if config is None:
            config = ClientConfig(headers=dict(headers or {}))
        elif headers:
            config = config.model_copy(update={"headers": merge_headers(config.headers, headers)})

        self._config = config
        self._headers = dict(config.headers)
        self._bearer_token = config.bearer_token or ""
        self._timeout = config.timeout
        self._proxy = config.proxy
        self._user_agent = config.user_agent or f"httpwrap/{__version__}"

        self._trust_store = default_trust_store
        if config.root_ca is not None:
            self._trust_store = TrustStore(parent=default_trust_store)
            self._trust_store.add_certificate_file(config.root_ca)

        self._success_callbacks: list[ResultCallback] = []
        self._error_callbacks: list[ResultCallback] = []
        self._pending: set[asyncio.Task[HttpResult]] = set()
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(headers={"User-Agent": self._user_agent})
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context, wait for submitted requests, close session."""
        await self.drain()
        if self._session:
            await self._session.close()
            self._session = None

    @property
    def config(self) -> ClientConfig:
        """Configuration this client was created with."""
        return self._config

    @property
    def headers(self) -> dict[str, str]:
        """Copy of the default headers sent with every request."""
        return dict(self._headers)

    @property
    def timeout(self) -> float | None:
        """Total request timeout in seconds, None if unlimited."""
        return self._timeout

    @staticmethod
    def set_root_ca(cert_path: Union[str, Path]) -> None:
        """
        Trust an extra root certificate for all future TLS connections.

        Process-wide: affects every client, including existing ones.

        Raises:
            NetworkError: With status 0 if the certificate cannot be loaded
        """
        set_root_ca(cert_path)

    def set_timeout(self, seconds: float) -> None:
        """Set the total timeout for subsequent requests."""
        if seconds <= 0:
            raise ValueError(f"Timeout must be positive, got {seconds}")
        self._timeout = seconds

    def reset_timeout(self) -> None:
        """Remove the request timeout."""
        self._timeout = None

    def set_bearer_token(self, token: str) -> None:
        """Set this client's bearer token. An empty string resets it."""
        self._bearer_token = token or ""

    def on_success(self, callback: ResultCallback) -> None:
        """Register a listener called with every successful result."""
        self._success_callbacks.append(callback)

    def on_error(self, callback: ResultCallback) -> None:
        """Register a listener called with every failed result."""
        self._error_callbacks.append(callback)

    def resolve_bearer_token(self, override: str | None = None) -> str:
        """
        Pick the token for a request.

        Precedence: explicit override, then this client's token, then the
        context-scoped default token.
        """
        if override is not None:
            return override
        return self._bearer_token or get_bearer_token()

    def build(
        self,
        method: str,
        url: str,
        data: RequestBody = None,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpRequest:
        """Build the request descriptor that would be sent for these arguments."""
        return build_request(
            method,
            url,
            data,
            client_headers=self._headers,
            extra_headers=headers,
            bearer_token=self.resolve_bearer_token(bearer_token),
        )

    async def request(
        self,
        method: str,
        url: str,
        data: RequestBody = None,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """
        Send a request and notify listeners with the classified result.

        Args:
            method: HTTP verb (GET, HEAD, POST, PUT, PATCH, DELETE)
            url: The URL to request
            data: Optional body; str is encoded as UTF-8
            headers: Optional headers for this request only
            bearer_token: Optional token overriding client and context tokens

        Returns:
            HttpResult (check ``ok``; use ``unwrap()`` to raise on failure)

        Raises:
            RuntimeError: If the client is not inside ``async with``
            ValueError: If the method is not supported
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        request = self.build(method, url, data, headers=headers, bearer_token=bearer_token)
        return await self._dispatch(request)

    async def _dispatch(self, request: HttpRequest) -> HttpResult:
        result = await self._send(request)
        await self._notify(result)
        return result

    async def _send(self, request: HttpRequest) -> HttpResult:
        """Perform the request and convert transport exceptions into results."""
        assert self._session is not None

        logger.debug(f"{request.method} {request.url}")
        try:
            async with self._session.request(
                request.method,
                request.url,
                data=request.body,
                headers=request.headers,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                proxy=self._proxy,
                ssl=self._ssl_option(),
            ) as response:
                content = b"" if request.method == "HEAD" else await response.read()
                result = HttpResult(
                    method=request.method,
                    url=request.url,
                    status_code=response.status,
                    content=content,
                    headers=dict(response.headers),
                )
        except asyncio.TimeoutError:
            message = f"Request timed out after {self._timeout}s"
            logger.warning(f"{request.method} {request.url} failed: {message}")
            return HttpResult(method=request.method, url=request.url, status_code=0, error=message)
        except self.TRANSPORT_EXCEPTIONS as e:
            message = str(e) or e.__class__.__name__
            logger.warning(f"{request.method} {request.url} failed: {message}")
            return HttpResult(method=request.method, url=request.url, status_code=0, error=message)

        logger.debug(f"{request.method} {request.url} -> {result.status_code} ({len(result.content)} bytes)")
        return result

    def _ssl_option(self) -> Union[ssl.SSLContext, bool]:
        # True keeps aiohttp's default verification
        context = self._trust_store.ssl_context()
        return context if context is not None else True

    async def _notify(self, result: HttpResult) -> None:
        """Call the success or error listeners for a result."""
        callbacks = self._success_callbacks if result.ok else self._error_callbacks
        for callback in list(callbacks):
            try:
                outcome = callback(result)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                logger.exception(f"Result listener {callback!r} failed for {result.method} {result.url}")

    def submit(
        self,
        method: str,
        url: str,
        data: RequestBody = None,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> asyncio.Task[HttpResult]:
        """
        Fire-and-forget request; the outcome is delivered to listeners.

        Must be called from a running event loop. The returned task may be
        awaited but does not need to be.

        Raises:
            RuntimeError: If the client is not inside ``async with``
            ValueError: If the method is not supported
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        request = self.build(method, url, data, headers=headers, bearer_token=bearer_token)
        task = asyncio.ensure_future(self._dispatch(request))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """
        Wait until every submitted request has completed.

        When awaited from a listener, the listener's own request is skipped.
        """
        current = asyncio.current_task()
        while True:
            pending = [task for task in self._pending if not task.done() and task is not current]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """Perform a GET request."""
        return await self.request("GET", url, headers=headers, bearer_token=bearer_token)

    async def head(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """Perform a HEAD request. The result content is always empty."""
        return await self.request("HEAD", url, headers=headers, bearer_token=bearer_token)

    async def post(
        self,
        url: str,
        data: RequestBody = None,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """Perform a POST request."""
        return await self.request("POST", url, data, headers=headers, bearer_token=bearer_token)

    async def put(
        self,
        url: str,
        data: RequestBody = None,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """Perform a PUT request."""
        return await self.request("PUT", url, data, headers=headers, bearer_token=bearer_token)

    async def patch(
        self,
        url: str,
        data: RequestBody = None,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """Perform a PATCH request."""
        return await self.request("PATCH", url, data, headers=headers, bearer_token=bearer_token)

    async def delete(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """Perform a DELETE request."""
        return await self.request("DELETE", url, headers=headers, bearer_token=bearer_token)
