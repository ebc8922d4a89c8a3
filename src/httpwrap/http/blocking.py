"""Blocking HTTP client backed by a worker thread running its own event loop."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Coroutine, Mapping
from pathlib import Path
from types import TracebackType
from typing import Any, TypeVar, Union

from ..models.config import ClientConfig
from ..security.trust import set_root_ca
from .client import AsyncHttpClient, RequestBody
from .types import HttpResult, ResultCallback

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlockingHttpClient:
    """
    Synchronous HTTP client for code that can't use async/await.

    Each instance owns a daemon worker thread running an event loop with
    an AsyncHttpClient inside it. Verb methods hand the request to that
    loop and block the calling thread until the result is ready; the
    caller's own event loop (if any) is never re-entered.

    Verb methods return the response body and raise NetworkError on
    failure. Use request() to get the HttpResult by value instead.

    Example:
        with BlockingHttpClient(headers={"Content-Type": "application/json"}) as client:
            try:
                body = client.post("https://example.com/api/items", b'{"name": "x"}')
            except NetworkError as e:
                print(f"Failed with {e.status_code}: {e.message}")
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize the client and start its worker thread.

        Args:
            config: Client configuration (defaults to ClientConfig())
            headers: Default headers; shorthand for ClientConfig(headers=...)

        Raises:
            NetworkError: With status 0 if config.root_ca cannot be loaded
        """
        self._client = AsyncHttpClient(config, headers=headers)
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="httpwrap-worker",
            daemon=True,
        )
        self._closed = False
        self._thread.start()
        self._call(self._client.__aenter__())
        logger.debug("Blocking client worker started")

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def _call(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine on the worker loop and wait for its result."""
        if self._closed:
            coro.close()
            raise RuntimeError("Client is closed")
        if threading.current_thread() is self._thread:
            coro.close()
            raise RuntimeError("BlockingHttpClient cannot be called from its own worker thread")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    def close(self) -> None:
        """Close the session and stop the worker thread."""
        if self._closed:
            return
        if threading.current_thread() is self._thread:
            raise RuntimeError("BlockingHttpClient cannot be closed from its own worker thread")
        try:
            self._call(self._client.__aexit__(None, None, None))
        finally:
            self._closed = True
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join()
            self._loop.close()
            logger.debug("Blocking client worker stopped")

    def __enter__(self) -> BlockingHttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def headers(self) -> dict[str, str]:
        """Copy of the default headers sent with every request."""
        return self._client.headers

    @property
    def timeout(self) -> float | None:
        """Total request timeout in seconds, None if unlimited."""
        return self._client.timeout

    @staticmethod
    def set_root_ca(cert_path: Union[str, Path]) -> None:
        """
        Trust an extra root certificate for all future TLS connections.

        Raises:
            NetworkError: With status 0 if the certificate cannot be loaded
        """
        set_root_ca(cert_path)

    def set_timeout(self, seconds: float) -> None:
        """Set the total timeout for subsequent requests."""
        self._client.set_timeout(seconds)

    def reset_timeout(self) -> None:
        """Remove the request timeout."""
        self._client.reset_timeout()

    def set_bearer_token(self, token: str) -> None:
        """Set this client's bearer token. An empty string resets it."""
        self._client.set_bearer_token(token)

    def on_success(self, callback: ResultCallback) -> None:
        """Register a listener; it runs on the worker thread."""
        self._client.on_success(callback)

    def on_error(self, callback: ResultCallback) -> None:
        """Register a listener; it runs on the worker thread."""
        self._client.on_error(callback)

    def request(
        self,
        method: str,
        url: str,
        data: RequestBody = None,
        *,
        headers: Mapping[str, str] | None = None,
        bearer_token: str | None = None,
    ) -> HttpResult:
        """
        Send a request and block until it completes.

        The bearer token is resolved in the calling thread, so a token set
        with httpwrap.set_bearer_token() here applies even though the
        request runs on the worker thread.

        Returns:
            HttpResult; never raises for HTTP or transport failures
        """
        token = self._client.resolve_bearer_token(bearer_token)
        return self._call(self._client.request(method, url, data, headers=headers, bearer_token=token))

    def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> bytes:
        """Perform a GET request, returning the body or raising NetworkError."""
        return self.request("GET", url, headers=headers).unwrap()

    def head(self, url: str, *, headers: Mapping[str, str] | None = None) -> bytes:
        """Perform a HEAD request; the returned body is always empty."""
        return self.request("HEAD", url, headers=headers).unwrap()

    def post(self, url: str, data: RequestBody = None, *, headers: Mapping[str, str] | None = None) -> bytes:
        """Perform a POST request, returning the body or raising NetworkError."""
        return self.request("POST", url, data, headers=headers).unwrap()

    def put(self, url: str, data: RequestBody = None, *, headers: Mapping[str, str] | None = None) -> bytes:
        """Perform a PUT request, returning the body or raising NetworkError."""
        return self.request("PUT", url, data, headers=headers).unwrap()

    def patch(self, url: str, data: RequestBody = None, *, headers: Mapping[str, str] | None = None) -> bytes:
        """Perform a PATCH request, returning the body or raising NetworkError."""
        return self.request("PATCH", url, data, headers=headers).unwrap()

    def delete(self, url: str, *, headers: Mapping[str, str] | None = None) -> bytes:
        """Perform a DELETE request, returning the body or raising NetworkError."""
        return self.request("DELETE", url, headers=headers).unwrap()
