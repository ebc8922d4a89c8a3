"""Request and result types shared by the HTTP clients."""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .classifier import is_success
from .errors import NetworkError

METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True)
class HttpRequest:
    """
    Immutable description of an outgoing request.

    Attributes:
        method: Upper-case HTTP verb
        url: Target URL
        body: Request body, or None for verbs sent without one
        headers: Fully merged headers (client, per-call, then bearer token)
    """

    method: str
    url: str
    body: Optional[bytes] = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HttpResult:
    """
    Outcome of a request, classified as success or failure.

    A transport failure has status_code 0 and carries the engine's
    message in ``error``. An HTTP response with status >= 300 is a
    failure whose message is the response body.

    Attributes:
        method: HTTP verb that was sent
        url: Requested URL
        status_code: HTTP status code, 0 if no response was received
        content: Raw response body (empty for HEAD and transport failures)
        headers: Response headers
        error: Transport error description, None if a response arrived
    """

    method: str
    url: str
    status_code: int
    content: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True if the request succeeded."""
        return is_success(self.status_code, self.error)

    @property
    def message(self) -> str:
        """Transport error text, or the response body decoded as text."""
        if self.error is not None:
            return self.error
        return self.text()

    def text(self) -> str:
        """Decode the body using the declared charset, falling back to UTF-8."""
        content_type = next((v for k, v in self.headers.items() if k.lower() == "content-type"), "")
        for part in content_type.split(";"):
            part = part.strip()
            if part.lower().startswith("charset="):
                encoding = part.split("=", 1)[1].strip().strip("\"'")
                try:
                    return self.content.decode(encoding)
                except (UnicodeDecodeError, LookupError):
                    break
        return self.content.decode("utf-8", errors="replace")

    def raise_for_status(self) -> None:
        """Raise NetworkError if this result is a failure."""
        if not self.ok:
            raise NetworkError(self.status_code, self.message)

    def unwrap(self) -> bytes:
        """Return the body on success, raise NetworkError otherwise."""
        self.raise_for_status()
        return self.content


# Listener for the success/error channels; may be sync or async
ResultCallback = Callable[[HttpResult], Union[None, Awaitable[None]]]
