"""Context-scoped bearer token applied to every client."""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_bearer_token: ContextVar[str] = ContextVar("httpwrap_bearer_token", default="")


def set_bearer_token(token: str) -> None:
    """
    Set the default bearer token for the current context.

    Applies to all clients used in this context and in tasks created
    from it afterwards. Pass an empty string to reset.
    """
    _bearer_token.set(token or "")


def get_bearer_token() -> str:
    """Return the bearer token for the current context ('' if unset)."""
    return _bearer_token.get()


@contextmanager
def bearer_token(token: str) -> Iterator[None]:
    """
    Temporarily use a bearer token within a ``with`` block.

    Example:
        with bearer_token(session_jwt):
            client.get("https://api.example.com/me")
    """
    reset_token = _bearer_token.set(token or "")
    try:
        yield
    finally:
        _bearer_token.reset(reset_token)
