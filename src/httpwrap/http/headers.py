"""Header merging and request construction."""

from __future__ import annotations

from collections.abc import Mapping

from .types import METHODS, HttpRequest

AUTHORIZATION = "Authorization"


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    """Set a header, dropping any existing key that differs only in case."""
    for key in [k for k in headers if k.lower() == name.lower()]:
        del headers[key]
    headers[name] = value


def merge_headers(
    client_headers: Mapping[str, str],
    extra_headers: Mapping[str, str] | None = None,
    bearer_token: str | None = None,
) -> dict[str, str]:
    """
    Merge headers in a fixed order.

    Client headers first (in iteration order), then per-call headers,
    then the bearer token, which always replaces any Authorization value.

    Args:
        client_headers: Headers configured on the client
        extra_headers: Optional headers for this request only
        bearer_token: Token to send; empty or None adds nothing

    Returns:
        New dict with the merged headers
    """
    headers: dict[str, str] = {}
    for name, value in client_headers.items():
        _set_header(headers, name, value)
    if extra_headers:
        for name, value in extra_headers.items():
            _set_header(headers, name, value)
    if bearer_token:
        _set_header(headers, AUTHORIZATION, f"Bearer {bearer_token}")
    return headers


def build_request(
    method: str,
    url: str,
    data: bytes | str | None = None,
    *,
    client_headers: Mapping[str, str],
    extra_headers: Mapping[str, str] | None = None,
    bearer_token: str | None = None,
) -> HttpRequest:
    """
    Build an HttpRequest descriptor.

    Raises:
        ValueError: If the method is not one of the supported verbs
    """
    method = method.upper()
    if method not in METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    body = data.encode("utf-8") if isinstance(data, str) else data
    return HttpRequest(
        method=method,
        url=url,
        body=body,
        headers=merge_headers(client_headers, extra_headers, bearer_token),
    )
