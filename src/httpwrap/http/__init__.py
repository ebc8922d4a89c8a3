"""Async and blocking HTTP clients for httpwrap."""

from .blocking import BlockingHttpClient
from .classifier import is_success
from .client import AsyncHttpClient
from .errors import NetworkError
from .headers import build_request, merge_headers
from .types import HttpRequest, HttpResult, ResultCallback

__all__ = [
    "AsyncHttpClient",
    "BlockingHttpClient",
    "HttpRequest",
    "HttpResult",
    "NetworkError",
    "ResultCallback",
    "build_request",
    "is_success",
    "merge_headers",
]
