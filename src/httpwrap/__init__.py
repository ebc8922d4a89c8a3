"""
httpwrap - Async and blocking HTTP verbs with typed results.

Usage:
    from httpwrap import BlockingHttpClient, NetworkError

    with BlockingHttpClient(headers={"Content-Type": "application/json"}) as client:
        try:
            body = client.post("https://api.example.com/items", b'{"name": "x"}')
        except NetworkError as e:
            print(e.status_code, e.message)

    async with AsyncHttpClient() as client:
        client.on_success(lambda result: print(result.content))
        client.submit("GET", "https://api.example.com/items")
"""

__version__ = "1.0.0"

from .auth import bearer_token, get_bearer_token, set_bearer_token
from .files import image_from_bytes, write_file
from .http import (
    AsyncHttpClient,
    BlockingHttpClient,
    HttpRequest,
    HttpResult,
    NetworkError,
    is_success,
)
from .logging_config import setup_logging
from .models.config import ClientConfig
from .security.trust import TrustStore, set_root_ca

__all__ = [
    "__version__",
    # Clients
    "AsyncHttpClient",
    "BlockingHttpClient",
    "HttpRequest",
    "HttpResult",
    "NetworkError",
    "is_success",
    # Config
    "ClientConfig",
    "setup_logging",
    # Auth and TLS
    "bearer_token",
    "get_bearer_token",
    "set_bearer_token",
    "TrustStore",
    "set_root_ca",
    # Files
    "image_from_bytes",
    "write_file",
]
