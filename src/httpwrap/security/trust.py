"""Extra root CA certificates for TLS verification."""

from __future__ import annotations

import logging
import ssl
import threading
from pathlib import Path
from typing import Union

from ..http.errors import NetworkError

logger = logging.getLogger(__name__)

PEM_MARKER = b"-----BEGIN CERTIFICATE-----"

# PEM text or DER bytes, as accepted by SSLContext.load_verify_locations(cadata=...)
CaData = Union[str, bytes]


def load_certificate(path: Union[str, Path]) -> CaData:
    """
    Read and validate a PEM or DER certificate file.

    Args:
        path: Path to the certificate file

    Returns:
        Certificate data suitable for ``cadata``

    Raises:
        NetworkError: With status 0 if the file cannot be read or
            does not contain a valid certificate
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.debug(f"Unable to load root certificate {path}: {e}")
        raise NetworkError(0, f"Unable to load root certificate {path}: {e.strerror or e}") from e

    cadata: CaData = raw.decode("ascii", errors="replace") if PEM_MARKER in raw else raw

    # Validate now so a bad file fails at configuration time
    verifier = ssl.create_default_context()
    try:
        verifier.load_verify_locations(cadata=cadata)
    except (ssl.SSLError, ValueError) as e:
        raise NetworkError(0, f"Invalid root certificate {path}: {e}") from e

    return cadata


class TrustStore:
    """
    Set of extra root certificates trusted on top of the system defaults.

    A store may have a parent; its certificates are then the parent's
    plus its own, so a per-client store still sees certificates added to
    the process-wide store later on.

    Thread-safe: additions are guarded by a lock, and the derived
    SSLContext is rebuilt only when the certificate set changes.

    Example:
        store = TrustStore()
        store.add_certificate_file("certs/internal-ca.pem")
        async with session.get(url, ssl=store.ssl_context()) as response:
            ...
    """

    def __init__(self, parent: TrustStore | None = None):
        self._parent = parent
        self._cadata: list[CaData] = []
        self._generation = 0
        self._lock = threading.Lock()
        self._context: ssl.SSLContext | None = None
        self._context_key: tuple[int, ...] | None = None

    def add_certificate_file(self, path: Union[str, Path]) -> None:
        """
        Trust the certificate in ``path`` for all future TLS connections.

        Raises:
            NetworkError: With status 0 if the certificate cannot be loaded
        """
        cadata = load_certificate(path)
        with self._lock:
            self._cadata.append(cadata)
            self._generation += 1
        logger.info(f"Added root certificate {path}")

    def reset(self) -> None:
        """Forget all extra certificates held by this store."""
        with self._lock:
            self._cadata.clear()
            self._generation += 1

    def _key(self) -> tuple[int, ...]:
        parent_key = self._parent._key() if self._parent else ()
        return (*parent_key, self._generation)

    def certificates(self) -> list[CaData]:
        """Return parent certificates followed by this store's own."""
        inherited = self._parent.certificates() if self._parent else []
        with self._lock:
            return inherited + list(self._cadata)

    def ssl_context(self) -> ssl.SSLContext | None:
        """
        Build (or reuse) an SSLContext trusting the system CAs plus extras.

        Returns:
            SSLContext, or None if there are no extra certificates and the
            network stack's default verification applies
        """
        key = self._key()
        certificates = self.certificates()
        if not certificates:
            return None

        with self._lock:
            if self._context is not None and self._context_key == key:
                return self._context

        context = ssl.create_default_context()
        for cadata in certificates:
            context.load_verify_locations(cadata=cadata)

        with self._lock:
            self._context = context
            self._context_key = key
        return context


# Process-wide store used by every client
default_trust_store = TrustStore()


def set_root_ca(cert_path: Union[str, Path]) -> None:
    """
    Add a root certificate to the process-wide trust store.

    Raises:
        NetworkError: With status 0 if the certificate cannot be loaded
    """
    default_trust_store.add_certificate_file(cert_path)
