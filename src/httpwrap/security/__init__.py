"""TLS trust configuration for httpwrap."""

from .trust import TrustStore, default_trust_store, load_certificate, set_root_ca

__all__ = ["TrustStore", "default_trust_store", "load_certificate", "set_root_ca"]
