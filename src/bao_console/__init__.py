"""Admin console and API gateway for OpenBao/Vault-compatible secrets servers."""

__version__ = "0.1.0"
