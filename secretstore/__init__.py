"""secretstore - key material persistence in third-party secret vaults."""

__version__ = "0.1.0"
