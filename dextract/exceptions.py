from typing import Optional


class DextractError(Exception):
    """Base exception for the caching and adapter layer."""

    pass


class UnsupportedChainError(DextractError):
    """Raised when a chain/network pair has no adapter or upstream alias."""

    def __init__(self, message: str, chain: Optional[str] = None):
        self.message = message
        self.chain = chain
        super().__init__(self.message)


class AdapterNotFoundError(DextractError, LookupError):
    """Raised when a registry has nothing under the requested key."""

    pass


class TokensNotFoundError(DextractError):
    """Raised when one or both tokens of a swap cannot be resolved."""

    pass


class NoRoutesFoundError(DextractError):
    """Raised when the routing provider returns no candidate routes."""

    pass


class UpstreamRequestFailedError(DextractError):
    """Wrapped HTTP/provider error."""

    def __init__(
        self, message: str, provider: Optional[str] = None, status: Optional[int] = None
    ):
        self.message = message
        self.provider = provider
        self.status = status
        super().__init__(self.message)


class CloudflareKVError(DextractError):
    """Raised by the Cloudflare KV backend on a non-successful response."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.message = message
        self.status = status
        super().__init__(self.message)
