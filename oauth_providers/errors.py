"""Errors raised while resolving an OAuth2 token into a user identity."""

from typing import Optional


class ProviderError(Exception):
    """Base class for identity provider failures."""


class MissingIdentifierError(ProviderError):
    """Raised when the token lacks the identifier needed to locate the profile."""

    def __init__(self, key: str, provider: str = ""):
        self.key = key
        self.provider = provider
        prefix = f"{provider}: " if provider else ""
        super().__init__(f"{prefix}OAuth2 token has no '{key}' identifier")


class FetchError(ProviderError):
    """Raised when the user profile request fails or returns a non-2xx status."""

    def __init__(
        self,
        url: str,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        self.url = url
        self.status_code = status_code
        self.body = body
        if status_code is not None:
            message = f"{message} ({status_code})"
        super().__init__(f"Failed to fetch user profile via {url}: {message}")


class MalformedResponseError(ProviderError):
    """Raised when the user profile body cannot be decoded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Malformed user profile from {url}: {reason}")


class UnknownProviderError(ProviderError):
    """Raised when no provider is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown provider: {name}")
