"""OAuth2 identity providers.

Available providers:
- orcid: ORCID researcher identifiers

Tokens handed to ``fetch_auth_user`` are :class:`OAuth2Token` instances.
Callers that run the code exchange themselves can build one straight from
the token endpoint's JSON with ``OAuth2Token.from_response(payload)``, which
keeps provider extras such as ORCID's ``orcid`` iD.
"""

from typing import Any, Dict, Mapping, Optional, Type

from .base import BaseProvider
from .errors import (
    FetchError,
    MalformedResponseError,
    MissingIdentifierError,
    ProviderError,
    UnknownProviderError,
)
from .orcid import ORCIDProvider
from .token import OAuth2Token
from .user import AuthUser

__all__ = [
    "AuthUser",
    "BaseProvider",
    "FetchError",
    "MalformedResponseError",
    "MissingIdentifierError",
    "OAuth2Token",
    "ORCIDProvider",
    "PROVIDERS",
    "ProviderError",
    "UnknownProviderError",
    "new_provider",
]

# Provider registry, keyed by provider name
PROVIDERS: Dict[str, Type[BaseProvider]] = {
    ORCIDProvider.name: ORCIDProvider,
}


def new_provider(name: str, config: Optional[Mapping[str, Any]] = None) -> BaseProvider:
    """Create a provider instance by registry name.

    Raises:
        UnknownProviderError: If no provider is registered under ``name``
    """
    if name not in PROVIDERS:
        raise UnknownProviderError(name)
    return PROVIDERS[name](config=config)
