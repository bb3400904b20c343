"""Base OAuth2 identity provider interface."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .errors import FetchError
from .token import OAuth2Token
from .user import AuthUser

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for OAuth2 identity providers.

    Subclass this to add a provider:

        class MyProvider(BaseProvider):
            name = "myprovider"
            display_name = "My Provider"
            scopes = ["profile"]
            auth_url = "https://example.com/oauth/authorize"
            token_url = "https://example.com/oauth/token"
            user_info_url = "https://example.com/api/me"

            async def fetch_auth_user(self, token: OAuth2Token) -> AuthUser:
                data = await self.fetch_raw_user_info(token)
                ...

    Class attributes hold the provider defaults. Any of them can be
    overridden per instance through the ``config`` mapping.
    """

    display_name: str = ""
    pkce: bool = False
    scopes: List[str] = []
    auth_url: str = ""
    token_url: str = ""
    user_info_url: str = ""

    # Keys accepted in ``config`` besides the ones above
    config_keys = ("client_id", "client_secret", "redirect_url", "timeout")

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.client_id = ""
        self.client_secret = ""
        self.redirect_url = ""
        self.timeout = 30.0
        self.scopes = list(type(self).scopes)
        self._apply_config(config or {})

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry identifier (e.g., 'orcid')."""
        ...

    def _allowed_keys(self) -> set:
        return {
            "display_name",
            "pkce",
            "scopes",
            "auth_url",
            "token_url",
            "user_info_url",
            *self.config_keys,
        }

    def _apply_config(self, config: Mapping[str, Any]) -> None:
        unknown = set(config) - self._allowed_keys()
        if unknown:
            raise ValueError(
                f"Unknown config keys for provider {self.name}: {sorted(unknown)}"
            )

        for key, value in config.items():
            if key == "scopes":
                value = list(value)
            elif key == "timeout":
                value = float(value)
            setattr(self, key, value)

    def get_info(self) -> Dict[str, Any]:
        """Get public provider info for discovery. Never includes secrets."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "pkce": self.pkce,
            "scopes": list(self.scopes),
            "auth_url": self.auth_url,
            "token_url": self.token_url,
        }

    async def send_raw_user_info_request(
        self,
        url: str,
        token: OAuth2Token,
        headers: Optional[Dict[str, str]] = None,
    ) -> bytes:
        """Send an authorized GET request and return the raw response body.

        Args:
            url: User profile endpoint
            token: Token used for the Authorization header
            headers: Additional request headers

        Returns:
            The response body bytes

        Raises:
            FetchError: On transport errors or a non-2xx response
        """
        request_headers = dict(headers or {})
        request_headers["Authorization"] = token.authorization()

        logger.debug(f"{self.name}: fetching user profile from {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=request_headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"{self.name}: user profile request to {url} failed: {e}")
            raise FetchError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(
                f"{self.name}: user profile request to {url} "
                f"returned {response.status_code}"
            )
            raise FetchError(
                url,
                response.text,
                status_code=response.status_code,
                body=response.text,
            )

        return response.content

    async def fetch_raw_user_info(self, token: OAuth2Token) -> bytes:
        """Fetch the raw profile from the provider's static user info URL."""
        if not self.user_info_url:
            raise FetchError("", f"{self.name} has no user info URL configured")
        return await self.send_raw_user_info_request(self.user_info_url, token)

    @abstractmethod
    async def fetch_auth_user(self, token: OAuth2Token) -> AuthUser:
        """Resolve a token into a normalized user.

        Raises:
            ProviderError: Subclass describing why resolution failed
        """
        ...
