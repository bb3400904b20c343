"""Provider construction from configuration."""

import logging
from typing import Any, Dict, Optional

from oauth_providers import PROVIDERS, BaseProvider, ProviderError, new_provider

logger = logging.getLogger(__name__)


class ProviderLoader:
    """Builds provider instances from the ``providers`` config section."""

    def __init__(self, provider_config: Optional[Dict[str, Dict[str, Any]]] = None):
        """Initialize loader with optional provider configuration.

        Args:
            provider_config: Dict mapping provider names to their config.
                Example: {"orcid": {"client_id": "APP-123", "client_secret": "..."}}
        """
        self._provider_config = provider_config or {}

    def load_all(self) -> Dict[str, BaseProvider]:
        """Load every configured provider.

        Providers that fail to initialize are logged and skipped.

        Returns:
            Dict mapping provider names to provider instances
        """
        loaded = {}

        for name, config in self._provider_config.items():
            try:
                provider = new_provider(name, config)
            except (ProviderError, ValueError, TypeError) as e:
                logger.error(f"Failed to load provider {name}: {e}")
                continue

            loaded[name] = provider
            logger.info(f"Loaded provider: {name} (scopes: {provider.scopes})")

        return loaded

    def list_available(self) -> list:
        """List all registered provider names."""
        return list(PROVIDERS.keys())
