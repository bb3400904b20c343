"""OAuth2 token issued by a provider's token endpoint."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

_CANONICAL_TYPES = {"bearer": "Bearer", "mac": "MAC", "basic": "Basic"}


@dataclass
class OAuth2Token:
    """Credential pair plus the provider-specific fields of the token response.

    The extras bag holds everything the token endpoint returned, so
    provider-specific values (e.g. ORCID's ``orcid`` and ``name``) can be
    read with :meth:`lookup`.
    """

    access_token: str
    token_type: str = ""
    refresh_token: str = ""
    expiry: Optional[datetime] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def type(self) -> str:
        """Authorization scheme for the token, defaulting to Bearer."""
        if not self.token_type:
            return "Bearer"
        return _CANONICAL_TYPES.get(self.token_type.lower(), self.token_type)

    def authorization(self) -> str:
        """Value for the Authorization request header."""
        return f"{self.type()} {self.access_token}"

    def extra(self, key: str) -> Any:
        """Raw extra field, or None if the token response did not carry it."""
        return self.extra_fields.get(key)

    def lookup(self, key: str) -> Optional[str]:
        """Extra field as a string.

        Returns None when the field is absent, empty or not a string.
        """
        value = self.extra_fields.get(key)
        if isinstance(value, str) and value:
            return value
        return None

    @classmethod
    def from_response(
        cls,
        payload: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> "OAuth2Token":
        """Build a token from a token endpoint JSON payload.

        ``expires_in`` is converted to an absolute UTC expiry.
        """
        expiry = None
        expires_in = payload.get("expires_in")
        if expires_in not in (None, ""):
            try:
                seconds = int(expires_in)
            except (TypeError, ValueError):
                seconds = 0
            if seconds > 0:
                now = now or datetime.now(timezone.utc)
                expiry = now + timedelta(seconds=seconds)

        return cls(
            access_token=str(payload.get("access_token") or ""),
            token_type=str(payload.get("token_type") or ""),
            refresh_token=str(payload.get("refresh_token") or ""),
            expiry=expiry,
            extra_fields=dict(payload),
        )
