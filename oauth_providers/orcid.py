"""ORCID identity provider.

ORCID has no provider-wide user info endpoint. The profile lives under the
user's ORCID iD, which the token endpoint returns alongside the access token.

API reference: https://info.orcid.org/documentation/integration-guide/
"""

import json
import logging
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .base import BaseProvider
from .errors import MalformedResponseError, MissingIdentifierError
from .token import OAuth2Token
from .types import parse_datetime
from .user import AuthUser

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_URL_TEMPLATE = "https://pub.orcid.org/v3.0/{orcid_id}/person"


class _Value(BaseModel):
    value: Optional[str] = None


def _text(field: Optional[_Value]) -> str:
    return (field.value or "") if field else ""


class _Name(BaseModel):
    given_names: Optional[_Value] = Field(default=None, alias="given-names")
    family_name: Optional[_Value] = Field(default=None, alias="family-name")
    credit_name: Optional[_Value] = Field(default=None, alias="credit-name")


class _Email(BaseModel):
    email: Optional[str] = None


class _Emails(BaseModel):
    email: Optional[List[Optional[_Email]]] = None


class ORCIDPerson(BaseModel):
    """The parts of an ORCID ``/person`` document used for normalization."""

    name: Optional[_Name] = None
    emails: Optional[_Emails] = None

    @property
    def given_names(self) -> str:
        return _text(self.name.given_names) if self.name else ""

    @property
    def family_name(self) -> str:
        return _text(self.name.family_name) if self.name else ""

    @property
    def credit_name(self) -> str:
        return _text(self.name.credit_name) if self.name else ""

    @property
    def email_addresses(self) -> List[str]:
        if not self.emails or not self.emails.email:
            return []
        return [(entry.email or "") if entry else "" for entry in self.emails.email]

    def display_name(self) -> str:
        """Credit name if set, otherwise given names plus family name."""
        if self.credit_name:
            return self.credit_name

        # given-names is required by ORCID, so it is always populated
        name = self.given_names
        if self.family_name:
            name += " " + self.family_name
        return name

    def primary_email(self) -> str:
        """First listed email, in provider order. Empty if none are public."""
        addresses = self.email_addresses
        return addresses[0] if addresses else ""


class ORCIDProvider(BaseProvider):
    """Authentication via ORCID OAuth2."""

    name = "orcid"
    display_name = "ORCID"
    pkce = True
    scopes = ["/authenticate"]
    auth_url = "https://orcid.org/oauth/authorize"
    token_url = "https://orcid.org/oauth/token"
    # Derived per call from the iD in the token
    user_info_url = ""

    identifier_key = "orcid"
    config_keys = BaseProvider.config_keys + ("profile_url_template",)

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.profile_url_template = DEFAULT_PROFILE_URL_TEMPLATE
        super().__init__(config)
        self._check_profile_url_template()

    def _check_profile_url_template(self) -> None:
        """Reject templates that cannot be filled with an iD alone."""
        template = self.profile_url_template
        if "{orcid_id}" not in template:
            raise ValueError(f"profile_url_template has no {{orcid_id}} placeholder: {template}")
        try:
            template.format(orcid_id="0000-0000-0000-0000")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"Invalid profile_url_template {template!r}: {e!r}") from e

    def profile_url(self, orcid_id: str) -> str:
        """Profile endpoint for the given ORCID iD."""
        return self.profile_url_template.format(orcid_id=orcid_id)

    async def fetch_auth_user(self, token: OAuth2Token) -> AuthUser:
        """Resolve an ORCID token into a normalized user.

        Raises:
            MissingIdentifierError: If the token carries no ORCID iD
            FetchError: If the profile request fails
            MalformedResponseError: If the profile is not a JSON object
        """
        orcid_id = token.lookup(self.identifier_key)
        if not orcid_id:
            logger.warning(f"{self.name}: token response did not include an ORCID iD")
            raise MissingIdentifierError(self.identifier_key, provider=self.name)

        url = self.profile_url(orcid_id)

        # ORCID answers with XML unless JSON is requested explicitly
        data = await self.send_raw_user_info_request(
            url,
            token,
            headers={
                "Accept": "application/json",
                "Content-type": "application/json",
            },
        )

        try:
            raw_user = json.loads(data)
        except ValueError as e:
            raise MalformedResponseError(url, str(e)) from e
        if not isinstance(raw_user, dict):
            raise MalformedResponseError(
                url, f"expected a JSON object, got {type(raw_user).__name__}"
            )

        try:
            person = ORCIDPerson.model_validate_json(data)
        except ValidationError as e:
            raise MalformedResponseError(url, str(e)) from e

        try:
            expiry = parse_datetime(token.expiry)
        except ValueError as e:
            logger.debug(f"{self.name}: ignoring unparsable token expiry: {e}")
            expiry = None

        return AuthUser(
            id=orcid_id,
            name=person.display_name(),
            username=orcid_id,
            email=person.primary_email(),
            raw_user=raw_user,
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            expiry=expiry,
        )
