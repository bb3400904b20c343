"""Tests for the provider base class, registry and token helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from oauth_providers import (
    PROVIDERS,
    AuthUser,
    BaseProvider,
    FetchError,
    OAuth2Token,
    ORCIDProvider,
    UnknownProviderError,
    new_provider,
)
from oauth_providers.types import parse_datetime


class EchoProvider(BaseProvider):
    """Minimal provider with a static user info URL."""

    name = "echo"
    display_name = "Echo"
    scopes = ["profile"]
    user_info_url = "https://id.example.com/me"

    async def fetch_auth_user(self, token: OAuth2Token) -> AuthUser:
        data = await self.fetch_raw_user_info(token)
        return AuthUser(id=data.decode(), username=data.decode())


class TestBaseProvider:
    """Tests for BaseProvider."""

    def test_cannot_instantiate(self):
        """Cannot instantiate abstract BaseProvider."""
        with pytest.raises(TypeError):
            BaseProvider()

    def test_config_overrides(self):
        """Config values override class defaults per instance."""
        provider = EchoProvider(config={
            "client_id": "id",
            "client_secret": "secret",
            "redirect_url": "https://app.example.com/cb",
            "scopes": ("openid", "email"),
            "timeout": "5",
        })
        assert provider.client_id == "id"
        assert provider.client_secret == "secret"
        assert provider.redirect_url == "https://app.example.com/cb"
        assert provider.scopes == ["openid", "email"]
        assert provider.timeout == 5.0
        assert EchoProvider.scopes == ["profile"]

    def test_scopes_not_shared(self):
        """Mutating one instance's scopes leaves others alone."""
        first = EchoProvider()
        first.scopes.append("extra")
        assert EchoProvider().scopes == ["profile"]

    def test_unknown_config_key(self):
        """Unknown config keys are rejected."""
        with pytest.raises(ValueError, match="Unknown config keys"):
            EchoProvider(config={"colour": "blue"})

    def test_get_info_has_no_secrets(self):
        """get_info exposes public settings only."""
        info = EchoProvider(config={"client_secret": "secret"}).get_info()
        assert info["name"] == "echo"
        assert info["display_name"] == "Echo"
        assert info["scopes"] == ["profile"]
        assert "client_secret" not in info
        assert "secret" not in info.values()

    @pytest.mark.asyncio
    async def test_fetch_raw_user_info(self, httpx_mock):
        """Static user info URL is fetched with the token."""
        httpx_mock.add_response(url="https://id.example.com/me", content=b"user-1")
        provider = EchoProvider()

        user = await provider.fetch_auth_user(OAuth2Token(access_token="abc", token_type="MAC"))

        assert user.id == "user-1"
        assert httpx_mock.get_request().headers["Authorization"] == "MAC abc"

    @pytest.mark.asyncio
    async def test_fetch_raw_user_info_without_url(self):
        """Missing user info URL raises FetchError."""
        provider = EchoProvider(config={"user_info_url": ""})
        with pytest.raises(FetchError):
            await provider.fetch_raw_user_info(OAuth2Token(access_token="abc"))


class TestProviderRegistry:
    """Tests for provider registry."""

    def test_orcid_registered(self):
        """ORCID is in the registry."""
        assert PROVIDERS["orcid"] is ORCIDProvider

    def test_providers_are_classes(self):
        """Registry contains provider classes."""
        for name, cls in PROVIDERS.items():
            assert issubclass(cls, BaseProvider), f"{name} is not a BaseProvider subclass"

    def test_new_provider(self):
        """new_provider builds a configured instance."""
        provider = new_provider("orcid", {"client_id": "APP-1"})
        assert isinstance(provider, ORCIDProvider)
        assert provider.client_id == "APP-1"

    def test_new_provider_unknown(self):
        """Unknown names raise UnknownProviderError."""
        with pytest.raises(UnknownProviderError) as exc_info:
            new_provider("myspace")
        assert exc_info.value.name == "myspace"


class TestOAuth2Token:
    """Tests for OAuth2Token."""

    def test_lookup(self):
        """lookup returns non-empty strings only."""
        token = OAuth2Token(
            access_token="a",
            extra_fields={"orcid": "0000", "empty": "", "number": 5},
        )
        assert token.lookup("orcid") == "0000"
        assert token.lookup("empty") is None
        assert token.lookup("number") is None
        assert token.lookup("missing") is None
        assert token.extra("number") == 5
        assert token.extra("missing") is None

    @pytest.mark.parametrize(
        "token_type,expected",
        [("", "Bearer"), ("bearer", "Bearer"), ("mac", "MAC"), ("basic", "Basic"), ("DPoP", "DPoP")],
    )
    def test_type(self, token_type, expected):
        """Token type is normalized."""
        assert OAuth2Token(access_token="a", token_type=token_type).type() == expected

    def test_from_response(self):
        """Token endpoint payload maps onto the token."""
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        token = OAuth2Token.from_response(
            {
                "access_token": "access",
                "token_type": "bearer",
                "refresh_token": "refresh",
                "expires_in": "631138518",
                "scope": "/authenticate",
                "name": "Ada Lovelace",
                "orcid": "0000-0001-2345-6789",
            },
            now=now,
        )
        assert token.access_token == "access"
        assert token.refresh_token == "refresh"
        assert token.authorization() == "Bearer access"
        assert token.expiry == now + timedelta(seconds=631138518)
        assert token.lookup("orcid") == "0000-0001-2345-6789"
        assert token.lookup("name") == "Ada Lovelace"

    def test_from_response_without_expiry(self):
        """Missing or invalid expires_in leaves expiry unset."""
        assert OAuth2Token.from_response({"access_token": "a"}).expiry is None
        assert OAuth2Token.from_response({"access_token": "a", "expires_in": "soon"}).expiry is None


class TestParseDatetime:
    """Tests for parse_datetime."""

    def test_unset_values(self):
        """None, empty and zero mean unset."""
        assert parse_datetime(None) is None
        assert parse_datetime("") is None
        assert parse_datetime(0) is None

    def test_datetime(self):
        """Naive datetimes are taken as UTC."""
        naive = datetime(2030, 1, 1, 12, 0)
        assert parse_datetime(naive) == naive.replace(tzinfo=timezone.utc)

    def test_timestamp(self):
        """Unix seconds are accepted as numbers and strings."""
        expected = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert parse_datetime(1700000000) == expected
        assert parse_datetime("1700000000") == expected

    @pytest.mark.parametrize(
        "value",
        ["2030-01-01T12:00:00Z", "2030-01-01 12:00:00.000Z", "2030-01-01T14:00:00+02:00"],
    )
    def test_iso_strings(self, value):
        """ISO-8601 variants parse to UTC."""
        assert parse_datetime(value) == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["tomorrow", True, [2030], 1e20])
    def test_invalid(self, value):
        """Unparsable values raise ValueError."""
        with pytest.raises(ValueError):
            parse_datetime(value)
