"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from oauth_providers import OAuth2Token, ORCIDProvider  # noqa: E402

ORCID_ID = "0000-0001-2345-6789"
PROFILE_URL = f"https://pub.orcid.org/v3.0/{ORCID_ID}/person"


@pytest.fixture
def orcid_id():
    """Test ORCID iD."""
    return ORCID_ID


@pytest.fixture
def profile_url():
    """Profile endpoint for the test ORCID iD."""
    return PROFILE_URL


@pytest.fixture
def provider():
    """ORCID provider with test client credentials."""
    return ORCIDProvider(config={"client_id": "APP-TEST", "client_secret": "secret"})


@pytest.fixture
def orcid_token():
    """Token as returned by the ORCID token endpoint."""
    return OAuth2Token(
        access_token="access-123",
        token_type="bearer",
        refresh_token="refresh-456",
        extra_fields={"orcid": ORCID_ID, "name": "Ada Lovelace"},
    )


@pytest.fixture
def sample_person():
    """Sample ORCID /person document."""
    return {
        "last-modified-date": {"value": 1700000000000},
        "name": {
            "given-names": {"value": "Ada"},
            "family-name": {"value": "Lovelace"},
            "credit-name": {"value": ""},
            "path": ORCID_ID,
        },
        "emails": {
            "email": [{"email": "ada@example.org", "verified": True}],
            "path": f"/{ORCID_ID}/email",
        },
        "biography": None,
        "path": f"/{ORCID_ID}/person",
    }
