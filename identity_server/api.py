"""REST API endpoints for the identity server."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from oauth_providers import (
    BaseProvider,
    FetchError,
    MalformedResponseError,
    MissingIdentifierError,
    OAuth2Token,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

# Set by main.py during initialization
_providers: Dict[str, BaseProvider] = {}


def init_api(providers: Dict[str, BaseProvider]) -> None:
    """Initialize API with the loaded providers."""
    global _providers
    _providers = providers


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    timestamp: str
    providers: int


class ProviderInfo(BaseModel):
    name: str
    display_name: str
    pkce: bool
    scopes: List[str]
    auth_url: str
    token_url: str


class TokenRequest(BaseModel):
    access_token: str
    refresh_token: str = ""
    token_type: str = ""
    expiry: Optional[datetime] = None
    extra: Dict[str, Any] = Field(default_factory=dict)


class AuthUserResponse(BaseModel):
    id: str
    name: str
    username: str
    email: str
    avatar_url: str
    raw_user: Dict[str, Any]
    access_token: str
    refresh_token: str
    expiry: Optional[str] = None


def _error_detail(kind: str, error: Exception) -> Dict[str, str]:
    return {"error": kind, "message": str(error)}


# Endpoints
@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        providers=len(_providers),
    )


@router.get("/providers", response_model=List[ProviderInfo])
async def list_providers():
    """List all loaded providers."""
    return [ProviderInfo(**p.get_info()) for p in _providers.values()]


@router.post("/providers/{name}/user", response_model=AuthUserResponse)
async def resolve_user(name: str, request: TokenRequest):
    """Resolve an OAuth2 token into a normalized user via the named provider."""
    provider = _providers.get(name)
    if not provider:
        raise HTTPException(status_code=404, detail=f"Provider not found: {name}")

    token = OAuth2Token(
        access_token=request.access_token,
        token_type=request.token_type,
        refresh_token=request.refresh_token,
        expiry=request.expiry,
        extra_fields=request.extra,
    )

    try:
        user = await provider.fetch_auth_user(token)
    except MissingIdentifierError as e:
        raise HTTPException(status_code=400, detail=_error_detail("missing_identifier", e))
    except FetchError as e:
        logger.error(f"Profile fetch failed for {name}: {e}")
        raise HTTPException(status_code=502, detail=_error_detail("fetch_failed", e))
    except MalformedResponseError as e:
        logger.error(f"Malformed profile from {name}: {e}")
        raise HTTPException(status_code=502, detail=_error_detail("malformed_response", e))

    logger.info(f"Resolved {name} user: {user.username}")
    return AuthUserResponse(**user.to_dict())
