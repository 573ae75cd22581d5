"""
FastAPI Dependencies

Resolves per-request collaborators from ``app.state`` (populated once by the
application factory) and authenticates bearer tokens.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ordering_api.core.config import Settings
from ordering_api.core.exceptions import AuthError
from ordering_api.database import get_db
from ordering_api.services import CredentialStore, Identity, OrderEngine, QueryLayer, TokenService

# auto_error=False so a missing header surfaces as AuthError (401), not 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> Identity:
    """Identity carried by the request's bearer token."""
    if credentials is None:
        raise AuthError("Access token missing")
    return token_service.verify(credentials.credentials)


def get_credential_store(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> CredentialStore:
    return CredentialStore(db, bcrypt_rounds=settings.bcrypt_rounds)


def get_order_engine(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> OrderEngine:
    return OrderEngine(db, initial_status=settings.initial_order_status)


def get_query_layer(db: AsyncSession = Depends(get_db)) -> QueryLayer:
    return QueryLayer(db)
