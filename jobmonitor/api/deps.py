"""FastAPI dependencies: current principal and service construction."""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from jobmonitor.core.config import Settings, get_settings
from jobmonitor.core.database import get_db
from jobmonitor.core.errors import AuthError
from jobmonitor.core.tokens import TokenCodec
from jobmonitor.schemas.auth import SecurityPrincipal
from jobmonitor.services.auth import AuthService
from jobmonitor.services.refresh_tokens import RefreshTokenStore
from jobmonitor.services.users import UserService


def get_token_codec(request: Request) -> TokenCodec:
    """The codec constructed at startup (see jobmonitor.main)."""
    return request.app.state.token_codec


def get_current_principal(request: Request) -> SecurityPrincipal:
    """Principal set by SecurityMiddleware. Raises 401 if the request is anonymous."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthError()
    return principal


def get_refresh_token_store(
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RefreshTokenStore:
    return RefreshTokenStore(db, codec, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(db, codec, settings)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    refresh_tokens: Annotated[RefreshTokenStore, Depends(get_refresh_token_store)],
) -> UserService:
    return UserService(db, refresh_tokens)


CurrentPrincipal = Annotated[SecurityPrincipal, Depends(get_current_principal)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
