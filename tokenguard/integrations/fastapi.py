"""FastAPI dependencies for bearer-token authentication.

``init_app`` stores a ``Manager`` on ``app.state``; route handlers then
depend on ``CurrentPayload`` (or ``CurrentAuth`` to refresh/invalidate)::

    app = FastAPI()
    init_app(app)

    @app.get("/me")
    def me(payload: CurrentPayload) -> dict:
        return {"sub": payload["sub"]}
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from tokenguard.auth import JWTAuth
from tokenguard.config import Settings, get_settings
from tokenguard.exceptions import (
    JWTException,
    TokenBlacklistedException,
    TokenExpiredException,
)
from tokenguard.manager import Manager
from tokenguard.payload import Payload
from tokenguard.providers import build_manager, create_redis
from tokenguard.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# Token issuance is the application's concern; tokenUrl only feeds Swagger UI.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def init_app(app: FastAPI, settings: Settings | None = None, manager: Manager | None = None) -> None:
    """Configure logging and attach the token manager to *app*."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if manager is None:
        app.state.redis = create_redis(settings)
        manager = build_manager(settings, redis=app.state.redis)
    app.state.jwt_manager = manager
    app.state.jwt_settings = settings
    logger.info("Token manager ready (blacklist enabled: %s)", manager.blacklist_enabled)


@contextmanager
def _unauthorized(detail: str) -> Iterator[None]:
    try:
        yield
    except TokenExpiredException as exc:
        raise _http_401("Token has expired") from exc
    except TokenBlacklistedException as exc:
        raise _http_401("Token has been revoked") from exc
    except JWTException as exc:
        raise _http_401(detail) from exc


def _http_401(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_manager(request: Request) -> Manager:
    manager = getattr(request.app.state, "jwt_manager", None)
    if manager is None:
        raise RuntimeError("tokenguard is not initialised; call init_app(app) first")
    return manager


def get_jwt_auth(
    request: Request,
    token: Annotated[str, Depends(oauth2_scheme)],
) -> JWTAuth:
    """Request-scoped ``JWTAuth`` bound to the bearer token."""
    settings: Settings = getattr(request.app.state, "jwt_settings", None) or get_settings()
    auth = JWTAuth(get_manager(request), lock_subject=settings.lock_subject)
    with _unauthorized("Invalid or expired token"):
        auth.set_token(token)
    return auth


def get_current_payload(auth: Annotated[JWTAuth, Depends(get_jwt_auth)]) -> Payload:
    """Decode the bearer token, check the blacklist, and return its payload."""
    with _unauthorized("Invalid or expired token"):
        return auth.check_or_fail()


CurrentAuth = Annotated[JWTAuth, Depends(get_jwt_auth)]
CurrentPayload = Annotated[Payload, Depends(get_current_payload)]
