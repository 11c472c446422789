from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.api.auth_utils import actor_from_claims, decode_access_token
from src.app_shell.config import Settings
from src.app_shell.context import ServiceContext
from src.components.actions import DraftActionController
from src.domain.entities import ActorContext
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.shell.hooks.draft_hooks import DraftHooks


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Services ---
def get_context(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> ServiceContext:
    """One SQLite-backed context per request."""
    return ServiceContext.create(settings.db_path, rules)


def get_controller(ctx: ServiceContext = Depends(get_context)) -> DraftActionController:
    return ctx.controller


def get_hooks(ctx: ServiceContext = Depends(get_context)) -> DraftHooks:
    return ctx.hooks


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def get_optional_actor(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> ActorContext | None:
    """Actor from the bearer token; None when no token was sent."""
    if not token:
        return None

    payload = decode_access_token(token)
    actor = actor_from_claims(payload) if payload else None
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor


def get_current_actor(
    actor: ActorContext | None = Depends(get_optional_actor),
) -> ActorContext:
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor
