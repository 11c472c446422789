import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt

from src.domain.entities import ActorContext

SECRET_KEY = os.environ.get("SHADOW_DRAFTS_SECRET_KEY", "dev-secret-unsafe")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode in the token
        expires_delta: Optional custom expiration delta
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)

    if expires_delta:
        expire = current_time + expires_delta
    else:
        expire = current_time + timedelta(minutes=15)

    to_encode.update({"exp": expire})
    encoded_jwt: str = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return cast(dict[str, Any], payload)
    except jwt.JWTError:
        return None


def create_actor_token(actor: ActorContext, expires_delta: timedelta | None = None) -> str:
    """Token whose claims carry the actor's id, name and capabilities."""
    return create_access_token(
        {"sub": actor.actor_id, "name": actor.display_name, "caps": actor.capabilities},
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def actor_from_claims(payload: dict[str, Any]) -> ActorContext | None:
    actor_id = payload.get("sub")
    if not actor_id or not isinstance(actor_id, str):
        return None

    caps = payload.get("caps") or []
    if not isinstance(caps, list):
        return None

    return ActorContext(
        actor_id=actor_id,
        display_name=str(payload.get("name") or ""),
        capabilities=[str(c) for c in caps],
    )
