from datetime import UTC, datetime, timedelta

from src.api.auth_utils import (
    actor_from_claims,
    create_access_token,
    create_actor_token,
    decode_access_token,
)
from src.domain.entities import ActorContext


def test_actor_token_round_trip() -> None:
    actor = ActorContext(actor_id="42", display_name="Ada", capabilities=["edit_posts"])

    payload = decode_access_token(create_actor_token(actor))

    assert payload is not None
    assert actor_from_claims(payload) == actor


def test_expired_token_is_rejected() -> None:
    token = create_access_token(
        {"sub": "1"},
        expires_delta=timedelta(minutes=5),
        now_utc=datetime.now(UTC) - timedelta(hours=1),
    )

    assert decode_access_token(token) is None


def test_garbage_token() -> None:
    assert decode_access_token("not-a-token") is None


def test_claims_without_subject() -> None:
    assert actor_from_claims({"caps": ["edit_posts"]}) is None
    assert actor_from_claims({"sub": "1", "caps": "edit_posts"}) is None
    assert actor_from_claims({"sub": "1"}) == ActorContext(actor_id="1")
