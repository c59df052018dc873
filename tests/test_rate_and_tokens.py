from datetime import timedelta

from jose import jwt
from slowapi import Limiter
from slowapi.util import get_remote_address

from ticketdesk.auth import create_access_token, create_session_token, decode_session
from ticketdesk.config import JWT_ALGORITHM
from ticketdesk.main import app


def _with_limit(limit: str) -> Limiter:
    """Swap in a fresh limiter with the given default limit; returns the previous one."""
    previous = app.state.limiter
    app.state.limiter = Limiter(key_func=get_remote_address, default_limits=[limit])
    return previous


def test_rate_limit_applies_to_every_route(client):
    previous = _with_limit("2/minute")
    try:
        statuses = [client.get("/api/ping").status_code for _ in range(4)]
    finally:
        app.state.limiter = previous

    assert statuses == [200, 200, 429, 429]


def test_rate_limit_on_login(client, create_user):
    create_user(username="rl_user", password="pass123")
    previous = _with_limit("2/minute")
    try:
        statuses = [
            client.post("/api/auth/login", json={"username": "rl_user", "password": "wrong123"}).status_code
            for _ in range(3)
        ]
        r = client.post("/api/auth/login", json={"username": "rl_user", "password": "wrong123"})
    finally:
        app.state.limiter = previous

    assert statuses == [401, 401, 429]
    assert r.status_code == 429
    assert r.json() == {"error": {"code": "rate_limited", "message": "Rate limit exceeded"}}


def test_token_embeds_identity_and_24h_expiry(create_user):
    user = create_user(username="tok_user")
    token = create_session_token(user)

    session = decode_session(token)
    assert session.user_id == user.id
    assert session.username == "tok_user"
    assert session.issued_at is not None
    assert (session.expires_at - session.issued_at) == timedelta(hours=24)


def test_missing_token_is_401(client):
    r = client.get("/api/tickets")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "authentication_required"
    assert r.headers.get("www-authenticate") == "Bearer"

    r = client.get("/api/tickets", headers={"Authorization": "Basic abc"})
    assert r.status_code == 401


def test_expired_tampered_and_foreign_tokens_are_403(client, create_user):
    user = create_user(username="tok_user2")

    expired = create_session_token(user, expires_delta=timedelta(seconds=-1))
    r = client.get("/api/tickets", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "invalid_token"

    altered = create_session_token(user) + "a"
    r = client.get("/api/tickets", headers={"Authorization": f"Bearer {altered}"})
    assert r.status_code == 403

    foreign = jwt.encode({"sub": user.id, "username": user.username}, "another-secret", algorithm=JWT_ALGORITHM)
    r = client.get("/api/tickets", headers={"Authorization": f"Bearer {foreign}"})
    assert r.status_code == 403


def test_token_without_identity_claims_is_403(client):
    token = create_access_token({"sub": "someone"})
    r = client.get("/api/tickets", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


def test_me_for_vanished_user_is_401(client):
    token = create_access_token({"sub": "00000000-0000-0000-0000-000000000000", "username": "ghost"})
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
