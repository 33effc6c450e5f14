from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.acquittal_system.acquittal_system.core.exceptions import InvalidToken
from src.acquittal_system.acquittal_system.sessions.token_service import TokenService


def test_issue_and_verify_round_trip():
    tokens = TokenService("s3cret")
    identity = tokens.verify(tokens.issue(7, "alice@example.com"))

    assert identity.user_id == 7
    assert identity.email == "alice@example.com"


def test_token_expires_after_ttl():
    tokens = TokenService("s3cret", expires_hours=24)
    issued = datetime.now(timezone.utc) - timedelta(hours=25)

    with pytest.raises(InvalidToken):
        tokens.verify(tokens.issue(7, "alice@example.com", now=issued))


def test_tampered_or_foreign_tokens_rejected():
    tokens = TokenService("s3cret")
    token = tokens.issue(7, "alice@example.com")

    with pytest.raises(InvalidToken):
        TokenService("other-secret").verify(token)
    with pytest.raises(InvalidToken):
        tokens.verify(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
    with pytest.raises(InvalidToken):
        tokens.verify("not.a.jwt")
    with pytest.raises(InvalidToken):
        tokens.verify("")


def test_missing_user_claim_rejected():
    token = jwt.encode(
        {"email": "a@example.com", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "s3cret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        TokenService("s3cret").verify(token)
