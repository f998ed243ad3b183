"""
Unit tests for bearer token validation and the identity dependency.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from pydantic import ValidationError

from rolegate.errors.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    RevokedTokenError,
    UnauthorizedError,
)
from rolegate.security import (
    Identity,
    decode_bearer_token,
    get_current_identity,
    require_identity,
    revoke_token,
    token_expiry,
)


def make_token(settings, **claims):
    payload = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    payload.update(claims)
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def test_decode_valid_token(test_settings):
    token = make_token(test_settings, email="u@e.com", sub="sub-1")
    payload = decode_bearer_token(token, test_settings)
    assert payload["email"] == "u@e.com"
    assert token_expiry(payload).tzinfo is not None


def test_decode_expired_token(test_settings):
    token = make_token(
        test_settings,
        email="u@e.com",
        exp=datetime.now(timezone.utc) - timedelta(minutes=1),
    )
    with pytest.raises(ExpiredTokenError):
        decode_bearer_token(token, test_settings)


def test_decode_bad_signature(test_settings):
    token = jwt.encode({"email": "u@e.com"}, "another-secret-of-sufficient-length!", "HS256")
    with pytest.raises(InvalidTokenError):
        decode_bearer_token(token, test_settings)


def test_decode_checks_audience_when_configured(test_settings):
    settings = test_settings.model_copy(update={"JWT_AUDIENCE": "rolegate"})
    good = make_token(settings, email="u@e.com", aud="rolegate")
    bad = make_token(settings, email="u@e.com", aud="someone-else")
    assert decode_bearer_token(good, settings)["aud"] == "rolegate"
    with pytest.raises(InvalidTokenError):
        decode_bearer_token(bad, settings)


def test_token_expiry_missing():
    assert token_expiry({}) is None


@pytest.mark.asyncio
async def test_identity_from_valid_token(session, test_settings):
    token = make_token(test_settings, email="u@e.com", sub="sub-1", role="teacher")
    identity = await get_current_identity(token, session, test_settings)
    assert identity.email == "u@e.com"
    assert identity.role == "teacher"
    assert identity.token == token
    assert identity.expires_at is not None


@pytest.mark.asyncio
async def test_identity_falls_back_to_sub(session, test_settings):
    token = make_token(test_settings, sub="u@e.com")
    identity = await get_current_identity(token, session, test_settings)
    assert identity.email == "u@e.com"
    assert identity.role is None


@pytest.mark.asyncio
async def test_no_token_yields_no_identity(dummy_session, test_settings):
    assert await get_current_identity(None, dummy_session, test_settings) is None
    dummy_session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_token_without_subject_is_invalid(session, test_settings):
    token = make_token(test_settings, role="teacher")
    with pytest.raises(InvalidTokenError):
        await get_current_identity(token, session, test_settings)


@pytest.mark.asyncio
async def test_revoked_token_is_rejected(session, test_settings):
    token = make_token(test_settings, email="u@e.com")
    await revoke_token(session, token)
    with pytest.raises(RevokedTokenError):
        await get_current_identity(token, session, test_settings)


@pytest.mark.asyncio
async def test_require_identity():
    identity = Identity(email="u@e.com")
    assert await require_identity(identity) is identity
    with pytest.raises(UnauthorizedError):
        await require_identity(None)


def test_identity_is_immutable():
    identity = Identity(email="u@e.com")
    with pytest.raises(ValidationError):
        identity.email = "other@e.com"
