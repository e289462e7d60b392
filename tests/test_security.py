from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from utils.result import Err, Ok
from utils.security import CredentialSigner, PasswordHasher, generate_jti

ACCESS_SECRET = "access-secret-0123456789abcdef-xyz"
REFRESH_SECRET = "refresh-secret-0123456789abcdef-xyz"


@pytest.fixture()
def access() -> CredentialSigner:
    return CredentialSigner(ACCESS_SECRET, "access")


@pytest.fixture()
def refresh() -> CredentialSigner:
    return CredentialSigner(REFRESH_SECRET, "refresh")


def test_sign_and_verify_returns_subject(access: CredentialSigner) -> None:
    token = access.sign("user-1", ttl=timedelta(minutes=15))
    assert access.verify(token) == Ok("user-1")


def test_access_token_claims(access: CredentialSigner) -> None:
    token = access.sign("user-1", ttl=timedelta(minutes=15))
    claims = jwt.decode(token, ACCESS_SECRET, algorithms=["HS256"], issuer="todo-auth-api")

    assert claims["type"] == "access"
    assert claims["exp"] - claims["iat"] == 15 * 60
    assert claims["jti"]


def test_refresh_token_has_no_exp(refresh: CredentialSigner) -> None:
    token = refresh.sign("user-1")
    claims = jwt.decode(token, REFRESH_SECRET, algorithms=["HS256"], issuer="todo-auth-api")
    assert "exp" not in claims


def test_tokens_signed_in_the_same_second_differ(refresh: CredentialSigner) -> None:
    assert refresh.sign("user-1") != refresh.sign("user-1")


def test_verify_with_other_kind_fails(
    access: CredentialSigner, refresh: CredentialSigner
) -> None:
    assert refresh.verify(access.sign("user-1", ttl=timedelta(minutes=1))) == Err("invalid")
    assert access.verify(refresh.sign("user-1")) == Err("invalid")


def test_verify_rejects_wrong_type_under_same_secret() -> None:
    a = CredentialSigner(ACCESS_SECRET, "access")
    b = CredentialSigner(ACCESS_SECRET, "refresh")
    assert b.verify(a.sign("user-1", ttl=timedelta(minutes=1))) == Err("wrong_type")


def test_verify_expired_token() -> None:
    issued = datetime.now(timezone.utc) - timedelta(minutes=16)
    signer = CredentialSigner(ACCESS_SECRET, "access", clock=lambda: issued)
    token = signer.sign("user-1", ttl=timedelta(minutes=15))

    assert CredentialSigner(ACCESS_SECRET, "access").verify(token) == Err("expired")


def test_verify_garbage(access: CredentialSigner) -> None:
    assert access.verify("not.a.jwt") == Err("invalid")


def test_empty_secret_is_rejected() -> None:
    with pytest.raises(ValueError):
        CredentialSigner("", "access")


def test_generate_jti_is_unique() -> None:
    assert generate_jti() != generate_jti()


def test_password_hasher_round_trip() -> None:
    hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    hashed = hasher.hash("pw1")

    assert hashed != "pw1"
    assert hasher.verify("pw1", hashed)
    assert not hasher.verify("pw2", hashed)


def test_password_hasher_rejects_malformed_hash() -> None:
    assert not PasswordHasher().verify("pw1", "not-an-argon2-hash")


def test_verify_checks_expiry_against_signer_clock() -> None:
    issued = datetime.now(timezone.utc) - timedelta(hours=1)
    clock = {"now": issued}
    signer = CredentialSigner(ACCESS_SECRET, "access", clock=lambda: clock["now"])
    token = signer.sign("user-1", ttl=timedelta(minutes=15))

    assert signer.verify(token) == Ok("user-1")
    clock["now"] = issued + timedelta(minutes=15)
    assert signer.verify(token) == Err("expired")
