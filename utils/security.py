"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from argon2 import PasswordHasher as _Argon2
from argon2.exceptions import InvalidHashError, VerificationError

from utils.result import Err, Ok, Result


class PasswordHasher:
    """One-way password hashing backed by Argon2."""

    def __init__(self, **argon2_params):
        self._ph = _Argon2(**argon2_params)

    def hash(self, password: str) -> str:
        """Hash a plaintext password using Argon2
        """
        return self._ph.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """ Verify a plaintext password against an Argon2 hash
        """
        try:
            return self._ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CredentialSigner:
    """
    Signs and verifies one kind of credential ("access" or "refresh").

    Each kind gets its own secret and its own ``type`` claim, so a token of
    one kind never verifies as the other.
    """

    def __init__(
        self,
        secret: str,
        token_type: str,
        algorithm: str = "HS256",
        issuer: str = "todo-auth-api",
        clock: Callable[[], datetime] = _now,
    ):
        if not secret:
            raise ValueError(f"{token_type} token secret must not be empty")
        self.secret = secret
        self.token_type = token_type
        self.algorithm = algorithm
        self.issuer = issuer
        self._clock = clock

    def sign(self, subject: str, ttl: Optional[timedelta] = None) -> str:
        now = self._clock()
        payload = {
            "iss": self.issuer,
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "type": self.token_type,
            "jti": generate_jti(),
        }
        if ttl is not None:
            payload["exp"] = int((now + ttl).timestamp())
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Result:
        """
        Decode and validate a JWT.
        Returns Ok(subject) or Err(reason); never raises on a bad token.
        Expiry is checked against the signer's clock, not the wall clock.
        """
        try:
            decoded = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["sub", "iat"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError:
            return Err("invalid")

        exp = decoded.get("exp")
        if exp is not None:
            if not isinstance(exp, (int, float)):
                return Err("invalid")
            if exp <= self._clock().timestamp():
                return Err("expired")

        if decoded.get("type") != self.token_type:
            return Err("wrong_type")
        subject = decoded.get("sub")
        if not subject:
            return Err("missing_subject")
        return Ok(subject)
