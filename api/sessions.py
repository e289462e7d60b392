"""
Token session manager: the access/refresh credential lifecycle.

- Access tokens are short-lived JWTs, valid on signature and expiry alone.
- Refresh tokens carry no expiry; one is valid per account, and only while
  it matches the value stored on the account row.
- Login overwrites the stored refresh token, renewal rotates it with a
  compare-and-swap, logout clears it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from utils.exceptions import (
    AccountExists,
    AccountNotFound,
    CredentialMismatch,
    InvalidCredentials,
    InvalidSignature,
    MissingCredential,
)
from utils.result import Err
from utils.security import CredentialSigner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    issuer: str = "todo-auth-api"
    access_ttl: timedelta = timedelta(minutes=15)

    @classmethod
    def from_mapping(cls, config: Mapping) -> "SessionConfig":
        """Build from a Flask config (or any mapping with the same keys)."""
        return cls(
            access_secret=config["ACCESS_TOKEN_SECRET"],
            refresh_secret=config["REFRESH_TOKEN_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "todo-auth-api"),
            access_ttl=config.get("ACCESS_TOKEN_EXPIRES", timedelta(minutes=15)),
        )


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int


class TokenSessionManager:
    def __init__(self, config: SessionConfig, accounts, password_hasher, clock=None):
        if config.access_secret == config.refresh_secret:
            raise ValueError("access and refresh tokens must use different secrets")
        self.config = config
        self.accounts = accounts
        self.password_hasher = password_hasher
        signer_kwargs = {"algorithm": config.algorithm, "issuer": config.issuer}
        if clock is not None:
            signer_kwargs["clock"] = clock
        self.access_signer = CredentialSigner(config.access_secret, "access", **signer_kwargs)
        self.refresh_signer = CredentialSigner(config.refresh_secret, "refresh", **signer_kwargs)

    def register(self, username: str, password: str):
        if self.accounts.find_by_username(username) is not None:
            logger.warning("register: username taken (username=%r)", username)
            raise AccountExists()
        user = self.accounts.create(username, self.password_hasher.hash(password))
        logger.info("register: ok (user_id=%s)", user.id)
        return user

    def authenticate(self, username: str, password: str) -> TokenPair:
        user = self.accounts.find_by_username(username)
        if user is None:
            logger.warning("login: unknown username (username=%r)", username)
            raise AccountNotFound()
        if not self.password_hasher.verify(password, user.password_hash):
            logger.warning("login: bad password (user_id=%s)", user.id)
            raise InvalidCredentials()

        pair = self._mint(user.id)
        # last login wins: no check against whatever was stored before
        user.refresh_token = pair.refresh_token
        self.accounts.save(user)
        logger.info("login: ok (user_id=%s)", user.id)
        return pair

    def renew(self, presented: Optional[str]) -> TokenPair:
        if not presented:
            raise MissingCredential("Refresh token required")
        subject = self._verify(self.refresh_signer, presented)

        user = self.accounts.find_by_id(subject)
        if user is None:
            raise AccountNotFound()
        if user.refresh_token != presented:
            logger.warning("refresh: token not current (user_id=%s)", user.id)
            raise CredentialMismatch()

        pair = self._mint(user.id)
        if not self.accounts.swap_refresh_token(user, presented, pair.refresh_token):
            logger.warning("refresh: lost rotation race (user_id=%s)", user.id)
            raise CredentialMismatch()
        logger.info("refresh: rotated (user_id=%s)", user.id)
        return pair

    def invalidate(self, presented: Optional[str]) -> None:
        user = self.identify(presented)
        user.refresh_token = None
        self.accounts.save(user)
        logger.info("logout: refresh token cleared (user_id=%s)", user.id)

    def identify(self, presented: Optional[str]):
        """Resolve a bearer access token to its account."""
        if not presented:
            raise MissingCredential("Access token required")
        subject = self._verify(self.access_signer, presented)
        user = self.accounts.find_by_id(subject)
        if user is None:
            raise AccountNotFound()
        return user

    def _mint(self, subject: str) -> TokenPair:
        return TokenPair(
            access_token=self.access_signer.sign(subject, ttl=self.config.access_ttl),
            refresh_token=self.refresh_signer.sign(subject),
            expires_in=int(self.config.access_ttl.total_seconds()),
        )

    @staticmethod
    def _verify(signer: CredentialSigner, token: str) -> str:
        result = signer.verify(token)
        if isinstance(result, Err):
            raise InvalidSignature(details={"reason": result.reason})
        return result.value
