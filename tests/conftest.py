from __future__ import annotations

from datetime import timedelta
from http.cookies import SimpleCookie
import itertools

import pytest

from api import create_app
from api.sessions import SessionConfig, TokenSessionManager
from utils.security import PasswordHasher


class InMemoryAccount:
    def __init__(self, id: str, username: str, password_hash: str) -> None:
        self.id = id
        self.username = username
        self.password_hash = password_hash
        self.refresh_token: str | None = None


class InMemoryAccountStore:
    def __init__(self) -> None:
        self._rows: dict[str, dict] = {}
        self._seq = itertools.count(1)
        self.saves = 0

    def _load(self, row: dict | None) -> InMemoryAccount | None:
        if row is None:
            return None
        account = InMemoryAccount(row["id"], row["username"], row["password_hash"])
        account.refresh_token = row["refresh_token"]
        return account

    def find_by_username(self, username: str) -> InMemoryAccount | None:
        for row in self._rows.values():
            if row["username"] == username:
                return self._load(row)
        return None

    def find_by_id(self, user_id: str) -> InMemoryAccount | None:
        return self._load(self._rows.get(user_id))

    def create(self, username: str, password_hash: str) -> InMemoryAccount:
        user_id = f"user-{next(self._seq)}"
        self._rows[user_id] = {
            "id": user_id,
            "username": username,
            "password_hash": password_hash,
            "refresh_token": None,
        }
        return self._load(self._rows[user_id])

    def save(self, account: InMemoryAccount) -> None:
        self.saves += 1
        self._rows[account.id]["refresh_token"] = account.refresh_token

    def swap_refresh_token(self, account, expected, new) -> bool:
        row = self._rows[account.id]
        if row["refresh_token"] != expected:
            return False
        self.saves += 1
        row["refresh_token"] = new
        account.refresh_token = new
        return True

    def stored_refresh(self, username: str) -> str | None:
        return self.find_by_username(username).refresh_token

    def count(self, username: str) -> int:
        return sum(1 for row in self._rows.values() if row["username"] == username)


class DeterministicHasher:
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


SESSION_CONFIG = SessionConfig(
    access_secret="unit-access-secret-0123456789abcdef",
    refresh_secret="unit-refresh-secret-0123456789abcdef",
    access_ttl=timedelta(minutes=15),
)


@pytest.fixture()
def accounts() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture()
def manager(accounts: InMemoryAccountStore) -> TokenSessionManager:
    return TokenSessionManager(SESSION_CONFIG, accounts, DeterministicHasher())


@pytest.fixture()
def app():
    # low-cost argon2 parameters for tests
    hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    app = create_app("testing", password_hasher=hasher)
    yield app


@pytest.fixture()
def client(app):
    # refresh cookies are sent explicitly per request
    return app.test_client(use_cookies=False)


def refresh_cookie(response, name: str = "refresh_token") -> str | None:
    for header in response.headers.getlist("Set-Cookie"):
        cookie = SimpleCookie()
        cookie.load(header)
        if name in cookie:
            return cookie[name].value
    return None


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
