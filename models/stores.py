"""
Account and todo stores.

Thin repositories over DBStorage. Every SQLAlchemy error leaves the session
rolled back and surfaces as StorageFailure; a unique-constraint violation on
account creation surfaces as AccountExists.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.db_storage import DBStorage
from models.todo import Todo
from models.user import User
from utils.exceptions import AccountExists, StorageFailure

logger = logging.getLogger(__name__)


class AccountStore:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def find_by_username(self, username: str) -> Optional[User]:
        try:
            session = self.storage.get_session()
            return session.query(User).filter(User.username == username).first()
        except SQLAlchemyError as exc:
            self.storage.rollback()
            raise StorageFailure(details={"db_error": str(exc)}) from exc

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            return self.storage.get(User, user_id)
        except SQLAlchemyError as exc:
            self.storage.rollback()
            raise StorageFailure(details={"db_error": str(exc)}) from exc

    def create(self, username: str, password_hash: str) -> User:
        user = User(username=username, password_hash=password_hash)
        try:
            self.storage.new(user)
            self.storage.save()
        except IntegrityError as exc:
            # lost a registration race for the same username
            raise AccountExists() from exc
        except SQLAlchemyError as exc:
            raise StorageFailure(details={"db_error": str(exc)}) from exc
        return user

    def save(self, account: User) -> None:
        try:
            self.storage.new(account)
            self.storage.save()
        except SQLAlchemyError as exc:
            raise StorageFailure(details={"db_error": str(exc)}) from exc

    def swap_refresh_token(self, account: User, expected: Optional[str], new: Optional[str]) -> bool:
        """
        Set the stored refresh token to ``new`` only if it still equals
        ``expected``. Returns False when another writer got there first.
        """
        session = self.storage.get_session()
        try:
            result = session.execute(
                User.__table__.update()
                .where(User.__table__.c.id == account.id)
                .where(User.__table__.c.refresh_token == expected)
                .values(refresh_token=new)
            )
            self.storage.save()
        except SQLAlchemyError as exc:
            self.storage.rollback()
            raise StorageFailure(details={"db_error": str(exc)}) from exc

        if result.rowcount != 1:
            logger.debug("refresh token swap lost for user_id=%s", account.id)
            return False
        # keep the identity-mapped instance in line with the row
        session.expire(account, ["refresh_token"])
        return True


class TodoStore:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def find_by_owner(self, user_id: str) -> List[Todo]:
        try:
            session = self.storage.get_session()
            return (
                session.query(Todo)
                .filter(Todo.owner_id == user_id)
                .order_by(Todo.created_at.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            self.storage.rollback()
            raise StorageFailure(details={"db_error": str(exc)}) from exc

    def create(self, owner_id: str, title: str) -> Todo:
        todo = Todo(owner_id=owner_id, title=title, completed=False)
        try:
            self.storage.new(todo)
            self.storage.save()
        except SQLAlchemyError as exc:
            raise StorageFailure(details={"db_error": str(exc)}) from exc
        return todo
