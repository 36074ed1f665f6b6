"""Persistence of users."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .domain import User
from .transactions import SessionFactory, TransactionError, get_transaction


class UserRepository:
    """Stores and looks up users, inside the active transaction if there is one."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[tuple[Session, bool]]:
        try:
            active = get_transaction()
        except TransactionError:
            with self._session_factory() as session:
                session.expire_on_commit = False
                yield session, True
        else:
            yield active, False

    def create(self, user: User) -> None:
        """Insert user; outside a transaction the insert is committed at once."""
        with self._session() as (session, owned):
            session.add(user)
            if owned:
                session.commit()
            else:
                session.flush()

    def get_by_email(self, email: str) -> Optional[User]:
        with self._session() as (session, _):
            return session.scalars(select(User).where(User.email == email).order_by(User.id).limit(1)).first()

    def exists_by_email(self, email: str) -> bool:
        with self._session() as (session, _):
            return session.scalar(select(func.count()).select_from(User).where(User.email == email)) > 0