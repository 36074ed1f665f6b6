"""Request-scoped database transactions."""

from __future__ import annotations

from contextvars import ContextVar
from typing import Callable, Optional

from sqlalchemy.orm import Session

SessionFactory = Callable[[], Session]

_current: ContextVar[Optional[Session]] = ContextVar("goster_transaction", default=None)


class TransactionError(RuntimeError):
    """Raised when no transaction is available or it is already finished."""


class TransactionContext:
    """A unit of work bound to one session.

    Only the context that opened the transaction commits or rolls it back;
    used as a context manager it rolls back on exit unless committed.
    """

    def __init__(self, session: Session, original_request: bool) -> None:
        self.session = session
        self.original_request = original_request
        self._finished = False
        self._token = None

    def _finish(self, action) -> None:
        if not self.original_request:
            return
        if self._finished:
            raise TransactionError("transaction has already been committed or rolled back")
        action()
        self._finished = True

    def commit(self) -> None:
        self._finish(self.session.commit)

    def rollback(self) -> None:
        self._finish(self.session.rollback)

    def __enter__(self) -> TransactionContext:
        if self.original_request:
            self._token = _current.set(self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.original_request:
            return
        try:
            if not self._finished:
                self.rollback()
        finally:
            self.session.close()
            if self._token is not None:
                _current.reset(self._token)
                self._token = None


def get_transaction() -> Session:
    """Return the session of the active transaction."""
    session = _current.get()
    if session is None:
        raise TransactionError("can't extract transaction from context")
    return session


def with_transaction(session_factory: SessionFactory) -> TransactionContext:
    """Open a transaction, or join the one already active."""
    active = _current.get()
    if active is not None:
        return TransactionContext(active, original_request=False)
    session = session_factory()
    session.expire_on_commit = False
    return TransactionContext(session, original_request=True)


def transaction_factory(session_factory: SessionFactory) -> Callable[[], TransactionContext]:
    """Return a callable that opens transactions on session_factory."""
    return lambda: with_transaction(session_factory)