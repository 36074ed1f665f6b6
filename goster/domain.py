"""User entity and role rules."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import bcrypt
from sqlalchemy import DateTime, Integer, String, Uuid, event
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

BCRYPT_COST = 10
DEFAULT_TOKENS = 1000


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class DomainError(ValueError):
    """Raised when a user violates a domain rule."""


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="user", server_default="user"
    )
    tokens: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_TOKENS, server_default=str(DEFAULT_TOKENS)
    )
    password_hash: Mapped[Optional[str]] = mapped_column(String)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def prepare_for_create(self) -> None:
        """Assign a random id if missing and check the role."""
        if self.id is None:
            self.id = uuid.uuid4()
        try:
            self.role = Role(self.role).value
        except ValueError:
            raise DomainError("invalid role: must be 'admin' or 'user'") from None

    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def is_user(self) -> bool:
        return self.role == Role.USER

    def set_password(self, plain_password: str) -> None:
        if not plain_password:
            raise DomainError("password cannot be empty")
        raw = plain_password.encode()
        if len(raw) > 72:
            raise DomainError("bcrypt: password length exceeds 72 bytes")
        self.password_hash = bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_COST)).decode()

    def check_password(self, plain_password: str) -> bool:
        try:
            return bool(self.password_hash) and bcrypt.checkpw(
                plain_password.encode(), self.password_hash.encode()
            )
        except ValueError:
            return False


@event.listens_for(User, "before_insert")
def _before_insert(mapper, connection, target: User) -> None:
    target.prepare_for_create()