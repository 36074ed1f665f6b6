"""User registration and login."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .domain import Role, User
from .repository import UserRepository
from .transactions import TransactionContext

_ROLES = {role.value for role in Role}


class ServiceError(Exception):
    """Raised when a user operation is refused."""


@dataclass
class RegisterRequest:
    email: str
    password: str
    role: str = ""


class UserService:
    """Registers users and checks their credentials."""

    def __init__(
        self,
        repository: UserRepository,
        tx_factory: Callable[[], TransactionContext],
    ) -> None:
        self._repository = repository
        self._tx_factory = tx_factory

    def register(self, request: RegisterRequest) -> User:
        """Create a user; unknown roles fall back to ``user``."""
        with self._tx_factory() as tx:
            if self._repository.exists_by_email(request.email):
                raise ServiceError("email already registered")

            role = request.role if request.role in _ROLES else Role.USER.value
            user = User(email=request.email, role=role)
            user.set_password(request.password)

            self._repository.create(user)
            tx.commit()
        return user

    def login(self, email: str, password: str) -> User:
        """Return the user whose credentials match."""
        user = self._repository.get_by_email(email)
        if user is None or not user.check_password(password):
            raise ServiceError("invalid credentials")
        return user