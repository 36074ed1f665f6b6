import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from goster.database import auto_migrate
from goster.domain import DEFAULT_TOKENS, DomainError, Role, User
from goster.repository import UserRepository
from goster.transactions import with_transaction


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    auto_migrate(engine)
    yield sessionmaker(bind=engine)
    engine.dispose()


@pytest.fixture
def repo(session_factory):
    return UserRepository(session_factory)


def test_create_and_get_by_email(repo):
    user = User(email="alice@example.com", role=Role.ADMIN.value)
    repo.create(user)

    assert isinstance(user.id, uuid.UUID)
    found = repo.get_by_email("alice@example.com")
    assert found.id == user.id
    assert found.email == "alice@example.com"
    assert found.role == Role.ADMIN.value
    assert found.tokens == DEFAULT_TOKENS
    assert found.created_at is not None


def test_get_missing_returns_none(repo):
    assert repo.get_by_email("nobody@example.com") is None


def test_exists_by_email(repo):
    assert repo.exists_by_email("bob@example.com") is False
    repo.create(User(email="bob@example.com", role=Role.USER.value))
    assert repo.exists_by_email("bob@example.com") is True
    assert repo.exists_by_email("other@example.com") is False


def test_duplicate_email_rejected(repo):
    repo.create(User(email="carol@example.com", role=Role.USER.value))
    with pytest.raises(IntegrityError):
        repo.create(User(email="carol@example.com", role=Role.USER.value))
    assert repo.exists_by_email("carol@example.com") is True


def test_invalid_role_rejected(repo):
    with pytest.raises(DomainError, match="invalid role"):
        repo.create(User(email="dave@example.com", role="root"))
    assert repo.exists_by_email("dave@example.com") is False


def test_create_inside_transaction_is_rolled_back(repo, session_factory):
    with with_transaction(session_factory):
        repo.create(User(email="erin@example.com", role=Role.USER.value))
        assert repo.exists_by_email("erin@example.com") is True
    assert repo.exists_by_email("erin@example.com") is False


def test_create_inside_transaction_is_committed(repo, session_factory):
    with with_transaction(session_factory) as tx:
        repo.create(User(email="frank@example.com", role=Role.USER.value))
        tx.commit()
    found = repo.get_by_email("frank@example.com")
    assert found.email == "frank@example.com"