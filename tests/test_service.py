import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from goster.database import auto_migrate
from goster.domain import DomainError, Role
from goster.repository import UserRepository
from goster.service import RegisterRequest, ServiceError, UserService
from goster.transactions import transaction_factory

PASSWORD = "password"


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


@pytest.fixture
def service(repo, session_factory):
    return UserService(repo, transaction_factory(session_factory))


def test_register_defaults_to_user_role(service, repo):
    user = service.register(RegisterRequest(email="alice@example.com", password=PASSWORD))
    assert user.role == Role.USER.value
    assert user.email == "alice@example.com"
    stored = repo.get_by_email("alice@example.com")
    assert stored.id == user.id
    assert stored.check_password(PASSWORD)


def test_register_keeps_admin_role(service):
    user = service.register(
        RegisterRequest(email="root@example.com", password=PASSWORD, role="admin")
    )
    assert user.role == Role.ADMIN.value
    assert user.is_admin()


def test_register_unknown_role_falls_back(service):
    user = service.register(
        RegisterRequest(email="bob@example.com", password=PASSWORD, role="superuser")
    )
    assert user.role == Role.USER.value


def test_register_duplicate_email(service):
    service.register(RegisterRequest(email="carol@example.com", password=PASSWORD))
    with pytest.raises(ServiceError, match="email already registered"):
        service.register(RegisterRequest(email="carol@example.com", password=PASSWORD))


def test_register_empty_password_persists_nothing(service, repo):
    with pytest.raises(DomainError, match="password cannot be empty"):
        service.register(RegisterRequest(email="dave@example.com", password=""))
    assert repo.exists_by_email("dave@example.com") is False


def test_login_returns_registered_user(service):
    registered = service.register(RegisterRequest(email="erin@example.com", password=PASSWORD))
    logged_in = service.login("erin@example.com", PASSWORD)
    assert logged_in.id == registered.id


def test_login_wrong_password(service):
    service.register(RegisterRequest(email="frank@example.com", password=PASSWORD))
    with pytest.raises(ServiceError, match="invalid credentials"):
        service.login("frank@example.com", "secret")


def test_login_unknown_email(service):
    with pytest.raises(ServiceError, match="invalid credentials"):
        service.login("ghost@example.com", PASSWORD)