import os
import sys
import fnmatch
import tempfile

import pytest

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

# settings читаются при импорте, поэтому окружение задаём до импорта приложения
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_examhub.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/99")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from examhub.domain.entities import Role, UserProfile
from examhub.infrastructure import cache as cache_module
from examhub.infrastructure.db import get_db
from examhub.infrastructure.models import Base, UserORM
from examhub.infrastructure.rate_limit import limiter
from examhub.infrastructure.security import PasswordHasher, create_access_token
from examhub.main import app

# Файловая БД: контроллер шлёт параллельные запросы, им нужны отдельные соединения
TEST_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="examhub-tests-"), "test.db")
test_engine = create_engine(
    f"sqlite:///{TEST_DB_PATH}",
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

DEFAULT_PASSWORD = "password123"
DEFAULT_PASSWORD_HASH = PasswordHasher().hash(DEFAULT_PASSWORD)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeRedis:
    """Минимальный in-memory двойник клиента redis для кэша профилей"""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value

    def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += self.data.pop(key, None) is not None
        return removed

    def keys(self, pattern):
        return [k for k in self.data if fnmatch.fnmatch(k, pattern)]


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Подменяем Redis, чтобы тесты не зависели от сервера"""
    client = FakeRedis()
    monkeypatch.setattr(cache_module, "get_redis", lambda: client)
    return client


@pytest.fixture(autouse=True)
def reset_rate_limits():
    # Счётчики rate limiting не должны переходить между тестами
    limiter.reset()
    yield


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db):
    """Фикстура для тестового клиента"""
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    # Очищаем после теста
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(db):
    def _make_user(email="u1@example.com", name="User One", role=Role.STUDENT) -> UserProfile:
        row = UserORM(email=email, name=name, password_hash=DEFAULT_PASSWORD_HASH, role=Role(role).value)
        db.add(row); db.commit(); db.refresh(row)
        return UserProfile(id=row.id, email=row.email, name=row.name, role=Role(row.role))
    return _make_user


@pytest.fixture
def stored_user(db):
    """Читает актуальную запись пользователя прямо из БД"""
    def _stored_user(user_id: int) -> UserORM | None:
        db.expire_all()
        return db.query(UserORM).filter(UserORM.id == user_id).first()
    return _stored_user


def auth_headers(user: UserProfile) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}
