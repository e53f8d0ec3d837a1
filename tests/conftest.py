"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real one. Tables are created before each test and dropped after.
The audit recorder writes inline and the cache is an in-process
backend driven by a fake clock, so every effect of a mutation is
visible as soon as the call returns.
"""

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import create_engine, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from officer_registry.dependencies import get_audit_recorder, get_cache
from officer_registry.main import app
from officer_registry.models import AuditLog
from officer_registry.models.base import Base, get_db
from officer_registry.schemas.context import Principal, RequestContext
from officer_registry.services.audit_recorder import AuditRecorder
from officer_registry.services.cache import CacheGateway, MemoryBackend


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

ADMIN_HEADERS = {
    "X-User-Id": "1",
    "X-Username": "chief",
    "X-User-Role": "admin",
}

FEDERAL_HEADERS = {
    "X-User-Id": "2",
    "X-Username": "agent",
    "X-User-Role": "federal",
}


class FakeClock:
    """A monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class BrokenBackend:
    """A cache backend whose every call fails like an unreachable Redis."""

    def get(self, name):
        raise RedisConnectionError("cache unreachable")

    def set(self, name, value, ex=None):
        raise RedisConnectionError("cache unreachable")

    def delete(self, *names):
        raise RedisConnectionError("cache unreachable")

    def ping(self):
        raise RedisConnectionError("cache unreachable")


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_backend(clock):
    return MemoryBackend(clock=clock)


@pytest.fixture
def cache(cache_backend):
    return CacheGateway(cache_backend, ttl_seconds=300)


@pytest.fixture
def broken_cache():
    return CacheGateway(BrokenBackend())


@pytest.fixture
def session_factory():
    return TestSessionLocal


@pytest.fixture
def recorder(session_factory):
    """Audit recorder writing inline through its own sessions."""
    return AuditRecorder(session_factory)


@pytest.fixture
def broken_recorder():
    """Audit recorder whose store rejects every write."""
    def broken_session_factory():
        raise OperationalError("INSERT INTO audit_log", {}, Exception("disk full"))
    return AuditRecorder(broken_session_factory)


@pytest.fixture
def admin():
    return Principal(id=1, username="chief", role="admin")


@pytest.fixture
def context(admin):
    return RequestContext(actor=admin, method="PUT", endpoint="/officers")


@pytest.fixture
def audit_entries(db_session):
    """Return a callable listing audit entries, oldest first."""
    def _entries():
        return list(db_session.execute(
            select(AuditLog).order_by(AuditLog.id)
        ).scalars().all())
    return _entries


@pytest.fixture
def client(db_session, recorder, cache):
    """
    Provide a test client wired to the test database, the inline
    recorder and the in-process cache.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_audit_recorder] = lambda: recorder
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture
def federal_headers():
    return dict(FEDERAL_HEADERS)
