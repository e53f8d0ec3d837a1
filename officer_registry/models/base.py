"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from officer_registry.config import get_settings

settings = get_settings()

# pool_pre_ping=True tests connections before using them,
# which handles a database restart or a stale connection.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# autoflush=False means SQLAlchemy won't send SQL until we
# flush or commit. The mutation coordinator owns the commit,
# and the audit recorder opens its own sessions from this
# same factory.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


def get_db():
    """
    Provide a database session for a single request.

    The try/finally guarantees the session is closed when the
    request finishes, even if an error occurs, so connections
    are never leaked from the pool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
