# addonhub/core/database.py
import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from ..core.config import get_settings
from ..domain.db_models import Base

_engine = None
_SessionLocal = None


def make_engine(url: str) -> Engine:
    """
    Create an engine for ``url``. For file backed SQLite the parent folder of
    the database file is created and connections may be shared across the
    threads FastAPI runs sync endpoints on.
    """
    parsed = make_url(url)
    connect_args = {}
    if parsed.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if parsed.database and parsed.database != ":memory:":
            folder = os.path.dirname(parsed.database)
            if folder:
                os.makedirs(folder, exist_ok=True)
    return create_engine(parsed, connect_args=connect_args)


def make_session_factory(engine: Engine, create_tables: bool = False) -> sessionmaker:
    """Session factory bound to ``engine``, in the shape PackageRepo takes."""
    if create_tables:
        Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = make_engine(get_settings().DB_URL)
    return _engine


def get_session_local() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = make_session_factory(get_engine())
    return _SessionLocal


def init_db():
    """Create the package, version and screenshot tables if missing."""
    Base.metadata.create_all(bind=get_engine())


@contextmanager
def get_db(session_factory=None):
    """Yield a session that commits on success and rolls back on error."""
    session = (session_factory or get_session_local())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
