from typing import Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _with_password(database_url: str, password: Optional[str]) -> str:
    """Inject DATABASE_KEY as the password when the URL does not carry one."""
    url = make_url(database_url)
    if password and not url.password and not url.drivername.startswith("sqlite"):
        url = url.set(password=password)
    return url.render_as_string(hide_password=False)


def make_engine(database_url: str, database_key: Optional[str] = None):
    db_url = _with_password(database_url, database_key)
    kw = dict(pool_pre_ping=True)

    if db_url.startswith("sqlite"):
        kw["connect_args"] = {"check_same_thread": False}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            # Single shared connection so every session sees the same in-memory database
            kw["poolclass"] = StaticPool

    engine = create_engine(db_url, **kw)

    if db_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, _):
            cur = dbapi_connection.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.close()

    return engine


def make_session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def create_schema(engine) -> None:
    """Create all tables. Used for SQLite and tests; Postgres goes through Alembic."""
    import app.models  # noqa: F401  registers the tables on Base.metadata
    Base.metadata.create_all(bind=engine)
