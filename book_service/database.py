"""
Database Configuration Module

SQLAlchemy 2.0 setup for the SQL storage backend.

We use SYNCHRONOUS SQLAlchemy because:
- FastAPI runs sync endpoints in a threadpool, one thread per request
- The stores already serialize writes with a lock shared per engine
- Simpler to understand and debug

Unlike a module-level engine, the engine here is built by the
application factory from its Settings and handed to the SQL stores.
Tests build their own engine, so no process-wide state leaks between
them.

Session Management Pattern
==========================
The SQL stores open a short session per store operation:
1. Operation starts → session from the factory
2. session.begin() wraps the work in one transaction
3. Commit on success, rollback on failure
4. Session closes when the block ends
"""

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover tables for migrations.
    """
    pass


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite needs a few adjustments:
    - check_same_thread=False, because requests run on pool threads
    - StaticPool for ":memory:" databases, which otherwise vanish when
      the connection that created them is returned to the pool
    - the directory of a file database is created if missing

    Args:
        database_url: SQLAlchemy URL
        echo: Log every statement

    Returns:
        Configured Engine
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections are alive before using
        echo=echo,
    )


def is_single_connection(engine: Engine) -> bool:
    """
    Whether every session of ``engine`` shares one DBAPI connection.

    True for SQLite ":memory:" databases (StaticPool). One sqlite3
    connection cannot run two transactions at once, so stores over such
    an engine must not overlap any of their transactions.
    """
    return isinstance(engine.pool, StaticPool)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Build the session factory used by the SQL stores.

    expire_on_commit=False keeps loaded attributes readable after the
    transaction ends, which is when the stores convert rows to records.
    """
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


def create_tables(engine: Engine) -> None:
    """
    Create all tables that do not exist yet.

    Used at startup of the SQL backend and in tests. For schema changes
    on a real deployment, use the Alembic migrations.
    """
    # Registers the models with Base.metadata
    import book_service.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """
    Drop all tables.

    DANGER: This deletes all data! Only for tests and local resets.
    """
    import book_service.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
