"""Database connection and session management."""

import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from user_service.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, **overrides: Any) -> Engine:
    """Create an engine with pool settings suited to the database backend.

    SQLite gets ``check_same_thread=False`` and foreign keys switched on,
    server databases get the configured connection pool.

    Args:
        database_url: SQLAlchemy connection URL
        **overrides: Extra keyword arguments passed to ``create_engine``

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    url = make_url(database_url)
    options: dict[str, Any] = {"echo": settings.database_echo}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_pre_ping=True,  # Verify connections before using
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
    options.update(overrides)

    new_engine = create_engine(url, **options)

    if url.get_backend_name() == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless asked per connection
        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session.

    Yields:
        Session: SQLAlchemy database session

    Example:
        ```python
        from user_service.database import get_db

        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
        ```
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    """Create all tables and seed the reference roles.

    Args:
        bind: Engine to initialise, defaults to the application engine
    """
    # Import models so they register on Base.metadata
    from user_service.models.role import seed_roles

    target = bind or engine
    Base.metadata.create_all(bind=target)

    with Session(target) as session:
        seed_roles(session)

    logger.info("Database schema ready on %s", target.url.render_as_string(hide_password=True))
