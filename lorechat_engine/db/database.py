"""Database configuration and session management."""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()

# Database configuration
DATABASE_DIR = Path("data")
DATABASE_PATH = DATABASE_DIR / "lorechat.db"
DATABASE_URL = f"sqlite:///{DATABASE_PATH}"
SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _create_engine(url: str, echo: bool = False) -> Engine:
    new_engine = create_engine(
        url,
        connect_args={
            "check_same_thread": False,  # Needed for SQLite
            "timeout": SQLITE_BUSY_TIMEOUT_SECONDS
        },
        echo=echo
    )

    @event.listens_for(new_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return new_engine


engine = _create_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def configure_database(url: str, echo: bool = False) -> Engine:
    """
    Point the session factory at a different database.
    
    Called at startup with the URL from SystemConfig.
    """
    global engine, DATABASE_URL
    engine.dispose()
    engine = _create_engine(url, echo=echo)
    DATABASE_URL = url
    SessionLocal.configure(bind=engine)
    logger.info(f"Database configured: {url}")
    return engine


def get_db() -> Session:
    """
    Get a database session.
    
    Usage in FastAPI endpoints:
        @app.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            # Use db here
            pass
    
    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None):
    """
    Initialize the database.
    
    Creates all tables if they don't exist.
    Should be called on application startup.
    """
    bind = bind or engine

    # Ensure data directory exists for file-backed SQLite
    database = bind.url.database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    
    # Import all models so they're registered with Base
    from lorechat_engine.models import contact, world_book  # noqa: F401
    
    # Create all tables
    Base.metadata.create_all(bind=bind)
    
    # Enable WAL mode for better concurrency (allows readers during writes)
    if database and database != ":memory:":
        with bind.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            conn.execute(text("PRAGMA synchronous=NORMAL"))
            conn.commit()
    
    logger.info(f"Database initialized at: {bind.url}")
