"""
Database Session Management - Core database connectivity layer
"""

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from datetime import datetime, timezone
from typing import Generator
import logging

from task_tracker.core.config import settings

logger = logging.getLogger(__name__)

def utcnow() -> datetime:
    """Naive UTC timestamp used for all created_at/updated_at columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")

def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.
    Pool sizing only applies to server databases; SQLite uses its own pool classes.
    """
    if is_sqlite_url(database_url):
        new_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},  # Sessions may cross threads under the test client
            echo=echo,
        )
    else:
        new_engine = create_engine(
            database_url,  # PostgreSQL connection string from environment
            pool_size=settings.DB_POOL_SIZE,  # Number of persistent connections
            max_overflow=settings.DB_MAX_OVERFLOW,  # Additional connections when pool is exhausted
            pool_timeout=settings.DB_POOL_TIMEOUT,  # Wait time for available connection
            pool_pre_ping=True,  # Verify connection health before using
            echo=echo,  # Log all SQL queries in debug mode
        )
    register_engine_events(new_engine)
    return new_engine

def register_engine_events(target: Engine) -> None:
    """Attach connection lifecycle listeners to an engine"""

    @event.listens_for(target, "connect")
    def receive_connect(dbapi_conn, connection_record):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        if is_sqlite_url(str(target.url)):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
        logger.debug("🔌 New database connection established")

    @event.listens_for(target, "close")
    def receive_close(dbapi_conn, connection_record):
        logger.debug("🔌 Database connection closed")

engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Session factory - creates new sessions for each request
SessionLocal = sessionmaker(
    autocommit=False,  # Require explicit commits
    autoflush=False,   # Control when changes are flushed to database
    bind=engine,
)

# Base class for all SQLAlchemy models
Base = declarative_base()

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides database session per request.
    Automatically handles session lifecycle and cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"❌ Database error during request: {str(e)}", exc_info=True)
        db.rollback()  # Never leave a half-applied transaction behind
        raise
    finally:
        db.close()
        logger.debug("✅ Database session closed")

def init_db(bind: Engine = None) -> None:
    """
    Create all tables.
    Used for development setup - production should manage schema separately.
    """
    logger.info("🏗️  Creating database tables...")
    try:
        from task_tracker import models  # noqa: F401 - registers tables with Base
        Base.metadata.create_all(bind=bind or engine)
        logger.info("✅ Database tables created successfully")
    except Exception as e:
        logger.error(f"❌ Failed to create database tables: {str(e)}", exc_info=True)
        raise

def check_db_connection() -> bool:
    """
    Verify database connectivity - used for health checks and startup validation.
    Returns True if connection successful, False otherwise.
    """
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        logger.debug("✅ Database connection successful")
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {str(e)}", exc_info=True)
        return False

def get_pool_stats() -> dict:
    """
    Get current database connection pool statistics.
    SQLite pools do not expose sizing, so only the pool class is reported there.
    """
    pool = engine.pool
    stats = {"pool_class": type(pool).__name__}
    for name in ("size", "checkedout", "overflow", "checkedin"):
        reader = getattr(pool, name, None)
        if callable(reader):
            stats[name] = reader()
    return stats

def close_db_connections():
    """Dispose the pool on application shutdown"""
    logger.info("🔌 Closing database connections...")
    engine.dispose()
    logger.info("✅ All database connections closed")
