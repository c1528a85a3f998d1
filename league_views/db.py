"""
Database connection and setup
SQLite by default, any SQLAlchemy URL via LEAGUE_DATABASE_URL
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from league_views.models import Base
from config.settings import settings

logger = logging.getLogger("store")


def make_engine(database_url: str = settings.database_url, echo: bool = settings.database_echo):
    """
    Create an engine; SQLite needs check_same_thread off because store
    reads run on worker threads.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=echo)


engine = make_engine()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """
    Initialize database - create all tables
    Safe to call multiple times (won't recreate existing tables)
    """
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info(f"Database initialized at: {bind.url}")
