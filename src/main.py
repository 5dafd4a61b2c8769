"""Application bootstrap: logging, database and the service wired together for whatever serves the requests."""

import logging
from typing import Generator, Optional

from sqlalchemy.orm import Session, sessionmaker

from src.core.logging_config import configure_logging
from src.core.settings import settings
from src.db.database import create_session_factory, get_db
from src.db.sql_repository import SQLGameRepository
from src.services.quoridor_service import QuoridorService

logger = logging.getLogger(__name__)


def bootstrap(
    database_url: Optional[str] = None, log_level: Optional[str] = None
) -> sessionmaker[Session]:
    """Configure logging, then make sure the database tables exist. Returns the session factory to serve requests with."""
    configure_logging(log_level)
    session_factory = create_session_factory(database_url or settings.database_url)
    logger.info("Database ready")
    return session_factory


def get_quoridor_service(
    session_factory: sessionmaker[Session],
) -> Generator[QuoridorService, None, None]:
    """One service per request, backed by its own database session (closed afterwards)."""
    sessions = get_db(session_factory)
    try:
        yield QuoridorService(SQLGameRepository(next(sessions)))
    finally:
        sessions.close()


def main() -> None:
    """Console entry point: logging + database setup."""
    bootstrap()
