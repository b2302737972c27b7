"""SQLAlchemy engine and session factory for the document store."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from doctranslate.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def make_engine(database_url: Optional[str] = None, **kwargs) -> Engine:
    url = database_url or settings.database_url
    if url == settings.database_url and settings.sqlite_path is not None:
        settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, **kwargs)


def init_db(engine: Engine) -> None:
    """Create missing tables."""
    # Registers DocumentRow on Base.metadata.
    from doctranslate.storage import orm  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("Document store ready at %s", engine.url.render_as_string(hide_password=True))


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)
