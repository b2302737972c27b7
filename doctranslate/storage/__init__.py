"""Persistence of translation jobs."""

from .database import Base, init_db, make_engine, make_session_factory
from .document_service import DocumentService

__all__ = ["Base", "DocumentService", "init_db", "make_engine", "make_session_factory"]
