"""Document store: SQLAlchemy models, session management and the store gateway."""

from .database import get_engine, get_session_factory, init_db, make_session_factory, session_scope
from .store import DocumentStore

__all__ = [
    "DocumentStore",
    "get_engine",
    "get_session_factory",
    "init_db",
    "make_session_factory",
    "session_scope",
]
