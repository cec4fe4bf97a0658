"""
Database package: engine, sessions and table models.
"""

from .database import (
    Base, engine, SessionLocal, create_engine, create_session_factory,
    get_session_factory, create_tables, drop_tables
)
