"""
Centralized database layer for ProjectFlow-AI.

This package provides a unified location for the database entities the agent
core reads and writes, plus engine/session helpers.

Structure:
- entities/: Database entity models organized by table/business logic
- utils.py: Engine, session factory and schema creation helpers

The database capability handed to tools and agents is the
``async_sessionmaker`` returned by ``create_sessionmaker``.
"""

from .base import Base, utc_now
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "utc_now",
]
