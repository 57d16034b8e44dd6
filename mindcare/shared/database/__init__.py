"""Database access for MindCare services.

Provides PostgreSQL connection pooling, health checks and a repository
base class with field-level merge writes.
"""

from .connection import (
    DatabaseConfig,
    ConnectionManager,
    get_connection_manager,
)
from .repository import (
    BaseRepository,
    RepositoryError,
    NotFoundError,
    DuplicateError,
)

__all__ = [
    "DatabaseConfig",
    "ConnectionManager",
    "get_connection_manager",
    "BaseRepository",
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
]
