"""Database module for SQLite persistence.

Provides:
- Database connection management (one transaction per get_db() block)
- Schema initialization
- Repository functions for users and reference data
"""

from doubtdesk.db.database import get_db, get_db_path, init_db

__all__ = ["get_db", "get_db_path", "init_db"]
