"""
Database definitions and collection constants.
"""
from zoo_api.database.databases import auth_db, zoo_db

__all__ = ["auth_db", "zoo_db"]
