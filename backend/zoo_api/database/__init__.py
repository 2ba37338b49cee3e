"""
Database module - MongoDB and Redis connections and database definitions.
"""
from zoo_api.database.connections import (
    get_mongo_client,
    get_redis_client,
    get_auth_db,
    get_zoo_db,
    close_connections,
)
from zoo_api.database.databases import auth_db, zoo_db

__all__ = [
    "get_mongo_client",
    "get_redis_client",
    "get_auth_db",
    "get_zoo_db",
    "close_connections",
    "auth_db",
    "zoo_db",
]
