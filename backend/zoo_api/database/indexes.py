"""
Index management, run on application startup.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import OperationFailure

from zoo_api.database.databases import auth_db, zoo_db

logger = logging.getLogger(__name__)


async def _create_collection_indexes(db: AsyncIOMotorDatabase, indexes: dict) -> None:
    for collection_name, index_defs in indexes.items():
        collection = db[collection_name]
        for index_def in index_defs:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            try:
                await collection.create_index(keys, **kwargs)
            except OperationFailure as e:
                # Index might already exist with different options
                logger.warning(f"Could not create index {keys} on {collection_name}: {e}")


async def create_indexes(client: AsyncIOMotorClient) -> None:
    """Create necessary indexes for all databases."""
    await _create_collection_indexes(client[auth_db.DB_NAME], auth_db.Collections.INDEXES)
    await _create_collection_indexes(client[zoo_db.DB_NAME], zoo_db.Collections.INDEXES)
