"""
Tests for database connections and initialization.

These tests cover:
- MongoDB and Redis connection lifecycle
- Index creation
- String id parsing
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from bson import ObjectId


class TestMongoDBConnection:
    """Tests for MongoDB connection handling."""

    @pytest.mark.asyncio
    async def test_get_mongo_client_creates_connection_once(self, monkeypatch):
        """get_mongo_client should create the client on first call and reuse it."""
        import zoo_api.database.connections as conn_module

        monkeypatch.setattr(conn_module, "_mongo_client", None)
        with patch("zoo_api.database.connections.AsyncIOMotorClient") as mock_client, \
             patch("zoo_api.database.connections.get_settings") as mock_settings:
            mock_settings.return_value.mongo_uri = "mongodb://test:27017"
            mock_instance = MagicMock()
            mock_client.return_value = mock_instance

            first = await conn_module.get_mongo_client()
            second = await conn_module.get_mongo_client()

        mock_client.assert_called_once_with("mongodb://test:27017")
        assert first is mock_instance
        assert second is first

    @pytest.mark.asyncio
    async def test_close_connections_cleans_up(self, monkeypatch):
        """close_connections should close and forget both connections."""
        import zoo_api.database.connections as conn_module

        mock_mongo = MagicMock()
        mock_redis = AsyncMock()
        monkeypatch.setattr(conn_module, "_mongo_client", mock_mongo)
        monkeypatch.setattr(conn_module, "_redis_client", mock_redis)

        await conn_module.close_connections()

        mock_mongo.close.assert_called_once()
        mock_redis.aclose.assert_called_once()
        assert conn_module._mongo_client is None
        assert conn_module._redis_client is None


class TestDatabaseGetters:
    """Tests for the per-database helpers."""

    @pytest.mark.asyncio
    async def test_getters_return_named_databases(self, mock_connections):
        from zoo_api.database.connections import get_auth_db, get_zoo_db

        auth = await get_auth_db()
        zoo = await get_zoo_db()

        assert auth.name == "auth_db"
        assert zoo.name == "zoo_db"


class TestRedisConnection:
    """Tests for Redis connection handling."""

    @pytest.mark.asyncio
    async def test_get_redis_client_uses_settings(self, monkeypatch):
        import zoo_api.database.connections as conn_module

        monkeypatch.setattr(conn_module, "_redis_client", None)
        with patch("zoo_api.database.connections.Redis") as mock_redis, \
             patch("zoo_api.database.connections.get_settings") as mock_settings:
            mock_settings.return_value.redis_host = "cache"
            mock_settings.return_value.redis_port = 6380

            await conn_module.get_redis_client()

        mock_redis.assert_called_once_with(host="cache", port=6380, decode_responses=True)

    @pytest.mark.asyncio
    async def test_redis_ping_succeeds(self, mock_async_redis):
        assert await mock_async_redis.ping() is True


class TestIndexCreation:
    """Tests for startup index creation."""

    @pytest.mark.asyncio
    async def test_indexes_created_on_users_collection(self, mock_async_mongo_client):
        from zoo_api.database.indexes import create_indexes

        await create_indexes(mock_async_mongo_client)

        info = await mock_async_mongo_client["auth_db"].users.index_information()
        unique_keys = {
            tuple(spec["key"]) for spec in info.values() if spec.get("unique")
        }
        assert (("email", 1),) in unique_keys
        assert (("username", 1),) in unique_keys

    @pytest.mark.asyncio
    async def test_indexes_created_on_zoo_collections(self, mock_async_mongo_client):
        from zoo_api.database.indexes import create_indexes

        await create_indexes(mock_async_mongo_client)

        db = mock_async_mongo_client["zoo_db"]
        animal_keys = [tuple(spec["key"]) for spec in (await db.animals.index_information()).values()]
        visit_keys = [
            tuple(spec["key"]) for spec in (await db.visitor_records.index_information()).values()
        ]
        assert (("habitat", 1),) in animal_keys
        assert (("assigned_keeper", 1),) in animal_keys
        assert (("visit_date", -1),) in visit_keys

    @pytest.mark.asyncio
    async def test_create_indexes_is_idempotent(self, mock_async_mongo_client):
        from zoo_api.database.indexes import create_indexes

        await create_indexes(mock_async_mongo_client)
        await create_indexes(mock_async_mongo_client)


class TestObjectIdParsing:
    """Tests for to_object_id."""

    def test_valid_hex_string_parses(self):
        from zoo_api.database.ids import to_object_id

        oid = ObjectId()
        assert to_object_id(str(oid)) == oid

    def test_object_id_passes_through(self):
        from zoo_api.database.ids import to_object_id

        oid = ObjectId()
        assert to_object_id(oid) is oid

    @pytest.mark.parametrize("value", ["", None, "not-an-id", "123", 42])
    def test_invalid_values_return_none(self, value):
        from zoo_api.database.ids import to_object_id

        assert to_object_id(value) is None
