"""
Animal service: animal CRUD with habitat occupancy kept consistent.
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from zoo_api.core.errors import ConflictError, NotFound, ReferenceNotFound, ValidationError
from zoo_api.database.databases import auth_db, zoo_db
from zoo_api.database.ids import to_object_id
from zoo_api.models.animal import AnimalCategory, HealthStatus
from zoo_api.schemas.animal import (
    AnimalCreate,
    AnimalResponse,
    AnimalUpdate,
    HabitatRef,
    KeeperRef,
)
from zoo_api.schemas.common import MessageResponse
from zoo_api.services.occupancy_service import OccupancyCoordinator

logger = logging.getLogger(__name__)

# Fields that may be omitted from an update but never set to null
NON_NULLABLE_FIELDS = ("name", "species", "category", "gender", "health_status", "arrival_date")


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class AnimalService:
    """Service for animal operations."""

    def __init__(self, db: AsyncIOMotorDatabase, auth_db_instance: AsyncIOMotorDatabase):
        """Initialize with zoo database and auth database (for keepers)."""
        self.animals = db[zoo_db.Collections.ANIMALS]
        self.habitats = db[zoo_db.Collections.HABITATS]
        self.users = auth_db_instance[auth_db.Collections.USERS]
        self.occupancy = OccupancyCoordinator(db)

    # ==================== Reads ====================

    async def list_animals(
        self,
        category: Optional[AnimalCategory] = None,
        health_status: Optional[HealthStatus] = None,
        habitat_id: Optional[str] = None,
    ) -> list[AnimalResponse]:
        """List animals with habitat and keeper expanded."""
        query: dict = {}
        if category is not None:
            query["category"] = _plain(category)
        if health_status is not None:
            query["health_status"] = _plain(health_status)
        if habitat_id is not None:
            oid = to_object_id(habitat_id)
            if oid is None:
                return []
            query["habitat"] = oid

        cursor = self.animals.find(query).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return await self._expand(docs)

    async def count_animals(self) -> int:
        return await self.animals.count_documents({})

    async def get_animal(self, animal_id: str) -> AnimalResponse:
        """Get a single animal with references expanded."""
        doc = await self._find(animal_id)
        return (await self._expand([doc]))[0]

    # ==================== Mutations ====================

    async def create_animal(self, request: AnimalCreate) -> AnimalResponse:
        """
        Create an animal, taking a slot in its habitat if one is given.

        Raises:
            ReferenceNotFound: Habitat or keeper does not exist
            CapacityExceeded: Habitat is full
        """
        habitat_id = self._parse_habitat(request.habitat, "Habitat")
        keeper_id = await self._resolve_keeper(request.assigned_keeper)

        now = datetime.now(timezone.utc)
        animal_doc = {
            "name": request.name,
            "species": request.species,
            "category": _plain(request.category),
            "age": request.age,
            "gender": _plain(request.gender),
            "health_status": _plain(request.health_status),
            "habitat": habitat_id,
            "assigned_keeper": keeper_id,
            "arrival_date": request.arrival_date or now,
            "notes": request.notes,
            "created_at": now,
            "updated_at": now,
        }

        if habitat_id is not None:
            await self.occupancy.reserve_slot(habitat_id, "Habitat")

        try:
            result = await self.animals.insert_one(animal_doc)
        except PyMongoError:
            if habitat_id is not None:
                await self.occupancy.release_slot(habitat_id)
            raise

        animal_doc["_id"] = result.inserted_id
        logger.info(f"Created animal {result.inserted_id} in habitat {habitat_id}")
        return (await self._expand([animal_doc]))[0]

    async def update_animal(self, animal_id: str, request: AnimalUpdate) -> AnimalResponse:
        """
        Apply a partial update to an animal.

        A changed habitat reference moves the animal: the new habitat is
        checked and occupied first, the animal is written, then the old
        habitat's slot is released. An unchanged (or omitted) habitat
        reference skips occupancy handling entirely.

        Raises:
            NotFound: Animal does not exist
            ReferenceNotFound: New habitat or keeper does not exist
            CapacityExceeded: New habitat is full
            ConflictError: Animal's habitat changed underneath this request
        """
        current = await self._find(animal_id)
        changes = {k: _plain(v) for k, v in request.model_dump(exclude_unset=True).items()}

        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        old_habitat = current.get("habitat")
        new_habitat = old_habitat
        if "habitat" in changes:
            new_habitat = self._parse_habitat(changes["habitat"], "New habitat")
            changes["habitat"] = new_habitat
        habitat_changed = new_habitat != old_habitat

        if "assigned_keeper" in changes:
            changes["assigned_keeper"] = await self._resolve_keeper(changes["assigned_keeper"])

        if habitat_changed and new_habitat is not None:
            await self.occupancy.reserve_slot(new_habitat, "New habitat")

        changes["updated_at"] = datetime.now(timezone.utc)
        animal_filter: dict = {"_id": current["_id"]}
        if habitat_changed:
            # Only apply the move if nobody else moved the animal meanwhile
            animal_filter["habitat"] = old_habitat

        try:
            updated = await self.animals.find_one_and_update(
                animal_filter,
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError:
            if habitat_changed and new_habitat is not None:
                await self.occupancy.release_slot(new_habitat)
            raise

        if updated is None:
            if habitat_changed and new_habitat is not None:
                await self.occupancy.release_slot(new_habitat)
            if await self.animals.find_one({"_id": current["_id"]}, {"_id": 1}) is None:
                raise NotFound("Animal not found")
            raise ConflictError("Animal was modified by another request, please retry")

        if habitat_changed and old_habitat is not None:
            await self.occupancy.release_slot(old_habitat)
            logger.info(f"Moved animal {current['_id']} from {old_habitat} to {new_habitat}")

        return (await self._expand([updated]))[0]

    async def delete_animal(self, animal_id: str) -> MessageResponse:
        """Delete an animal and release its habitat slot."""
        oid = to_object_id(animal_id)
        if oid is None:
            raise NotFound("Animal not found")

        deleted = await self.animals.find_one_and_delete({"_id": oid})
        if deleted is None:
            raise NotFound("Animal not found")

        if deleted.get("habitat") is not None:
            await self.occupancy.release_slot(deleted["habitat"])

        logger.info(f"Deleted animal {oid}")
        return MessageResponse(message="Animal deleted successfully")

    # ==================== Helpers ====================

    async def _find(self, animal_id: str) -> dict:
        oid = to_object_id(animal_id)
        doc = await self.animals.find_one({"_id": oid}) if oid is not None else None
        if doc is None:
            raise NotFound("Animal not found")
        return doc

    @staticmethod
    def _parse_habitat(value: Optional[str], label: str) -> Optional[ObjectId]:
        """Empty means "no habitat"; anything else must be a valid id."""
        if not value:
            return None
        oid = to_object_id(value)
        if oid is None:
            raise ReferenceNotFound(f"{label} not found")
        return oid

    async def _resolve_keeper(self, value: Optional[str]) -> Optional[ObjectId]:
        if not value:
            return None
        oid = to_object_id(value)
        if oid is None or await self.users.find_one({"_id": oid}, {"_id": 1}) is None:
            raise ReferenceNotFound("Keeper not found")
        return oid

    async def _expand(self, docs: list[dict]) -> list[AnimalResponse]:
        """Build responses with habitat (name/type) and keeper (username/email) expanded."""
        habitat_ids = list({d["habitat"] for d in docs if d.get("habitat")})
        keeper_ids = list({d["assigned_keeper"] for d in docs if d.get("assigned_keeper")})

        habitats: dict = {}
        if habitat_ids:
            cursor = self.habitats.find({"_id": {"$in": habitat_ids}}, {"name": 1, "type": 1})
            habitats = {h["_id"]: h for h in await cursor.to_list(length=None)}

        keepers: dict = {}
        if keeper_ids:
            cursor = self.users.find({"_id": {"$in": keeper_ids}}, {"username": 1, "email": 1})
            keepers = {u["_id"]: u for u in await cursor.to_list(length=None)}

        responses = []
        for doc in docs:
            habitat = habitats.get(doc.get("habitat"))
            keeper = keepers.get(doc.get("assigned_keeper"))
            responses.append(AnimalResponse(
                id=str(doc["_id"]),
                name=doc["name"],
                species=doc["species"],
                category=doc["category"],
                age=doc.get("age"),
                gender=doc.get("gender", "unknown"),
                health_status=doc.get("health_status", "healthy"),
                habitat=HabitatRef(
                    id=str(habitat["_id"]),
                    name=habitat.get("name", ""),
                    type=habitat.get("type", ""),
                ) if habitat else None,
                assigned_keeper=KeeperRef(
                    id=str(keeper["_id"]),
                    username=keeper.get("username", ""),
                    email=keeper.get("email", ""),
                ) if keeper else None,
                arrival_date=doc.get("arrival_date"),
                notes=doc.get("notes"),
                created_at=doc.get("created_at"),
                updated_at=doc.get("updated_at"),
            ))
        return responses
