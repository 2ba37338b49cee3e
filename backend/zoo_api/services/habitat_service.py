"""
Habitat service for habitat management.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from zoo_api.core.errors import NotFound, ReferenceNotFound, ValidationError
from zoo_api.database.databases import auth_db, zoo_db
from zoo_api.database.ids import to_object_id
from zoo_api.schemas.common import MessageResponse
from zoo_api.schemas.habitat import (
    HabitatCreate,
    HabitatResponse,
    HabitatUpdate,
    ReconcileResponse,
    StaffRef,
)
from zoo_api.services.occupancy_service import OccupancyCoordinator

logger = logging.getLogger(__name__)

HABITAT_NOT_EMPTY = "Cannot delete a habitat that still has animals assigned"

NON_NULLABLE_FIELDS = ("name", "type", "capacity", "assigned_staff")


class HabitatService:
    """Service for habitat operations."""

    def __init__(self, db: AsyncIOMotorDatabase, auth_db_instance: AsyncIOMotorDatabase):
        """Initialize with zoo database and auth database (for staff)."""
        self.habitats = db[zoo_db.Collections.HABITATS]
        self.animals = db[zoo_db.Collections.ANIMALS]
        self.users = auth_db_instance[auth_db.Collections.USERS]
        self.occupancy = OccupancyCoordinator(db)

    async def list_habitats(self) -> list[HabitatResponse]:
        """List habitats with assigned staff expanded."""
        cursor = self.habitats.find({}).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return await self._expand(docs)

    async def count_habitats(self) -> int:
        return await self.habitats.count_documents({})

    async def get_habitat(self, habitat_id: str) -> HabitatResponse:
        doc = await self._find(habitat_id)
        return (await self._expand([doc]))[0]

    async def create_habitat(self, request: HabitatCreate) -> HabitatResponse:
        """Create a habitat. It starts empty."""
        staff_ids = await self._resolve_staff(request.assigned_staff)
        now = datetime.now(timezone.utc)
        habitat_doc = {
            "name": request.name,
            "type": request.type,
            "capacity": request.capacity,
            "current_occupancy": 0,
            "description": request.description,
            "assigned_staff": staff_ids,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.habitats.insert_one(habitat_doc)
        habitat_doc["_id"] = result.inserted_id
        return (await self._expand([habitat_doc]))[0]

    async def update_habitat(self, habitat_id: str, request: HabitatUpdate) -> HabitatResponse:
        """
        Apply a partial update to a habitat.

        Raises:
            NotFound: Habitat does not exist
            ValidationError: Capacity would drop below the current occupancy
            ReferenceNotFound: An assigned staff member does not exist
        """
        oid = to_object_id(habitat_id)
        if oid is None:
            raise NotFound("Habitat not found")

        changes = request.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        if "assigned_staff" in changes:
            changes["assigned_staff"] = await self._resolve_staff(changes["assigned_staff"])

        habitat_filter: dict = {"_id": oid}
        if "capacity" in changes:
            # Never let capacity fall under the animals already housed
            habitat_filter["current_occupancy"] = {"$lte": changes["capacity"]}

        changes["updated_at"] = datetime.now(timezone.utc)
        updated = await self.habitats.find_one_and_update(
            habitat_filter,
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )

        if updated is None:
            existing = await self.habitats.find_one({"_id": oid}, {"current_occupancy": 1})
            if existing is None:
                raise NotFound("Habitat not found")
            raise ValidationError(
                "Capacity cannot be less than current occupancy "
                f"({existing.get('current_occupancy', 0)})"
            )

        return (await self._expand([updated]))[0]

    async def delete_habitat(self, habitat_id: str) -> MessageResponse:
        """
        Delete an empty habitat.

        The delete only matches while ``current_occupancy`` is 0. The counter
        is taken before an animal is written, so a create or move that has
        reserved a slot but not yet saved the animal still blocks the delete.
        """
        oid = to_object_id(habitat_id)
        if oid is None:
            raise NotFound("Habitat not found")

        if await self.habitats.find_one({"_id": oid}, {"_id": 1}) is None:
            raise NotFound("Habitat not found")

        if await self.occupancy.count_animals(oid) > 0:
            raise ValidationError(HABITAT_NOT_EMPTY)

        result = await self.habitats.delete_one({"_id": oid, "current_occupancy": 0})
        if result.deleted_count == 0:
            if await self.habitats.find_one({"_id": oid}, {"_id": 1}) is None:
                raise NotFound("Habitat not found")
            raise ValidationError(HABITAT_NOT_EMPTY)

        logger.info(f"Deleted habitat {oid}")
        return MessageResponse(message="Habitat deleted successfully")

    async def reconcile_occupancy(self) -> ReconcileResponse:
        """Recompute all occupancy counters from animal references."""
        return await self.occupancy.reconcile()

    # ==================== Helpers ====================

    async def _find(self, habitat_id: str) -> dict:
        oid = to_object_id(habitat_id)
        doc = await self.habitats.find_one({"_id": oid}) if oid is not None else None
        if doc is None:
            raise NotFound("Habitat not found")
        return doc

    async def _resolve_staff(self, values: Optional[list[str]]) -> list[ObjectId]:
        if not values:
            return []
        ids: list[ObjectId] = []
        for value in values:
            oid = to_object_id(value)
            if oid is None:
                raise ReferenceNotFound("Staff member not found")
            if oid not in ids:
                ids.append(oid)
        found = await self.users.count_documents({"_id": {"$in": ids}})
        if found != len(ids):
            raise ReferenceNotFound("Staff member not found")
        return ids

    async def _expand(self, docs: list[dict]) -> list[HabitatResponse]:
        staff_ids = list({s for d in docs for s in d.get("assigned_staff", [])})
        staff: dict = {}
        if staff_ids:
            cursor = self.users.find(
                {"_id": {"$in": staff_ids}}, {"username": 1, "email": 1, "role": 1}
            )
            staff = {u["_id"]: u for u in await cursor.to_list(length=None)}

        responses = []
        for doc in docs:
            capacity = doc.get("capacity", 0)
            occupancy = doc.get("current_occupancy", 0)
            responses.append(HabitatResponse(
                id=str(doc["_id"]),
                name=doc["name"],
                type=doc["type"],
                capacity=capacity,
                current_occupancy=occupancy,
                available_space=capacity - occupancy,
                description=doc.get("description"),
                assigned_staff=[
                    StaffRef(
                        id=str(staff[s]["_id"]),
                        username=staff[s].get("username", ""),
                        email=staff[s].get("email", ""),
                        role=staff[s].get("role", "keeper"),
                    )
                    for s in doc.get("assigned_staff", [])
                    if s in staff
                ],
                created_at=doc.get("created_at"),
                updated_at=doc.get("updated_at"),
            ))
        return responses
