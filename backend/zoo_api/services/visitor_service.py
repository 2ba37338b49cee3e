"""
Visitor record service.
"""
from datetime import datetime, timedelta, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from zoo_api.core.errors import NotFound, ValidationError
from zoo_api.database.databases import zoo_db
from zoo_api.database.ids import to_object_id
from zoo_api.schemas.common import MessageResponse
from zoo_api.schemas.visitor import (
    VisitorRecordCreate,
    VisitorRecordResponse,
    VisitorRecordUpdate,
)

RECENT_WINDOW_DAYS = 30

NON_NULLABLE_FIELDS = (
    "visit_date",
    "adult_tickets",
    "child_tickets",
    "total_visitors",
    "total_revenue",
)


class VisitorService:
    """Service for visitor record operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.records = db[zoo_db.Collections.VISITOR_RECORDS]

    async def list_records(self) -> list[VisitorRecordResponse]:
        """All records, most recent visit first."""
        cursor = self.records.find({}).sort("visit_date", -1)
        return [self._to_response(doc) for doc in await cursor.to_list(length=None)]

    async def recent_visitor_count(self, days: int = RECENT_WINDOW_DAYS) -> int:
        """Total visitors over the last ``days`` days."""
        # Stored dates come back naive UTC from MongoDB
        cutoff = (datetime.now(timezone.utc) - timedelta(days=days)).replace(tzinfo=None)
        pipeline = [
            {"$match": {"visit_date": {"$gte": cutoff}}},
            {"$group": {"_id": None, "count": {"$sum": "$total_visitors"}}},
        ]
        cursor = self.records.aggregate(pipeline)
        rows = await cursor.to_list(length=None)
        return rows[0]["count"] if rows else 0

    async def get_record(self, record_id: str) -> VisitorRecordResponse:
        oid = to_object_id(record_id)
        doc = await self.records.find_one({"_id": oid}) if oid is not None else None
        if doc is None:
            raise NotFound("Visitor record not found")
        return self._to_response(doc)

    async def create_record(self, request: VisitorRecordCreate) -> VisitorRecordResponse:
        now = datetime.now(timezone.utc)
        total = request.total_visitors
        if total is None:
            total = request.adult_tickets + request.child_tickets

        record_doc = {
            "visit_date": request.visit_date or now,
            "adult_tickets": request.adult_tickets,
            "child_tickets": request.child_tickets,
            "total_visitors": total,
            "total_revenue": request.total_revenue,
            "notes": request.notes,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.records.insert_one(record_doc)
        record_doc["_id"] = result.inserted_id
        return self._to_response(record_doc)

    async def update_record(
        self, record_id: str, request: VisitorRecordUpdate
    ) -> VisitorRecordResponse:
        oid = to_object_id(record_id)
        if oid is None:
            raise NotFound("Visitor record not found")

        changes = request.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")
        changes["updated_at"] = datetime.now(timezone.utc)

        updated = await self.records.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFound("Visitor record not found")
        return self._to_response(updated)

    async def delete_record(self, record_id: str) -> MessageResponse:
        oid = to_object_id(record_id)
        if oid is None:
            raise NotFound("Visitor record not found")
        result = await self.records.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFound("Visitor record not found")
        return MessageResponse(message="Visitor record deleted successfully")

    @staticmethod
    def _to_response(doc: dict) -> VisitorRecordResponse:
        adult = doc.get("adult_tickets", 0)
        child = doc.get("child_tickets", 0)
        return VisitorRecordResponse(
            id=str(doc["_id"]),
            visit_date=doc["visit_date"],
            adult_tickets=adult,
            child_tickets=child,
            total_visitors=doc.get("total_visitors", adult + child),
            total_revenue=doc.get("total_revenue", 0.0),
            calculated_total=adult + child,
            notes=doc.get("notes"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )
