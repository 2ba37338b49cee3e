"""
Staff service. Staff members are the user accounts in auth_db.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from zoo_api.core.errors import Forbidden, NotFound, ValidationError
from zoo_api.core.security import hash_password
from zoo_api.database.databases import auth_db, zoo_db
from zoo_api.database.ids import to_object_id
from zoo_api.models.user import AuthProvider, StaffRole, User, UserStatus
from zoo_api.schemas.common import MessageResponse
from zoo_api.schemas.staff import StaffCreate, StaffResponse, StaffUpdate

logger = logging.getLogger(__name__)

# Never sent back to clients
PASSWORD_PROJECTION = {"hashed_password": 0}

NON_NULLABLE_FIELDS = ("username", "email", "role", "status")


class StaffService:
    """Service for staff member operations."""

    def __init__(self, db: AsyncIOMotorDatabase, zoo_db_instance: AsyncIOMotorDatabase):
        """Initialize with auth database and zoo database (for reference cleanup)."""
        self.users = db[auth_db.Collections.USERS]
        self.habitats = zoo_db_instance[zoo_db.Collections.HABITATS]
        self.animals = zoo_db_instance[zoo_db.Collections.ANIMALS]

    async def list_staff(self) -> list[StaffResponse]:
        cursor = self.users.find({}, PASSWORD_PROJECTION).sort("username", 1)
        return [self._to_response(doc) for doc in await cursor.to_list(length=None)]

    async def count_staff(self) -> int:
        return await self.users.count_documents({})

    async def get_staff(self, staff_id: str) -> StaffResponse:
        oid = to_object_id(staff_id)
        doc = await self.users.find_one({"_id": oid}, PASSWORD_PROJECTION) if oid else None
        if doc is None:
            raise NotFound("Staff member not found")
        return self._to_response(doc)

    async def create_staff(self, request: StaffCreate) -> StaffResponse:
        """
        Create a staff account on behalf of an admin.

        Raises:
            ValidationError: If the email or username is taken
        """
        await self._ensure_unique(request.email, request.username)

        now = datetime.now(timezone.utc)
        staff_doc = {
            "username": request.username,
            "email": request.email,
            "hashed_password": hash_password(request.password),
            "role": StaffRole(request.role).value,
            "status": UserStatus.ACTIVE.value,
            "auth_provider": AuthProvider.LOCAL.value,
            "google_id": None,
            "avatar": request.avatar,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await self.users.insert_one(staff_doc)
        except DuplicateKeyError:
            raise ValidationError("User already exists")
        staff_doc["_id"] = result.inserted_id

        logger.info(f"Created staff member {result.inserted_id} ({staff_doc['role']})")
        return self._to_response(staff_doc)

    async def update_staff(
        self, staff_id: str, request: StaffUpdate, current_user: User
    ) -> StaffResponse:
        """
        Apply a partial update to a staff member.

        Non-admins may only update themselves, and their role and status
        changes are ignored.

        Raises:
            NotFound: Staff member does not exist
            Forbidden: Non-admin updating someone else
            ValidationError: Email or username taken by another account
        """
        oid = to_object_id(staff_id)
        if oid is None:
            raise NotFound("Staff member not found")

        if not current_user.is_admin and current_user.id != staff_id:
            raise Forbidden("You can only update your own profile")

        changes = request.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        if not current_user.is_admin:
            changes.pop("role", None)
            changes.pop("status", None)

        for field in ("role", "status"):
            if field in changes:
                changes[field] = getattr(changes[field], "value", changes[field])

        password = changes.pop("password", None)
        if password:
            changes["hashed_password"] = hash_password(password)

        if "email" in changes or "username" in changes:
            await self._ensure_unique(
                changes.get("email"), changes.get("username"), exclude_id=oid
            )

        changes["updated_at"] = datetime.now(timezone.utc)
        try:
            result = await self.users.update_one({"_id": oid}, {"$set": changes})
        except DuplicateKeyError:
            raise ValidationError("User already exists")
        if result.matched_count == 0:
            raise NotFound("Staff member not found")

        return await self.get_staff(staff_id)

    async def delete_staff(self, staff_id: str, current_user: User) -> MessageResponse:
        """
        Delete a staff member and clear their habitat and animal assignments.

        Raises:
            ValidationError: Admin deleting their own account
            NotFound: Staff member does not exist
        """
        if current_user.id == staff_id:
            raise ValidationError("Cannot delete your own account")

        oid = to_object_id(staff_id)
        if oid is None:
            raise NotFound("Staff member not found")

        result = await self.users.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFound("Staff member not found")

        await self.habitats.update_many(
            {"assigned_staff": oid}, {"$pull": {"assigned_staff": oid}}
        )
        await self.animals.update_many(
            {"assigned_keeper": oid}, {"$set": {"assigned_keeper": None}}
        )

        logger.info(f"Deleted staff member {oid}")
        return MessageResponse(message="Staff member deleted successfully")

    # ==================== Helpers ====================

    async def _ensure_unique(
        self,
        email: Optional[str],
        username: Optional[str],
        exclude_id: Optional[ObjectId] = None,
    ) -> None:
        clauses = []
        if email:
            clauses.append({"email": email})
        if username:
            clauses.append({"username": username})
        if not clauses:
            return

        query: dict = {"$or": clauses}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        if await self.users.find_one(query, {"_id": 1}):
            raise ValidationError("User already exists")

    @staticmethod
    def _to_response(doc: dict) -> StaffResponse:
        return StaffResponse(
            id=str(doc["_id"]),
            username=doc["username"],
            email=doc["email"],
            role=doc.get("role", StaffRole.KEEPER.value),
            status=doc.get("status", UserStatus.ACTIVE.value),
            auth_provider=doc.get("auth_provider", AuthProvider.LOCAL.value),
            avatar=doc.get("avatar"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )
