"""
Authentication service for staff accounts and login.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from zoo_api.config import get_settings
from zoo_api.core.errors import Forbidden, Unauthorized, ValidationError
from zoo_api.core.rate_limit import (
    check_user_lockout,
    increment_failed_login,
    reset_failed_attempts,
    set_user_lockout,
)
from zoo_api.core.revocation import revoke_token
from zoo_api.core.security import (
    create_access_token,
    hash_password,
    token_seconds_remaining,
    verify_password,
)
from zoo_api.database.databases import auth_db
from zoo_api.database.ids import to_object_id
from zoo_api.models.user import AuthProvider, StaffRole, User, UserStatus
from zoo_api.schemas.auth import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    RegisterRequest,
    TokenRefreshResponse,
)
from zoo_api.schemas.common import MessageResponse
from zoo_api.services.google_oauth import GoogleProfile

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with auth database."""
        self.db = db
        self.users_collection = db[auth_db.Collections.USERS]
        self.settings = get_settings()

    async def register_user(self, request: RegisterRequest) -> AuthResponse:
        """
        Register a new staff account and sign it in.

        The first account ever created becomes an admin. Later accounts keep
        the requested role, except that admin cannot be self-assigned.

        Raises:
            ValidationError: If passwords don't match or the user exists
        """
        if not request.passwords_match():
            raise ValidationError("Passwords do not match")

        existing = await self.users_collection.find_one(
            {"$or": [{"email": request.email}, {"username": request.username}]}
        )
        if existing:
            raise ValidationError("User already exists")

        role = StaffRole(request.role)
        if await self.users_collection.count_documents({}) == 0:
            role = StaffRole.ADMIN
        elif role == StaffRole.ADMIN:
            role = StaffRole.KEEPER

        now = datetime.now(timezone.utc)
        user_doc = {
            "username": request.username,
            "email": request.email,
            "hashed_password": hash_password(request.password),
            "role": role.value,
            "status": UserStatus.ACTIVE.value,
            "auth_provider": AuthProvider.LOCAL.value,
            "google_id": None,
            "avatar": None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await self.users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            # A concurrent registration won the unique index
            raise ValidationError("User already exists")
        user_doc["_id"] = result.inserted_id

        logger.info(f"Registered {role.value} account {result.inserted_id}")
        return self._auth_response(user_doc)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Authenticate with email and password.

        Raises:
            Unauthorized: Invalid credentials or account locked
            ValidationError: Account only signs in through Google
            Forbidden: Account is disabled
        """
        user_doc = await self.users_collection.find_one({"email": request.email})
        if not user_doc:
            raise Unauthorized("Invalid credentials")

        user_id = str(user_doc["_id"])

        if await check_user_lockout(user_id):
            raise Unauthorized("Account temporarily locked due to too many failed attempts")

        if not user_doc.get("hashed_password"):
            raise ValidationError("Please use Google Sign-In for this account")

        if user_doc.get("status") == UserStatus.DISABLED.value:
            raise Forbidden("Account is disabled")

        if not verify_password(request.password, user_doc["hashed_password"]):
            failed_count = await increment_failed_login(user_id)
            if failed_count >= self.settings.user_lockout_threshold:
                await set_user_lockout(user_id, self.settings.user_lockout_duration_minutes)
                logger.warning(f"Locked account {user_id} after {failed_count} failed logins")
            raise Unauthorized("Invalid credentials")

        await reset_failed_attempts(user_id)
        return self._auth_response(user_doc)

    async def login_with_google(self, profile: GoogleProfile) -> AuthResponse:
        """
        Sign in with a verified Google profile.

        Looks the account up by Google id first, then links an existing
        account with the same email, and otherwise creates a keeper account.
        """
        user_doc = await self.users_collection.find_one({"google_id": profile.google_id})

        if user_doc is None:
            user_doc = await self.users_collection.find_one({"email": profile.email})
            if user_doc is not None:
                changes: dict[str, Any] = {
                    "google_id": profile.google_id,
                    "updated_at": datetime.now(timezone.utc),
                }
                if profile.picture and not user_doc.get("avatar"):
                    changes["avatar"] = profile.picture
                await self.users_collection.update_one(
                    {"_id": user_doc["_id"]}, {"$set": changes}
                )
                user_doc.update(changes)
                logger.info(f"Linked Google account to user {user_doc['_id']}")

        if user_doc is None:
            now = datetime.now(timezone.utc)
            first = await self.users_collection.count_documents({}) == 0
            user_doc = {
                "username": await self._unique_username(profile.name or profile.email),
                "email": profile.email,
                "hashed_password": None,
                "role": (StaffRole.ADMIN if first else StaffRole.KEEPER).value,
                "status": UserStatus.ACTIVE.value,
                "auth_provider": AuthProvider.GOOGLE.value,
                "google_id": profile.google_id,
                "avatar": profile.picture,
                "created_at": now,
                "updated_at": now,
            }
            try:
                result = await self.users_collection.insert_one(user_doc)
            except DuplicateKeyError:
                raise ValidationError("User already exists")
            user_doc["_id"] = result.inserted_id
            logger.info(f"Created Google account {result.inserted_id}")

        if user_doc.get("status") == UserStatus.DISABLED.value:
            raise Forbidden("Account is disabled")

        return self._auth_response(user_doc)

    async def refresh_token(self, user_id: str) -> TokenRefreshResponse:
        """
        Issue a fresh token for an authenticated user.

        Raises:
            Unauthorized: If user not found
            Forbidden: If the account is disabled
        """
        oid = to_object_id(user_id)
        user_doc = await self.users_collection.find_one({"_id": oid}) if oid else None
        if not user_doc:
            raise Unauthorized("User not found")
        if user_doc.get("status") == UserStatus.DISABLED.value:
            raise Forbidden("Account is disabled")

        return TokenRefreshResponse(
            access_token=create_access_token(user_id=user_id, role=user_doc["role"]),
            token_type="bearer",
            expires_in=self.settings.jwt_access_token_expire_minutes * 60,
        )

    async def logout(self, payload: dict[str, Any]) -> MessageResponse:
        """Revoke the token described by ``payload`` for the rest of its lifetime."""
        jti = payload.get("jti")
        if jti:
            await revoke_token(jti, token_seconds_remaining(payload))
        return MessageResponse(message="Logged out successfully")

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Returns:
            User model or None if not found
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None

        user_doc = await self.users_collection.find_one({"_id": oid})
        if not user_doc:
            return None

        user_doc["_id"] = str(user_doc["_id"])
        return User(**user_doc)

    # ==================== Helpers ====================

    def _auth_response(self, user_doc: dict) -> AuthResponse:
        user_id = str(user_doc["_id"])
        return AuthResponse(
            access_token=create_access_token(user_id=user_id, role=user_doc["role"]),
            token_type="bearer",
            expires_in=self.settings.jwt_access_token_expire_minutes * 60,
            user=AuthUser(
                id=user_id,
                username=user_doc["username"],
                email=user_doc["email"],
                role=user_doc["role"],
                status=user_doc.get("status", UserStatus.ACTIVE.value),
                avatar=user_doc.get("avatar"),
                auth_provider=user_doc.get("auth_provider", AuthProvider.LOCAL.value),
                created_at=user_doc.get("created_at"),
            ),
        )

    async def _unique_username(self, seed: str) -> str:
        base = re.sub(r"[^a-z0-9_]", "", seed.split("@")[0].lower().replace(" ", "_"))
        base = (base or "staff")[:40].ljust(3, "_")
        candidate = base
        suffix = 1
        while await self.users_collection.find_one({"username": candidate}, {"_id": 1}):
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate
