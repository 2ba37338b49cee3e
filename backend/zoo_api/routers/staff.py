"""
Staff router. Staff members are the user accounts.
"""
from fastapi import APIRouter, Depends, status

from zoo_api.database.connections import get_auth_db, get_zoo_db
from zoo_api.dependencies.auth import CurrentUser
from zoo_api.dependencies.roles import require_admin
from zoo_api.models.user import User
from zoo_api.schemas.common import CountResponse, MessageResponse
from zoo_api.schemas.staff import StaffCreate, StaffResponse, StaffUpdate
from zoo_api.services.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["Staff"])


async def get_staff_service() -> StaffService:
    """Dependency to get StaffService instance."""
    return StaffService(await get_auth_db(), await get_zoo_db())


@router.get(
    "",
    response_model=list[StaffResponse],
    summary="List staff",
)
async def list_staff(
    current_user: CurrentUser,
    staff_service: StaffService = Depends(get_staff_service),
):
    return await staff_service.list_staff()


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count staff",
)
async def count_staff(
    current_user: CurrentUser,
    staff_service: StaffService = Depends(get_staff_service),
):
    return CountResponse(count=await staff_service.count_staff())


@router.get(
    "/{staff_id}",
    response_model=StaffResponse,
    summary="Get staff member",
)
async def get_staff(
    staff_id: str,
    current_user: CurrentUser,
    staff_service: StaffService = Depends(get_staff_service),
):
    return await staff_service.get_staff(staff_id)


@router.post(
    "",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create staff member",
)
async def create_staff(
    body: StaffCreate,
    current_user: User = Depends(require_admin()),
    staff_service: StaffService = Depends(get_staff_service),
):
    """Create a staff account. Admin only."""
    return await staff_service.create_staff(body)


@router.put(
    "/{staff_id}",
    response_model=StaffResponse,
    summary="Update staff member",
)
async def update_staff(
    staff_id: str,
    body: StaffUpdate,
    current_user: CurrentUser,
    staff_service: StaffService = Depends(get_staff_service),
):
    """
    Update a staff member.

    Admins can update anyone. Other staff can update their own profile,
    but not their role or status.
    """
    return await staff_service.update_staff(staff_id, body, current_user)


@router.delete(
    "/{staff_id}",
    response_model=MessageResponse,
    summary="Delete staff member",
)
async def delete_staff(
    staff_id: str,
    current_user: User = Depends(require_admin()),
    staff_service: StaffService = Depends(get_staff_service),
):
    """Delete a staff member. Admin only; admins cannot delete themselves."""
    return await staff_service.delete_staff(staff_id, current_user)
