"""
Habitats router.
"""
from fastapi import APIRouter, Depends, status

from zoo_api.database.connections import get_auth_db, get_zoo_db
from zoo_api.dependencies.auth import CurrentUser
from zoo_api.dependencies.roles import require_admin
from zoo_api.models.user import User
from zoo_api.schemas.common import CountResponse, MessageResponse
from zoo_api.schemas.habitat import (
    HabitatCreate,
    HabitatResponse,
    HabitatUpdate,
    ReconcileResponse,
)
from zoo_api.services.habitat_service import HabitatService

router = APIRouter(prefix="/habitats", tags=["Habitats"])


async def get_habitat_service() -> HabitatService:
    """Dependency to get HabitatService instance."""
    return HabitatService(await get_zoo_db(), await get_auth_db())


@router.get(
    "",
    response_model=list[HabitatResponse],
    summary="List habitats",
)
async def list_habitats(
    current_user: CurrentUser,
    habitat_service: HabitatService = Depends(get_habitat_service),
):
    """List habitats with assigned staff expanded and available space computed."""
    return await habitat_service.list_habitats()


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count habitats",
)
async def count_habitats(
    current_user: CurrentUser,
    habitat_service: HabitatService = Depends(get_habitat_service),
):
    return CountResponse(count=await habitat_service.count_habitats())


@router.post(
    "/reconcile",
    response_model=ReconcileResponse,
    summary="Recompute occupancy counters",
)
async def reconcile_occupancy(
    current_user: User = Depends(require_admin()),
    habitat_service: HabitatService = Depends(get_habitat_service),
):
    """
    Recount the animals in every habitat and correct stored occupancy.

    Admin only. Habitats over capacity and animals pointing at missing
    habitats are reported but left untouched.
    """
    return await habitat_service.reconcile_occupancy()


@router.get(
    "/{habitat_id}",
    response_model=HabitatResponse,
    summary="Get habitat",
)
async def get_habitat(
    habitat_id: str,
    current_user: CurrentUser,
    habitat_service: HabitatService = Depends(get_habitat_service),
):
    return await habitat_service.get_habitat(habitat_id)


@router.post(
    "",
    response_model=HabitatResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create habitat",
)
async def create_habitat(
    body: HabitatCreate,
    current_user: CurrentUser,
    habitat_service: HabitatService = Depends(get_habitat_service),
):
    """
    Create a habitat.

    - **name**, **type**: required
    - **capacity**: positive integer
    - **assigned_staff**: ids of existing staff members

    Occupancy always starts at zero.
    """
    return await habitat_service.create_habitat(body)


@router.put(
    "/{habitat_id}",
    response_model=HabitatResponse,
    summary="Update habitat",
)
async def update_habitat(
    habitat_id: str,
    body: HabitatUpdate,
    current_user: CurrentUser,
    habitat_service: HabitatService = Depends(get_habitat_service),
):
    """Partially update a habitat. Capacity cannot drop below current occupancy."""
    return await habitat_service.update_habitat(habitat_id, body)


@router.delete(
    "/{habitat_id}",
    response_model=MessageResponse,
    summary="Delete habitat",
)
async def delete_habitat(
    habitat_id: str,
    current_user: CurrentUser,
    habitat_service: HabitatService = Depends(get_habitat_service),
):
    """Delete a habitat. Refused while animals are still assigned to it."""
    return await habitat_service.delete_habitat(habitat_id)
