"""
Animals router. Habitat occupancy is kept in step by the service layer.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from zoo_api.database.connections import get_auth_db, get_zoo_db
from zoo_api.dependencies.auth import CurrentUser
from zoo_api.models.animal import AnimalCategory, HealthStatus
from zoo_api.schemas.animal import AnimalCreate, AnimalResponse, AnimalUpdate
from zoo_api.schemas.common import CountResponse, MessageResponse
from zoo_api.services.animal_service import AnimalService

router = APIRouter(prefix="/animals", tags=["Animals"])


async def get_animal_service() -> AnimalService:
    """Dependency to get AnimalService instance."""
    return AnimalService(await get_zoo_db(), await get_auth_db())


@router.get(
    "",
    response_model=list[AnimalResponse],
    summary="List animals",
)
async def list_animals(
    current_user: CurrentUser,
    category: Optional[AnimalCategory] = Query(None),
    health_status: Optional[HealthStatus] = Query(None),
    habitat: Optional[str] = Query(None, description="Habitat id"),
    animal_service: AnimalService = Depends(get_animal_service),
):
    """List animals with habitat (name, type) and keeper (username, email) expanded."""
    return await animal_service.list_animals(category, health_status, habitat)


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count animals",
)
async def count_animals(
    current_user: CurrentUser,
    animal_service: AnimalService = Depends(get_animal_service),
):
    return CountResponse(count=await animal_service.count_animals())


@router.get(
    "/{animal_id}",
    response_model=AnimalResponse,
    summary="Get animal",
)
async def get_animal(
    animal_id: str,
    current_user: CurrentUser,
    animal_service: AnimalService = Depends(get_animal_service),
):
    return await animal_service.get_animal(animal_id)


@router.post(
    "",
    response_model=AnimalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create animal",
)
async def create_animal(
    body: AnimalCreate,
    current_user: CurrentUser,
    animal_service: AnimalService = Depends(get_animal_service),
):
    """
    Create an animal.

    When a habitat is given it must exist and have a free slot; the
    habitat's occupancy goes up by one.
    """
    return await animal_service.create_animal(body)


@router.put(
    "/{animal_id}",
    response_model=AnimalResponse,
    summary="Update animal",
)
async def update_animal(
    animal_id: str,
    body: AnimalUpdate,
    current_user: CurrentUser,
    animal_service: AnimalService = Depends(get_animal_service),
):
    """
    Partially update an animal.

    - **habitat** omitted: the animal stays where it is
    - **habitat** null or empty: the animal leaves its habitat
    - **habitat** another id: the animal moves if the new habitat has room
    """
    return await animal_service.update_animal(animal_id, body)


@router.delete(
    "/{animal_id}",
    response_model=MessageResponse,
    summary="Delete animal",
)
async def delete_animal(
    animal_id: str,
    current_user: CurrentUser,
    animal_service: AnimalService = Depends(get_animal_service),
):
    return await animal_service.delete_animal(animal_id)
