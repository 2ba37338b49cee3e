"""
Visitor records router.
"""
from fastapi import APIRouter, Depends, status

from zoo_api.database.connections import get_zoo_db
from zoo_api.dependencies.auth import CurrentUser
from zoo_api.schemas.common import CountResponse, MessageResponse
from zoo_api.schemas.visitor import (
    VisitorRecordCreate,
    VisitorRecordResponse,
    VisitorRecordUpdate,
)
from zoo_api.services.visitor_service import VisitorService

router = APIRouter(prefix="/visitors", tags=["Visitors"])


async def get_visitor_service() -> VisitorService:
    """Dependency to get VisitorService instance."""
    return VisitorService(await get_zoo_db())


@router.get(
    "",
    response_model=list[VisitorRecordResponse],
    summary="List visitor records",
)
async def list_records(
    current_user: CurrentUser,
    visitor_service: VisitorService = Depends(get_visitor_service),
):
    """List visitor records, most recent visit first."""
    return await visitor_service.list_records()


@router.get(
    "/recent",
    response_model=CountResponse,
    summary="Visitors in the last 30 days",
)
async def recent_visitors(
    current_user: CurrentUser,
    visitor_service: VisitorService = Depends(get_visitor_service),
):
    return CountResponse(count=await visitor_service.recent_visitor_count())


@router.get(
    "/{record_id}",
    response_model=VisitorRecordResponse,
    summary="Get visitor record",
)
async def get_record(
    record_id: str,
    current_user: CurrentUser,
    visitor_service: VisitorService = Depends(get_visitor_service),
):
    return await visitor_service.get_record(record_id)


@router.post(
    "",
    response_model=VisitorRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create visitor record",
)
async def create_record(
    body: VisitorRecordCreate,
    current_user: CurrentUser,
    visitor_service: VisitorService = Depends(get_visitor_service),
):
    """
    Record a day's visitors.

    **total_visitors** defaults to adult plus child tickets when omitted.
    """
    return await visitor_service.create_record(body)


@router.put(
    "/{record_id}",
    response_model=VisitorRecordResponse,
    summary="Update visitor record",
)
async def update_record(
    record_id: str,
    body: VisitorRecordUpdate,
    current_user: CurrentUser,
    visitor_service: VisitorService = Depends(get_visitor_service),
):
    return await visitor_service.update_record(record_id, body)


@router.delete(
    "/{record_id}",
    response_model=MessageResponse,
    summary="Delete visitor record",
)
async def delete_record(
    record_id: str,
    current_user: CurrentUser,
    visitor_service: VisitorService = Depends(get_visitor_service),
):
    return await visitor_service.delete_record(record_id)
