"""
Visitor record request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VisitorRecordCreate(BaseModel):
    """Create visitor record request."""
    model_config = ConfigDict(str_strip_whitespace=True)

    visit_date: Optional[datetime] = Field(None, description="Defaults to now")
    adult_tickets: int = Field(0, ge=0)
    child_tickets: int = Field(0, ge=0)
    total_visitors: Optional[int] = Field(
        None, ge=0, description="Defaults to adult_tickets + child_tickets"
    )
    total_revenue: float = Field(0.0, ge=0)
    notes: Optional[str] = None


class VisitorRecordUpdate(BaseModel):
    """Partial visitor record update."""
    model_config = ConfigDict(str_strip_whitespace=True)

    visit_date: Optional[datetime] = None
    adult_tickets: Optional[int] = Field(None, ge=0)
    child_tickets: Optional[int] = Field(None, ge=0)
    total_visitors: Optional[int] = Field(None, ge=0)
    total_revenue: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class VisitorRecordResponse(BaseModel):
    """Visitor record."""
    id: str
    visit_date: datetime
    adult_tickets: int
    child_tickets: int
    total_visitors: int
    total_revenue: float
    calculated_total: int = Field(..., description="adult_tickets + child_tickets")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
