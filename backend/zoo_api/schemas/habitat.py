"""
Habitat request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from zoo_api.models.user import StaffRole


class HabitatCreate(BaseModel):
    """Create habitat request. Occupancy always starts at zero."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., min_length=1, max_length=50, description="e.g. indoor, outdoor")
    capacity: int = Field(..., ge=1)
    description: Optional[str] = None
    assigned_staff: list[str] = Field(default=[], description="Staff member ids")


class HabitatUpdate(BaseModel):
    """Partial habitat update. current_occupancy is not client-writable."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    capacity: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    assigned_staff: Optional[list[str]] = None


class StaffRef(BaseModel):
    """Expanded staff reference."""
    id: str
    username: str
    email: str
    role: StaffRole


class HabitatResponse(BaseModel):
    """Habitat with assigned staff expanded."""
    id: str
    name: str
    type: str
    capacity: int
    current_occupancy: int
    available_space: int
    description: Optional[str] = None
    assigned_staff: list[StaffRef] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HabitatOccupancyReport(BaseModel):
    """Per-habitat outcome of an occupancy reconciliation."""
    habitat_id: str
    name: str
    capacity: int
    recorded_occupancy: int
    actual_occupancy: int
    corrected: bool
    skipped: bool = False
    over_capacity: bool


class ReconcileResponse(BaseModel):
    """Summary of an occupancy reconciliation run."""
    checked: int
    corrected: int
    skipped: int = Field(
        0, description="Habitats left alone because their counter changed during the run"
    )
    over_capacity: int
    dangling_animals: int = Field(
        0, description="Animals referencing a habitat that no longer exists"
    )
    habitats: list[HabitatOccupancyReport] = []
