"""
Animal request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from zoo_api.models.animal import AnimalCategory, Gender, HealthStatus


class AnimalCreate(BaseModel):
    """Create animal request."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    species: str = Field(..., min_length=1, max_length=100)
    category: AnimalCategory
    age: Optional[int] = Field(None, ge=0)
    gender: Gender = Gender.UNKNOWN
    health_status: HealthStatus = HealthStatus.HEALTHY
    habitat: Optional[str] = Field(None, description="Habitat id")
    assigned_keeper: Optional[str] = Field(None, description="Staff member id")
    arrival_date: Optional[datetime] = Field(None, description="Defaults to now")
    notes: Optional[str] = None


class AnimalUpdate(BaseModel):
    """
    Partial animal update.

    Only fields present in the body are applied. Sending ``habitat: null``
    (or an empty string) removes the animal from its habitat; omitting the
    field leaves the assignment untouched.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    species: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[AnimalCategory] = None
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[Gender] = None
    health_status: Optional[HealthStatus] = None
    habitat: Optional[str] = None
    assigned_keeper: Optional[str] = None
    arrival_date: Optional[datetime] = None
    notes: Optional[str] = None


class HabitatRef(BaseModel):
    """Expanded habitat reference."""
    id: str
    name: str
    type: str


class KeeperRef(BaseModel):
    """Expanded keeper reference."""
    id: str
    username: str
    email: str


class AnimalResponse(BaseModel):
    """Animal with habitat and keeper expanded."""
    id: str
    name: str
    species: str
    category: AnimalCategory
    age: Optional[int] = None
    gender: Gender
    health_status: HealthStatus
    habitat: Optional[HabitatRef] = None
    assigned_keeper: Optional[KeeperRef] = None
    arrival_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
