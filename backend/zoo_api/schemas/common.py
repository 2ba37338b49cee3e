"""
Small response bodies shared across routers.
"""
from pydantic import BaseModel, Field


class CountResponse(BaseModel):
    """Document count."""
    count: int = Field(..., ge=0)


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str
