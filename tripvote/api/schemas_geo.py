from datetime import datetime
from typing import Optional
from pydantic import BaseModel, confloat, constr


class DestinationIn(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=100)
    description: constr(strip_whitespace=True, min_length=1)
    location: constr(strip_whitespace=True, min_length=1)
    cost: confloat(ge=0)
    image_url: Optional[constr(strip_whitespace=True, max_length=500)] = None
    voting_deadline: Optional[datetime] = None  # naive values are read as UTC


class DestinationPatch(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=100)] = None
    description: Optional[constr(strip_whitespace=True, min_length=1)] = None
    location: Optional[constr(strip_whitespace=True, min_length=1)] = None
    cost: Optional[confloat(ge=0)] = None
    image_url: Optional[constr(strip_whitespace=True, max_length=500)] = None
    voting_deadline: Optional[datetime] = None  # explicit null removes the deadline


class DestinationOut(BaseModel):
    id: int
    name: str
    description: str
    location: str
    cost: float
    image_url: Optional[str] = None
    voting_deadline: Optional[datetime] = None
    voting_open: bool
    added_by: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DestinationSummary(BaseModel):
    id: int
    name: str
    location: str
    image_url: Optional[str] = None
    cost: float
    voting_deadline: Optional[datetime] = None
    voting_open: bool
