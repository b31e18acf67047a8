from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel

from .schemas_geo import DestinationSummary


class VoteIn(BaseModel):
    # Left untyped so malformed ids reach the ledger and come back as invalid_reference
    destination_id: Any = None


class VoteOut(BaseModel):
    id: int
    user_id: int
    destination_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class VoteResponse(BaseModel):
    success: bool = True
    data: VoteOut


class MyVoteOut(BaseModel):
    id: int
    destination_id: int
    created_at: datetime
    destination: Optional[DestinationSummary] = None


class MyVoteResponse(BaseModel):
    success: bool = True
    data: Optional[MyVoteOut] = None


class ResultOut(BaseModel):
    destination_id: int
    name: str
    location: str
    image_url: Optional[str] = None
    cost: float
    description: str
    voting_deadline: Optional[datetime] = None
    voting_open: bool
    vote_count: int


class ResultsResponse(BaseModel):
    success: bool = True
    results: List[ResultOut]
    user_vote: Optional[int] = None


class DetailedVoteOut(BaseModel):
    vote_id: int
    voter_id: int
    voter_name: str
    destination_id: int
    destination_name: str
    destination_location: Optional[str] = None
    cast_at: datetime


class DetailedResultsResponse(BaseModel):
    success: bool = True
    count: int
    data: List[DetailedVoteOut]
