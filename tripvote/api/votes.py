import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.auth_models import User
from ..services import results as aggregator
from ..services import vote_ledger
from ..services.vote_ledger import as_utc, is_voting_open
from .auth import get_current_user, require_admin, require_user
from .schemas_geo import DestinationSummary
from .schemas_vote import (
    VoteIn, VoteOut, VoteResponse, MyVoteOut, MyVoteResponse,
    ResultOut, ResultsResponse, DetailedVoteOut, DetailedResultsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/votes", tags=["votes"])


@router.post("", response_model=VoteResponse, status_code=201)
def cast_vote(
    payload: VoteIn,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    """Cast the caller's single vote."""
    vote = vote_ledger.cast_vote(db, user.id, payload.destination_id)
    return VoteResponse(data=VoteOut(
        id=vote.id,
        user_id=vote.user_id,
        destination_id=vote.destination_id,
        created_at=as_utc(vote.created_at),
    ))


@router.get("/results", response_model=ResultsResponse)
def get_results(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    """
    Vote counts per destination. Public; a valid token adds the caller's own vote.
    """
    rows, user_vote = aggregator.get_results(db, caller_id=user.id if user else None)
    results = []
    for r in rows:
        r["voting_deadline"] = as_utc(r["voting_deadline"])
        results.append(ResultOut(**r))
    return ResultsResponse(results=results, user_vote=user_vote)


@router.get("/my-vote", response_model=MyVoteResponse)
def get_my_vote(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    vote = vote_ledger.get_my_vote(db, user.id)
    if vote is None:
        return MyVoteResponse(data=None)

    dest = vote.destination
    summary = None
    if dest is not None:
        summary = DestinationSummary(
            id=dest.id,
            name=dest.name,
            location=dest.location,
            image_url=dest.image_url,
            cost=dest.cost,
            voting_deadline=as_utc(dest.voting_deadline),
            voting_open=is_voting_open(dest.voting_deadline),
        )
    else:
        logger.warning("Referential integrity: vote %s references missing destination %s",
                       vote.id, vote.destination_id)
    return MyVoteResponse(data=MyVoteOut(
        id=vote.id,
        destination_id=vote.destination_id,
        created_at=as_utc(vote.created_at),
        destination=summary,
    ))


@router.get("/detailed-results", response_model=DetailedResultsResponse)
def get_detailed_results(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Every vote with voter and destination, newest first (admin only)."""
    rows = aggregator.get_detailed_results(db)
    data = []
    for r in rows:
        r["cast_at"] = as_utc(r["cast_at"])
        data.append(DetailedVoteOut(**r))
    return DetailedResultsResponse(count=len(data), data=data)
