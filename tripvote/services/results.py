"""
Vote aggregation for the public leaderboard and the admin audit view.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.auth_models import User
from ..models_geo import Destination
from ..models_vote import Vote
from .vote_ledger import get_voted_destination_id, is_voting_open, utcnow

logger = logging.getLogger(__name__)

DELETED_USER = "[deleted user]"
DELETED_DESTINATION = "[deleted destination]"


def get_results(db: Session, caller_id: Optional[int] = None, now=None) -> Tuple[List[Dict[str, Any]], Optional[int]]:
    """
    Vote counts per destination, most votes first, ties by name.

    Destinations without votes are not listed. Vote groups whose destination
    no longer exists are dropped with a warning. The second element is the
    destination the caller voted for, or None.
    """
    now = now or utcnow()
    counts = (
        db.query(Vote.destination_id.label("destination_id"), func.count(Vote.id).label("vote_count"))
        .group_by(Vote.destination_id)
        .subquery()
    )
    rows = (
        db.query(counts.c.destination_id, counts.c.vote_count, Destination)
        .select_from(counts)
        .outerjoin(Destination, Destination.id == counts.c.destination_id)
        .order_by(counts.c.vote_count.desc(), Destination.name.asc(), Destination.id.asc())
        .all()
    )

    results = []
    for destination_id, vote_count, destination in rows:
        if destination is None:
            logger.warning(
                "Referential integrity: %s vote(s) reference missing destination %s; excluded from results",
                vote_count, destination_id,
            )
            continue
        results.append({
            "destination_id": destination.id,
            "name": destination.name,
            "location": destination.location,
            "image_url": destination.image_url,
            "cost": destination.cost,
            "description": destination.description,
            "voting_deadline": destination.voting_deadline,
            "voting_open": is_voting_open(destination.voting_deadline, now),
            "vote_count": vote_count,
        })

    user_vote = get_voted_destination_id(db, caller_id) if caller_id is not None else None
    return results, user_vote


def get_detailed_results(db: Session) -> List[Dict[str, Any]]:
    """Every vote with voter and destination names, newest first."""
    rows = (
        db.query(Vote, User.name, Destination.name, Destination.location)
        .select_from(Vote)
        .outerjoin(User, User.id == Vote.user_id)
        .outerjoin(Destination, Destination.id == Vote.destination_id)
        .order_by(Vote.created_at.desc(), Vote.id.desc())
        .all()
    )

    detailed = []
    dangling = 0
    for vote, voter_name, destination_name, destination_location in rows:
        if voter_name is None or destination_name is None:
            dangling += 1
        detailed.append({
            "vote_id": vote.id,
            "voter_id": vote.user_id,
            "voter_name": voter_name if voter_name is not None else DELETED_USER,
            "destination_id": vote.destination_id,
            "destination_name": destination_name if destination_name is not None else DELETED_DESTINATION,
            "destination_location": destination_location,
            "cast_at": vote.created_at,
        })
    if dangling:
        logger.warning("Referential integrity: %s vote(s) reference a deleted user or destination", dangling)
    return detailed
