"""
Vote ledger: casting votes and reading a voter's own vote.

One vote per user, whatever the destination. The unique constraint on
``votes.user_id`` is the only arbiter of duplicates; the ledger inserts
optimistically and translates the constraint violation into ``AlreadyVoted``.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..errors import AlreadyVoted, DeadlineExpired
from ..models_vote import Vote, VOTE_USER_CONSTRAINT
from .destinations import get_destination, parse_destination_id

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; stored values are always UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_voting_open(deadline: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """
    Open/closed status of a destination, computed from its deadline.

    No deadline means voting never closes. Voting is still open at the exact
    deadline instant and closes strictly after it.
    """
    if deadline is None:
        return True
    now = as_utc(now) if now is not None else utcnow()
    return now <= as_utc(deadline)


def _is_duplicate_voter(exc: IntegrityError) -> bool:
    message = str(getattr(exc, "orig", exc))
    return VOTE_USER_CONSTRAINT in message or "votes.user_id" in message


def cast_vote(db: Session, voter_id: int, destination_id: Any, now: Optional[datetime] = None) -> Vote:
    """
    Record ``voter_id``'s vote for a destination.

    Checks, in order: id syntax (InvalidReference), existence (NotFound),
    deadline (DeadlineExpired), then inserts. A second vote by the same voter,
    for this or any other destination, raises AlreadyVoted.
    """
    dest_id = parse_destination_id(destination_id)
    destination = get_destination(db, dest_id)

    now = now or utcnow()
    if not is_voting_open(destination.voting_deadline, now):
        logger.warning(
            "Vote rejected for user %s: deadline %s passed for destination %s",
            voter_id, as_utc(destination.voting_deadline).isoformat(), dest_id,
        )
        raise DeadlineExpired()

    vote = Vote(user_id=voter_id, destination_id=dest_id, created_at=now)
    db.add(vote)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_duplicate_voter(exc) or has_voted(db, voter_id):
            logger.info("Duplicate vote attempt by user %s (destination %s)", voter_id, dest_id)
            raise AlreadyVoted() from None
        raise
    db.refresh(vote)
    logger.info("User %s voted for destination %s (vote %s)", voter_id, dest_id, vote.id)
    return vote


def has_voted(db: Session, voter_id: int) -> bool:
    return db.query(Vote.id).filter(Vote.user_id == voter_id).first() is not None


def get_my_vote(db: Session, voter_id: int) -> Optional[Vote]:
    """The voter's single vote with its destination loaded, or None."""
    return (
        db.query(Vote)
        .options(joinedload(Vote.destination))
        .filter(Vote.user_id == voter_id)
        .one_or_none()
    )


def get_voted_destination_id(db: Session, voter_id: int) -> Optional[int]:
    row = db.query(Vote.destination_id).filter(Vote.user_id == voter_id).first()
    return row[0] if row else None


def delete_votes_for_destination(db: Session, destination_id: int) -> int:
    """
    Bulk-delete every vote referencing a destination.

    Does not commit: the catalog deletes the destination in the same transaction.
    """
    deleted = (
        db.query(Vote)
        .filter(Vote.destination_id == destination_id)
        .delete(synchronize_session=False)
    )
    logger.info("Removed %s vote(s) for destination %s", deleted, destination_id)
    return deleted
