"""
Destination catalog: CRUD on voting options.

Deleting a destination removes its votes first, inside the same transaction,
so no vote is ever left pointing at a missing destination.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..errors import InvalidReference, NotFound
from ..models_geo import Destination
from .audit import log_change

logger = logging.getLogger(__name__)

MAX_ID = 2 ** 63 - 1
IMMUTABLE_FIELDS = ("added_by", "created_at")


def parse_destination_id(raw: Any) -> int:
    """Accept an int or a string of digits; anything else is an InvalidReference."""
    if isinstance(raw, bool):
        raise InvalidReference()
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise InvalidReference()
    if value < 1 or value > MAX_ID:
        raise InvalidReference()
    return value


def get_destination(db: Session, destination_id: int) -> Destination:
    destination = db.get(Destination, destination_id)
    if destination is None:
        logger.warning("Destination %s not found", destination_id)
        raise NotFound(f"Destination not found with ID {destination_id}")
    return destination


def list_destinations(db: Session) -> List[Destination]:
    return (
        db.query(Destination)
        .order_by(Destination.created_at.desc(), Destination.id.desc())
        .all()
    )


def _normalize(values: Dict[str, Any]) -> Dict[str, Any]:
    from .vote_ledger import as_utc

    for key in ("name", "location", "image_url"):
        if isinstance(values.get(key), str):
            values[key] = values[key].strip()
    if values.get("image_url") == "":
        values["image_url"] = None
    if "voting_deadline" in values:
        values["voting_deadline"] = as_utc(values["voting_deadline"])
    return values


def create_destination(db: Session, values: Dict[str, Any], actor) -> Destination:
    values = _normalize(dict(values))
    for key in IMMUTABLE_FIELDS:
        values.pop(key, None)
    destination = Destination(**values, added_by=actor.id)
    db.add(destination)
    db.flush()
    log_change(db, actor=actor.email, action="create", entity_type="destination",
               entity_id=destination.id, field="name", old_value=None, new_value=destination.name)
    db.commit()
    db.refresh(destination)
    logger.info("Destination %s (%s) created by %s", destination.id, destination.name, actor.email)
    return destination


def update_destination(db: Session, destination_id: int, values: Dict[str, Any], actor) -> Destination:
    """Apply only the provided fields; ``voting_deadline=None`` clears the deadline."""
    from .vote_ledger import as_utc

    destination = get_destination(db, destination_id)
    values = _normalize(dict(values))
    for key in IMMUTABLE_FIELDS:
        values.pop(key, None)

    for field, new_value in values.items():
        old_value = getattr(destination, field)
        if isinstance(old_value, datetime):
            # SQLite hands back naive UTC values
            old_value = as_utc(old_value)
        if old_value == new_value:
            continue
        setattr(destination, field, new_value)
        log_change(db, actor=actor.email, action="update", entity_type="destination",
                   entity_id=destination.id, field=field, old_value=old_value, new_value=new_value)

    db.commit()
    db.refresh(destination)
    return destination


def delete_destination(db: Session, destination_id: int, actor) -> int:
    """
    Delete a destination and every vote referencing it.

    Votes go first; if that fails the whole transaction is rolled back and the
    destination stays. Returns the number of votes removed.
    """
    from .vote_ledger import delete_votes_for_destination

    destination = get_destination(db, destination_id)
    try:
        removed = delete_votes_for_destination(db, destination.id)
        db.delete(destination)
        log_change(db, actor=actor.email, action="delete", entity_type="destination",
                   entity_id=destination_id, field="votes", old_value=removed, new_value=0)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to delete destination %s; nothing was removed", destination_id)
        raise
    logger.info("Destination %s deleted by %s with %s vote(s)", destination_id, actor.email, removed)
    return removed
