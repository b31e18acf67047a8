from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.auth_models import User
from ..models_geo import Destination
from ..services import destinations as catalog
from ..services.vote_ledger import as_utc, is_voting_open
from .auth import require_admin
from .schemas_geo import DestinationIn, DestinationOut, DestinationPatch

router = APIRouter(prefix="/api/destinations", tags=["destinations"])

# Columns that may be set back to null through PUT
NULLABLE_FIELDS = {"image_url", "voting_deadline"}


def _to_out(d: Destination) -> DestinationOut:
    return DestinationOut(
        id=d.id,
        name=d.name,
        description=d.description,
        location=d.location,
        cost=d.cost,
        image_url=d.image_url,
        voting_deadline=as_utc(d.voting_deadline),
        voting_open=is_voting_open(d.voting_deadline),
        added_by=d.added_by,
        created_at=as_utc(d.created_at),
        updated_at=as_utc(d.updated_at),
    )


@router.get("")
def list_destinations(db: Session = Depends(get_db)):
    """
    List all destinations, newest first.
    """
    rows = catalog.list_destinations(db)
    return {"success": True, "count": len(rows), "data": [_to_out(d) for d in rows]}


@router.get("/{destination_id}")
def get_destination(destination_id: str, db: Session = Depends(get_db)):
    dest = catalog.get_destination(db, catalog.parse_destination_id(destination_id))
    return {"success": True, "data": _to_out(dest)}


@router.post("", status_code=201)
def create_destination(
    payload: DestinationIn,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    Create a new destination (admin only).
    """
    dest = catalog.create_destination(db, payload.model_dump(), actor=admin)
    return {"success": True, "data": _to_out(dest)}


@router.put("/{destination_id}")
def update_destination(
    destination_id: str,
    payload: DestinationPatch,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    dest_id = catalog.parse_destination_id(destination_id)
    values = {
        k: v for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    dest = catalog.update_destination(db, dest_id, values, actor=admin)
    return {"success": True, "data": _to_out(dest)}


@router.delete("/{destination_id}")
def delete_destination(
    destination_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """
    Delete a destination together with its votes.
    """
    removed = catalog.delete_destination(db, catalog.parse_destination_id(destination_id), actor=admin)
    return {"success": True, "data": {}, "votes_removed": removed}
