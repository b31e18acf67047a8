from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from ..models_audit import AuditLog


def _to_str(v: Any):
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.isoformat()
    return str(v)


def log_change(db: Session, *, actor: str, action: str, entity_type: str, entity_id: int,
               field: str = None, old_value=None, new_value=None) -> AuditLog:
    """Add an audit row to the current transaction."""
    entry = AuditLog(
        actor=actor or "system",
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        field=field,
        old_value=_to_str(old_value),
        new_value=_to_str(new_value),
    )
    db.add(entry)
    # Do not commit here; outer transaction controls commit.
    return entry
