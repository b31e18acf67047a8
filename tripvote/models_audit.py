from sqlalchemy import Column, Integer, String, DateTime, Text
from datetime import datetime, timezone
from .models.db import Base

def utcnow():
    return datetime.now(timezone.utc)

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    ts = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    actor = Column(String, nullable=True)  # email of the admin, or "system"
    action = Column(String, nullable=False)  # create / update / delete
    entity_type = Column(String, nullable=False)
    entity_id = Column(Integer, nullable=False, index=True)
    field = Column(String, nullable=True)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
