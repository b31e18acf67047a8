from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from .models.db import Base
from datetime import datetime, timezone

def utcnow():
    return datetime.now(timezone.utc)

class Destination(Base):
    __tablename__ = "destinations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    cost = Column(Float, nullable=False)
    image_url = Column(String, nullable=True)
    voting_deadline = Column(DateTime(timezone=True), nullable=True)  # None = voting never closes
    added_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    creator = relationship("User")
    # Deleted explicitly by services.destinations.delete_destination, never via ORM cascade
    votes = relationship("Vote", back_populates="destination", passive_deletes="all")
