from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from .models.db import Base
from datetime import datetime, timezone

def utcnow():
    return datetime.now(timezone.utc)

# Name of the constraint that enforces one vote per user, whatever the destination
VOTE_USER_CONSTRAINT = "uq_votes_user_id"

class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("user_id", name=VOTE_USER_CONSTRAINT),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    destination_id = Column(Integer, ForeignKey("destinations.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="vote")
    destination = relationship("Destination", back_populates="votes")
