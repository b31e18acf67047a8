from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from .db import Base

ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"
ROLES = (ROLE_ADMIN, ROLE_EMPLOYEE)


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    """Employee or administrator allowed to vote on trip destinations."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, default=ROLE_EMPLOYEE, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # No cascade: votes are removed by the destination delete path only
    vote = relationship("Vote", back_populates="user", uselist=False)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
