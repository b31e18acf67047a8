"""
Reset the database to a demo state.

Clears votes and destinations, keeps only the default admin, then inserts
sample employees and destinations. Run with ``python -m tripvote.seed``.
"""
import logging

from .config import DEFAULT_ADMIN_NAME, DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD
from .models import db as models_db
from .models.auth_models import User, ROLE_ADMIN, ROLE_EMPLOYEE
from .models_geo import Destination
from .models_vote import Vote
from .models_audit import AuditLog
from .auth.passwords import hash_password

logger = logging.getLogger(__name__)

SAMPLE_EMPLOYEES = [
    {"name": "Alice Employee", "email": "employee1@company.com", "password": "password123"},
    {"name": "Bob Worker", "email": "employee2@company.com", "password": "password123"},
    {"name": "Charlie Staff", "email": "employee3@company.com", "password": "password123"},
]

SAMPLE_DESTINATIONS = [
    {
        "name": "Mountain Retreat",
        "description": "A relaxing retreat in the serene mountains. Hiking, yoga, and fresh air.",
        "location": "Aspen, Colorado",
        "cost": 1200,
        "image_url": "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=600",
    },
    {
        "name": "Beach Paradise Getaway",
        "description": "Sun, sand, and team activities on a beautiful tropical beach.",
        "location": "Maui, Hawaii",
        "cost": 2500,
        "image_url": "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?w=600",
    },
    {
        "name": "Urban Exploration",
        "description": "Explore a vibrant city, museums, fine dining, and cultural experiences.",
        "location": "New York City, NY",
        "cost": 1800,
        "image_url": "https://images.unsplash.com/photo-1496442226666-8d4d0e62e6e9?w=600",
    },
    {
        "name": "Adventure Park Challenge",
        "description": "Zip-lining, rope courses, and team challenges in an outdoor adventure park.",
        "location": "Austin, Texas",
        "cost": 900,
        "image_url": "https://images.unsplash.com/photo-1605721911519-8a760d5354c0?w=600",
    },
]


def seed_database(session_factory=None):
    session_factory = session_factory or models_db.SessionLocal
    models_db.Base.metadata.create_all(bind=session_factory.kw["bind"])

    admin_email = DEFAULT_ADMIN_EMAIL.lower()
    with session_factory() as s:
        # Votes first: they reference both users and destinations
        s.query(Vote).delete(synchronize_session=False)
        s.query(Destination).delete(synchronize_session=False)
        s.query(AuditLog).delete(synchronize_session=False)
        removed = s.query(User).filter(User.email != admin_email).delete(synchronize_session=False)

        admin = s.query(User).filter(User.email == admin_email).first()
        if not admin:
            admin = User(
                name=DEFAULT_ADMIN_NAME,
                email=admin_email,
                password_hash=hash_password(DEFAULT_ADMIN_PASSWORD),
                role=ROLE_ADMIN,
            )
            s.add(admin)
        else:
            admin.name = DEFAULT_ADMIN_NAME
            admin.role = ROLE_ADMIN
        s.flush()

        for emp in SAMPLE_EMPLOYEES:
            s.add(User(
                name=emp["name"],
                email=emp["email"].lower(),
                password_hash=hash_password(emp["password"]),
                role=ROLE_EMPLOYEE,
            ))

        for dest in SAMPLE_DESTINATIONS:
            s.add(Destination(**dest, added_by=admin.id))

        s.commit()

    logger.info(
        "Seed done -> removed_users=%s, employees=%s, destinations=%s",
        removed, len(SAMPLE_EMPLOYEES), len(SAMPLE_DESTINATIONS),
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    seed_database()
