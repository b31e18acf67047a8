"""
Fixtures partagées pour tous les tests.
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tripvote import config
from tripvote.auth.passwords import hash_password, pwd_context
from tripvote.auth.session import create_token
from tripvote.models.db import Base
from tripvote.models.auth_models import User, ROLE_ADMIN, ROLE_EMPLOYEE
from tripvote.models_geo import Destination
from tripvote.models_vote import Vote
from tripvote.models_audit import AuditLog  # noqa: F401  (registers the table)

# Base de données de test en mémoire SQLite
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# Créer un moteur SQLite en mémoire pour les tests
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Coût bcrypt minimal pour les tests
FAST_ROUNDS = 4
PASSWORD = "secret123"


@pytest.fixture(scope="session", autouse=True)
def fast_hashing():
    """Réduit le coût bcrypt pendant toute la session de tests."""
    pwd_context.update(bcrypt__rounds=FAST_ROUNDS)
    yield
    pwd_context.update(bcrypt__rounds=config.BCRYPT_ROUNDS)


@pytest.fixture(scope="function")
def db():
    """
    Crée une nouvelle base de données pour chaque test.
    La base est créée au début et supprimée à la fin pour garantir l'isolation.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()  # Annuler toute transaction en cours
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db, monkeypatch):
    """
    Crée un client de test FastAPI avec une base de données isolée.
    Remplace SessionLocal et get_db pour utiliser notre base de test.
    """
    from tripvote.models import db as models_db
    monkeypatch.setattr(models_db, "SessionLocal", TestingSessionLocal)

    from tripvote.main import app
    from tripvote.db import get_db as original_get_db

    def override_get_db():
        # La session est fermée par la fixture db
        yield db

    app.dependency_overrides[original_get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Fabrique d'utilisateurs (employé par défaut)."""
    counter = {"n": 0}

    def _make(name=None, email=None, role=ROLE_EMPLOYEE, password=PASSWORD):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@company.com",
            password_hash=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", email="admin@company.com", role=ROLE_ADMIN)


@pytest.fixture
def employee(make_user):
    return make_user(name="Alice Employee", email="alice@company.com")


@pytest.fixture
def auth_headers():
    """En-têtes Authorization pour un utilisateur donné."""

    def _headers(user):
        return {"Authorization": f"Bearer {create_token(user.id, user.role)}"}

    return _headers


@pytest.fixture
def make_destination(db, admin):
    """Fabrique de destinations ; ``deadline_in`` est un timedelta relatif à maintenant."""

    def _make(name="Mountain Retreat", location="Aspen, Colorado", cost=1200,
              deadline=None, deadline_in=None, **extra):
        if deadline_in is not None:
            deadline = datetime.now(timezone.utc) + deadline_in
        dest = Destination(
            name=name,
            description=extra.pop("description", f"{name} description"),
            location=location,
            cost=cost,
            voting_deadline=deadline,
            added_by=admin.id,
            **extra,
        )
        db.add(dest)
        db.commit()
        db.refresh(dest)
        return dest

    return _make


@pytest.fixture
def add_votes(db, make_user):
    """Ajoute ``count`` votes d'utilisateurs distincts pour une destination."""

    def _add(destination, count):
        votes = []
        for _ in range(count):
            voter = make_user()
            vote = Vote(user_id=voter.id, destination_id=destination.id)
            db.add(vote)
            votes.append(vote)
        db.commit()
        return votes

    return _add
