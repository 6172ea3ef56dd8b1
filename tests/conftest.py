import os
from datetime import datetime, timedelta, timezone

# Must be set before marketplace.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.config import JWT_ALGORITHM, SECRET_KEY
from marketplace.database import Base, get_db
from marketplace.main import app
from marketplace.models import Bid, Project, ProjectStatus, Skill, User, UserRole


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_token(user: User, expires_in: timedelta = timedelta(hours=1)) -> str:
    claims = {"id": user.id, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(claims, SECRET_KEY, algorithm=JWT_ALGORITHM)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {make_token(user)}"}


def make_user(db, role: UserRole, name: str) -> User:
    user = User(name=name, email=f"{name.lower()}@example.com", role=role.value)
    db.add(user)
    db.commit()
    return user


def make_project(db, owner: User, status: ProjectStatus = ProjectStatus.OPEN, **fields) -> Project:
    project = Project(
        client_id=owner.id,
        title=fields.pop("title", "Build a landing page"),
        description=fields.pop("description", "Marketing site for a product launch"),
        budget=fields.pop("budget", 500.0),
        status=status.value,
        **fields,
    )
    db.add(project)
    db.commit()
    return project


def make_bid(db, project: Project, freelancer: User, amount: float = 100.0, **fields) -> Bid:
    bid = Bid(
        project_id=project.id,
        freelancer_id=freelancer.id,
        amount=amount,
        duration=fields.pop("duration", 7),
        cover_letter=fields.pop("cover_letter", None),
        **fields,
    )
    db.add(bid)
    db.commit()
    return bid


@pytest.fixture
def alice(db):
    """Client who owns projects"""
    return make_user(db, UserRole.CLIENT, "Alice")


@pytest.fixture
def carol(db):
    """A second client"""
    return make_user(db, UserRole.CLIENT, "Carol")


@pytest.fixture
def bob(db):
    """Freelancer"""
    return make_user(db, UserRole.FREELANCER, "Bob")


@pytest.fixture
def dave(db):
    """A second freelancer"""
    return make_user(db, UserRole.FREELANCER, "Dave")


@pytest.fixture
def project(db, alice):
    return make_project(db, alice)


@pytest.fixture
def skills(db):
    python = Skill(name="Python", category="Software Development")
    design = Skill(name="UI/UX Design", category="Design")
    db.add_all([python, design])
    db.commit()
    return {"python": python, "design": design}
