import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from backend.database import get_session
from backend.main import app
from backend.models import User


@pytest.fixture(name="session")
def session_fixture():
    # One shared in-memory database for the test and TestClient's worker threads
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Full app with every router, bound to the test database."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(name="user_id")
def user_fixture(session: Session) -> int:
    """A lifter profile (kg) with no exercises; returns its id."""
    user = User(name="Ana", weight_unit="kg")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user.id
