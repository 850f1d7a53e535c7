from datetime import datetime
from pathlib import Path
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from database import Base  # noqa: E402
from models import ParticipantType, Registration, RegistrationTeamMember  # noqa: E402

PASSKEYS = {
    "PASSKEY_MASTER": "master-secret",
    "PASSKEY_HACKATHON": "hack-secret",
    "PASSKEY_QUIZ": "quiz-secret",
}


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient

    from database import get_db
    from security import get_passkey_source
    from server import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_passkey_source] = lambda: dict(PASSKEYS)
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_registration(
    event_name="Hackathon",
    team_name="Team Rocket",
    cap_name="Asha",
    cap_phone="9000000001",
    cap_roll="101",
    participant_type=ParticipantType.INTERNAL,
    members=(),
    created_at=None,
):
    registration = Registration(
        event_name=event_name,
        team_name=team_name,
        cap_name=cap_name,
        cap_phone=cap_phone,
        cap_roll=cap_roll,
        participant_type=participant_type,
        created_at=created_at or datetime(2026, 2, 1, 10, 30, 0),
    )
    registration.team_members = [
        RegistrationTeamMember(position=index, mem_name=name, mem_roll=roll, mem_phone=phone)
        for index, (name, roll, phone) in enumerate(members)
    ]
    return registration


@pytest.fixture
def add_registration(db):
    def _add(**kwargs):
        registration = make_registration(**kwargs)
        db.add(registration)
        db.commit()
        return registration

    return _add


@pytest.fixture
def build_registration():
    return make_registration
