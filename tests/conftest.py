import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["CLASSIFIER_URL"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import doctrack.models  # noqa: E402,F401
from doctrack.api.deps import get_db  # noqa: E402
from doctrack.db import Base, SessionLocal, engine  # noqa: E402
from doctrack.main import app  # noqa: E402
from doctrack.models.directory import User, UserRole  # noqa: E402
from doctrack.schemas.tracking import DocumentCreate  # noqa: E402
from doctrack.services.seed import seed_offices  # noqa: E402


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def offices(db_session):
    seed_offices(db_session)
    return [
        "Accounting Section",
        "Cashier Section",
        "HR Section",
        "Records Section",
        "SGOD Section",
    ]


def _make_user(db_session, name, office, role, position=None):
    user = User(name=name, position=position, office=office, role=role)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def staff(db_session, offices):
    return _make_user(db_session, "Richard", "Cashier Section", UserRole.staff)


@pytest.fixture()
def admin(db_session, offices):
    return _make_user(db_session, "Josh", "Records Section", UserRole.admin)


@pytest.fixture()
def approver(db_session, offices):
    return _make_user(db_session, "Daisy", "SGOD Section", UserRole.approver)


@pytest.fixture()
def super_admin(db_session, offices):
    return _make_user(db_session, "Root", "Accounting Section", UserRole.super_admin)


@pytest.fixture()
def hr_staff(db_session, offices):
    return _make_user(db_session, "Hana", "HR Section", UserRole.staff)


@pytest.fixture()
def make_user(db_session, offices):
    def _make(name, office, role=UserRole.staff):
        return _make_user(db_session, name, office, role)

    return _make


@pytest.fixture()
def make_document(db_session):
    from doctrack.services.documents import documents

    def _make(sender, recipient_office, title="Purchase request", **kwargs):
        payload = DocumentCreate(
            title=title,
            description=kwargs.pop("description", "Quarterly office supplies"),
            recipient_office=recipient_office,
            **kwargs,
        )
        return documents.create(db_session, payload, sender)

    return _make


@pytest.fixture()
def actor_headers():
    def _headers(user):
        return {"X-Actor-Id": str(user.id)}

    return _headers
