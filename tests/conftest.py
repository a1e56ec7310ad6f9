import io
import os
import tempfile

# must be set before the app (and its config) is imported
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="reportes-uploads-")
os.environ["PORT"] = "3000"
os.environ["PUBLIC_HOST"] = "localhost"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from reports_api.config import UPLOAD_DIR
from reports_api.db.db import get_session, init_db
from reports_api.main import app


def make_engine(with_tables=True):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if with_tables:
        init_db(engine)
    return engine


@pytest.fixture
def engine():
    engine = make_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client():
    """Client whose database has no tables, so every query fails."""
    engine = make_engine(with_tables=False)

    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def upload_dir():
    return UPLOAD_DIR


@pytest.fixture
def png_bytes():
    # noise does not compress, so 60x60 RGB lands around 10KB
    img = Image.frombytes("RGB", (60, 60), os.urandom(60 * 60 * 3))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def report_form():
    return {
        "user_id": "7",
        "title": "Bache en la avenida",
        "description": "Un bache profundo frente al número 120",
        "location": "Av. Siempre Viva 120",
        "contact": "vecino@example.com",
        "status": "pendiente",
    }
