import os
import tempfile

# precisa estar no ambiente antes de importar a aplicação
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("CSRF_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("AUDIT_LOG_DIR", tempfile.mkdtemp(prefix="bizflow-audit-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from infrastructure.database import Base, get_db
from infrastructure.csrf import csrf_protection
from infrastructure.rate_limiter import reset_rate_limits

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_state():
    Base.metadata.create_all(bind=engine)
    reset_rate_limits()
    csrf_protection.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


USER_PAYLOAD = {"name": "Ana", "email": "ana@acme.com", "password": "abc123"}


@pytest.fixture
def registered(client):
    response = client.post("/api/auth/register", json=USER_PAYLOAD)
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def auth_headers(registered):
    return {"Authorization": f"Bearer {registered['accessToken']}"}


@pytest.fixture
def make_client(client, auth_headers):
    def _make(**overrides):
        payload = {"name": "Cliente Uno", "email": "uno@acme.com", "industry": "Retail"}
        payload.update(overrides)
        response = client.post("/api/clients", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _make


@pytest.fixture
def make_sale(client, auth_headers):
    def _make(client_id, **overrides):
        payload = {"client": client_id, "amount": 100, "status": "paid"}
        payload.update(overrides)
        response = client.post("/api/sales", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _make
