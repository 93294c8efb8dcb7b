from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.mercadopago_service import get_mercadopago_service
from app.core.security import create_access_token, get_password_hash
from app.database import Base, get_db
from app.main import app
from app.models.administrador import Administrador
from app.schemas.pago import PreferenciaResponse

ADMIN_EMAIL = "admin@betel.mx"
ADMIN_PASSWORD = "clave-segura-123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway():
    """Mercado Pago simulado: nunca sale a la red."""
    service = MagicMock()
    service.back_urls.side_effect = lambda path, query: {
        estado: f"https://test.local{path}?status={estado}&{query}"
        for estado in ("success", "failure", "pending")
    }
    service.create_preference.return_value = PreferenciaResponse(
        preference_id="pref-123",
        init_point="https://www.mercadopago.com.mx/checkout/v1/redirect?pref_id=pref-123",
    )
    return service


@pytest.fixture
def client(engine, gateway):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mercadopago_service] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    admin = Administrador(email=ADMIN_EMAIL, hashed_password=get_password_hash(ADMIN_PASSWORD), active=True)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def admin_headers(admin):
    token = create_access_token(data={"sub": admin.email})
    return {"Authorization": f"Bearer {token}"}


def reservation_payload(**overrides):
    payload = {
        "responsible_name": "Juan Pérez",
        "responsible_phone": "961 123 4567",
        "responsible_congregation": "Tuxtla Centro",
        "seats_total": 4,
        "minors_count": 1,
        "payment_method": "transfer",
        "passengers": [
            {"first_name": "Juan", "last_name": "Pérez", "age": 40},
            {"first_name": "Ana", "last_name": "López", "age": 38},
            {"first_name": "Luis", "last_name": "Pérez", "age": 10},
            {"first_name": "Sofía", "last_name": "Pérez", "age": 4},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def crear_reserva(client):
    """Crea una reservación por el flujo público y devuelve la respuesta completa."""
    def _crear(**overrides):
        response = client.post("/reservaciones/", json=reservation_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()
    return _crear


@pytest.fixture
def pagar(client, admin_headers):
    def _pagar(reservation_id, amount, **extra):
        response = client.post(
            "/pagos/",
            json={"reservation_id": reservation_id, "amount": amount, **extra},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _pagar
