from unittest.mock import MagicMock, patch

import pytest
import requests

from app.config import settings
from app.core.exceptions import PaymentGatewayError
from app.core.mercadopago_service import MercadoPagoService

ITEMS = [{"id": "BETEL-AB12", "title": "Viaje", "quantity": 1, "unit_price": 2700.0, "currency_id": "MXN"}]


@pytest.fixture
def service(monkeypatch):
    monkeypatch.setattr(settings, "MP_ACCESS_TOKEN", "TEST-token")
    monkeypatch.setattr(settings, "APP_BASE_URL", "https://betel.test")
    return MercadoPagoService()


def test_back_urls(service):
    urls = service.back_urls("/reservar/confirmacion", "code=BETEL-AB12")
    assert urls["success"] == "https://betel.test/reservar/confirmacion?status=success&code=BETEL-AB12"
    assert set(urls) == {"success", "failure", "pending"}


def test_create_preference(service):
    response = MagicMock()
    response.json.return_value = {"id": "123-abc", "init_point": "https://mp/init", "sandbox_init_point": "https://mp/sb"}

    with patch("app.core.mercadopago_service.requests.post", return_value=response) as post:
        preferencia = service.create_preference(ITEMS, "BETEL-AB12", service.back_urls("/x", "y=1"), payer_name="Juan")

    assert preferencia.preference_id == "123-abc"
    assert preferencia.init_point == "https://mp/init"

    args, kwargs = post.call_args
    assert args[0].endswith("/checkout/preferences")
    assert kwargs["headers"]["Authorization"] == "Bearer TEST-token"
    assert kwargs["json"]["notification_url"] == "https://betel.test/pagos/webhook"
    assert kwargs["json"]["payer"] == {"name": "Juan"}


def test_create_preference_sin_token(monkeypatch):
    monkeypatch.setattr(settings, "MP_ACCESS_TOKEN", None)
    with pytest.raises(PaymentGatewayError):
        MercadoPagoService().create_preference(ITEMS, "BETEL-AB12", {})


def test_create_preference_error_de_red(service):
    with patch(
        "app.core.mercadopago_service.requests.post",
        side_effect=requests.exceptions.ConnectionError("sin red"),
    ):
        with pytest.raises(PaymentGatewayError):
            service.create_preference(ITEMS, "BETEL-AB12", {})


def test_create_preference_respuesta_incompleta(service):
    response = MagicMock()
    response.json.return_value = {"id": "123"}
    with patch("app.core.mercadopago_service.requests.post", return_value=response):
        with pytest.raises(PaymentGatewayError):
            service.create_preference(ITEMS, "BETEL-AB12", {})
