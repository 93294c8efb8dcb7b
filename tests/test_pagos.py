from app.core.exceptions import PaymentGatewayError


def test_pagos_acumulan_y_derivan_estado(client, admin_headers, crear_reserva, pagar):
    reserva = crear_reserva()["reservation"]

    primero = pagar(reserva["id"], 1000, method="efectivo")
    assert primero["amount_paid"] == 1000
    assert primero["status"] == "pendiente"

    segundo = pagar(reserva["id"], 1700, reference="SPEI-1")
    assert segundo["amount_paid"] == 2700
    assert segundo["status"] == "anticipo_pagado"
    assert segundo["payment"]["method"] == "transferencia"

    tercero = pagar(reserva["id"], 2700)
    assert tercero["amount_paid"] == 5400
    assert tercero["status"] == "pagado_completo"

    historial = client.get(f"/pagos/reserva/{reserva['id']}", headers=admin_headers).json()
    assert [p["amount"] for p in historial] == [1000, 1700, 2700]


def test_pago_requiere_monto_positivo(client, admin_headers, crear_reserva):
    reserva = crear_reserva()["reservation"]
    response = client.post("/pagos/", json={"reservation_id": reserva["id"], "amount": 0}, headers=admin_headers)
    assert response.status_code == 422


def test_pago_a_reservacion_inexistente(client, admin_headers):
    response = client.post("/pagos/", json={"reservation_id": 999, "amount": 100}, headers=admin_headers)
    assert response.status_code == 404


def test_pago_requiere_admin(client, crear_reserva):
    reserva = crear_reserva()["reservation"]
    assert client.post("/pagos/", json={"reservation_id": reserva["id"], "amount": 100}).status_code == 401


def test_preferencia_de_anticipo(client, gateway, crear_reserva):
    reserva = crear_reserva()["reservation"]

    response = client.post("/pagos/preferencia", json={"reservation_id": reserva["id"], "is_deposit": True})
    assert response.status_code == 200
    assert response.json()["preference_id"] == "pref-123"

    kwargs = gateway.create_preference.call_args.kwargs
    assert kwargs["external_reference"] == reserva["reservation_code"]
    assert kwargs["items"][0]["unit_price"] == 2700
    assert kwargs["items"][0]["currency_id"] == "MXN"


def test_preferencia_de_saldo_pendiente(client, gateway, crear_reserva, pagar):
    reserva = crear_reserva()["reservation"]
    pagar(reserva["id"], 2700)

    client.post("/pagos/preferencia", json={"reservation_id": reserva["id"]})
    assert gateway.create_preference.call_args.kwargs["items"][0]["unit_price"] == 2700


def test_preferencia_sin_saldo(client, crear_reserva, pagar):
    reserva = crear_reserva()["reservation"]
    pagar(reserva["id"], 5400)

    response = client.post("/pagos/preferencia", json={"reservation_id": reserva["id"]})
    assert response.status_code == 400


def test_preferencia_con_pasarela_caida(client, gateway, crear_reserva):
    reserva = crear_reserva()["reservation"]
    gateway.create_preference.side_effect = PaymentGatewayError("Mercado Pago no está configurado")

    response = client.post("/pagos/preferencia", json={"reservation_id": reserva["id"]})
    assert response.status_code == 503
    assert response.json()["detail"] == "Mercado Pago no está configurado"


def test_webhook_siempre_responde(client):
    response = client.post("/pagos/webhook", json={"type": "payment", "data": {"id": "123"}})
    assert response.status_code == 200
    assert response.json() == {"received": True}

    otro = client.post("/pagos/webhook", json={"type": "merchant_order", "extra": 1})
    assert otro.json() == {"received": True}
