import pytest


@pytest.fixture
def reserva_con_anticipo(crear_reserva, pagar):
    data = crear_reserva()
    pagar(data["reservation"]["id"], 2700)
    return data


def _crear_grupo(client, headers, **extra):
    response = client.post("/grupos/", json={"group_name": " Grupo Mañana ", **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_crear_y_listar_grupos(client, admin_headers):
    grupo = _crear_grupo(client, admin_headers, tour_datetime="2026-03-10T09:00:00", bethel_code="B-01")
    assert grupo["group_name"] == "Grupo Mañana"
    assert grupo["max_members"] == 15
    assert grupo["members_count"] == 0

    listado = client.get("/grupos/", headers=admin_headers).json()
    assert [g["id"] for g in listado] == [grupo["id"]]


def test_elegibles_solo_con_anticipo(client, admin_headers, crear_reserva, reserva_con_anticipo):
    crear_reserva()

    elegibles = client.get("/grupos/elegibles", headers=admin_headers).json()
    assert len(elegibles) == 4
    assert {p["reservation_code"] for p in elegibles} == {reserva_con_anticipo["reservation"]["reservation_code"]}


def test_asignar_miembros(client, admin_headers, reserva_con_anticipo):
    pasajeros = reserva_con_anticipo["reservation"]["passengers"]
    grupo = _crear_grupo(client, admin_headers)

    response = client.post(
        f"/grupos/{grupo['id']}/miembros",
        json={"passenger_ids": [pasajeros[0]["id"], pasajeros[1]["id"]]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["members_count"] == 2

    restantes = client.get("/grupos/elegibles", headers=admin_headers).json()
    assert len(restantes) == 2


def test_grupo_lleno(client, admin_headers, reserva_con_anticipo):
    pasajeros = reserva_con_anticipo["reservation"]["passengers"]
    grupo = _crear_grupo(client, admin_headers, max_members=2)

    response = client.post(
        f"/grupos/{grupo['id']}/miembros",
        json={"passenger_ids": [p["id"] for p in pasajeros[:3]]},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_pasajero_ya_asignado(client, admin_headers, reserva_con_anticipo):
    pasajero = reserva_con_anticipo["reservation"]["passengers"][0]
    uno = _crear_grupo(client, admin_headers)
    dos = _crear_grupo(client, admin_headers)

    client.post(f"/grupos/{uno['id']}/miembros", json={"passenger_ids": [pasajero["id"]]}, headers=admin_headers)
    response = client.post(f"/grupos/{dos['id']}/miembros", json={"passenger_ids": [pasajero["id"]]}, headers=admin_headers)
    assert response.status_code == 409


def test_pasajero_sin_anticipo(client, admin_headers, crear_reserva):
    pasajero = crear_reserva()["reservation"]["passengers"][0]
    grupo = _crear_grupo(client, admin_headers)

    response = client.post(f"/grupos/{grupo['id']}/miembros", json={"passenger_ids": [pasajero["id"]]}, headers=admin_headers)
    assert response.status_code == 400


def test_capitan_debe_ser_miembro(client, admin_headers, reserva_con_anticipo):
    pasajeros = reserva_con_anticipo["reservation"]["passengers"]
    grupo = _crear_grupo(client, admin_headers)
    client.post(f"/grupos/{grupo['id']}/miembros", json={"passenger_ids": [pasajeros[0]["id"]]}, headers=admin_headers)

    fuera = client.patch(f"/grupos/{grupo['id']}", json={"captain_passenger_id": pasajeros[1]["id"]}, headers=admin_headers)
    assert fuera.status_code == 400

    dentro = client.patch(f"/grupos/{grupo['id']}", json={"captain_passenger_id": pasajeros[0]["id"]}, headers=admin_headers)
    assert dentro.json()["captain_passenger_id"] == pasajeros[0]["id"]


def test_no_reducir_cupo_por_debajo_de_miembros(client, admin_headers, reserva_con_anticipo):
    pasajeros = reserva_con_anticipo["reservation"]["passengers"]
    grupo = _crear_grupo(client, admin_headers)
    client.post(f"/grupos/{grupo['id']}/miembros", json={"passenger_ids": [p["id"] for p in pasajeros[:3]]}, headers=admin_headers)

    response = client.patch(f"/grupos/{grupo['id']}", json={"max_members": 2}, headers=admin_headers)
    assert response.status_code == 400


def test_quitar_miembro_capitan(client, admin_headers, reserva_con_anticipo):
    pasajero = reserva_con_anticipo["reservation"]["passengers"][0]
    grupo = _crear_grupo(client, admin_headers)
    grupo = client.post(f"/grupos/{grupo['id']}/miembros", json={"passenger_ids": [pasajero["id"]]}, headers=admin_headers).json()
    client.patch(f"/grupos/{grupo['id']}", json={"captain_passenger_id": pasajero["id"]}, headers=admin_headers)

    member_id = grupo["members"][0]["id"]
    assert client.delete(f"/grupos/miembros/{member_id}", headers=admin_headers).status_code == 200

    actualizado = client.get(f"/grupos/{grupo['id']}", headers=admin_headers).json()
    assert actualizado["members_count"] == 0
    assert actualizado["captain_passenger_id"] is None


def test_eliminar_grupo(client, admin_headers, reserva_con_anticipo):
    pasajero = reserva_con_anticipo["reservation"]["passengers"][0]
    grupo = _crear_grupo(client, admin_headers)
    client.post(f"/grupos/{grupo['id']}/miembros", json={"passenger_ids": [pasajero["id"]]}, headers=admin_headers)

    assert client.delete(f"/grupos/{grupo['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/grupos/{grupo['id']}", headers=admin_headers).status_code == 404
    # El pasajero vuelve a estar disponible
    assert len(client.get("/grupos/elegibles", headers=admin_headers).json()) == 4


def test_mi_grupo_publico(client, admin_headers, reserva_con_anticipo):
    reserva = reserva_con_anticipo["reservation"]
    grupo = _crear_grupo(client, admin_headers, tour_datetime="2026-03-10T09:00:00")
    client.post(f"/grupos/{grupo['id']}/miembros", json={"passenger_ids": [reserva["passengers"][0]["id"]]}, headers=admin_headers)

    response = client.get("/grupos/mi-grupo", params={"codigo": reserva["reservation_code"].lower()})
    assert response.status_code == 200
    pasajeros = response.json()
    assert len(pasajeros) == 4
    assert pasajeros[0]["group"]["group_name"] == "Grupo Mañana"
    assert pasajeros[0]["group"]["members"] == [{"first_name": "Juan", "last_name": "Pérez"}]
    assert pasajeros[1]["group"] is None

    assert client.get("/grupos/mi-grupo", params={"codigo": "BETEL-NADA"}).status_code == 404
