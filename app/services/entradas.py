# 📍 ARCHIVO: app/services/entradas.py
# 🎯 PROPÓSITO: Catálogo de entradas a zonas turísticas y armado de órdenes

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple

from app.config import settings
from app.core.exceptions import BadRequestException
from app.core.pricing import to_decimal
from app.models.pasajero import Pasajero
from app.schemas.entradas import ItemEntrada

ACTIVIDADES: Dict[str, dict] = {
    "aztlan": {
        "name": "Aztlán Parque Urbano",
        "variants": {
            "aztlan_infant": {"name": "Infantil / Rueda (<1.29m)", "price": 350},
            "aztlan_plus": {"name": "Plus / Rueda (>1.29m)", "price": 600},
        },
    },
    "acuario": {
        "name": "Acuario Veracruz",
        "variants": {
            "acuario_adult": {"name": "Adulto", "price": 170},
            "acuario_child": {"name": "Niño (2+ años)", "price": 110},
        },
    },
    "blumia": {
        "name": "Blumia",
        "variants": {
            "blumia_adult": {"name": "Adulto", "price": 159},
            "blumia_child": {"name": "Niño", "price": 89},
        },
    },
}

MAX_ITEMS_DETALLADOS = 3
CENTAVOS = Decimal("0.01")


def buscar_variante(variant_id: str) -> Tuple[str, dict, dict]:
    for activity_id, actividad in ACTIVIDADES.items():
        variante = actividad["variants"].get(variant_id)
        if variante:
            return activity_id, actividad, variante
    raise BadRequestException(f"Entrada inválida: {variant_id}")


def construir_items(items: List[ItemEntrada], pasajeros: List[Pasajero]) -> List[dict]:
    """
    Valida el carrito contra el catálogo y los pasajeros de la reservación.
    Cada pasajero lleva como máximo una entrada por actividad.
    """
    por_id = {p.id: p for p in pasajeros}
    vistos = set()
    resultado = []

    for item in items:
        activity_id, actividad, variante = buscar_variante(item.variant_id)

        nombre = item.passenger_name
        if item.passenger_id is not None:
            pasajero = por_id.get(item.passenger_id)
            if pasajero is None:
                raise BadRequestException(f"El pasajero {item.passenger_id} no pertenece a esta reservación")
            if (item.passenger_id, activity_id) in vistos:
                raise BadRequestException(f"{pasajero.full_name} ya tiene una entrada para {actividad['name']}")
            vistos.add((item.passenger_id, activity_id))
            nombre = pasajero.full_name

        resultado.append({
            "activity_id": activity_id,
            "name": actividad["name"],
            "variant_id": item.variant_id,
            "variant_name": variante["name"],
            "price": variante["price"],
            "quantity": item.quantity,
            "passenger_id": item.passenger_id,
            "passenger_name": nombre or "Sin nombre",
        })
    return resultado


def calcular_montos(items: List[dict], payment_method: str) -> Tuple[Decimal, Decimal, Decimal]:
    """(subtotal, comisión, total). La comisión solo aplica al pago con tarjeta."""
    subtotal = sum((to_decimal(i["price"]) * i["quantity"] for i in items), Decimal("0"))
    comision = Decimal("0")
    if payment_method == "card":
        comision = (subtotal * to_decimal(settings.CARD_COMMISSION_RATE)).quantize(CENTAVOS, rounding=ROUND_HALF_UP)
    return subtotal, comision, subtotal + comision


def items_mercadopago(items: List[dict], comision: Decimal, reservation_code: str) -> List[dict]:
    """Renglones para la preferencia; con más de 3 se resumen en uno solo."""
    renglones = [
        {
            "id": i["variant_id"],
            "title": f"{reservation_code} - Entrada {i['name']}",
            "description": f"{i['variant_name']} para {i['passenger_name']}",
            "quantity": i["quantity"],
            "unit_price": float(i["price"]),
            "currency_id": settings.MP_CURRENCY,
        }
        for i in items
    ]
    if comision > 0:
        renglones.append({
            "id": "commission",
            "title": f"{reservation_code} - Comisión por servicio",
            "description": "Comisión por pago con tarjeta",
            "quantity": 1,
            "unit_price": float(comision),
            "currency_id": settings.MP_CURRENCY,
        })

    if len(renglones) > MAX_ITEMS_DETALLADOS:
        incluye = ", ".join(f"{i['name']} ({i['variant_name']})" for i in items)
        if len(incluye) > 200:
            incluye = incluye[:200] + "..."
        total = sum((to_decimal(i["price"]) * i["quantity"] for i in items), Decimal("0")) + comision
        renglones = [{
            "id": "tourist_attractions",
            "title": f"{reservation_code} - Entradas a Zonas Turísticas",
            "description": f"Incluye: {incluye}",
            "quantity": 1,
            "unit_price": float(total.quantize(CENTAVOS, rounding=ROUND_HALF_UP)),
            "currency_id": settings.MP_CURRENCY,
        }]
    return renglones
