# 📍 ARCHIVO: app/services/paquetes.py
# 🎯 PROPÓSITO: Catálogo de paquetes de atracciones, agrupación y consolidación de registros.

import re
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestException
from app.core.pricing import derive_package_status, to_decimal
from app.models.paquete import PaqueteReserva

CATALOGO_PAQUETES: Dict[str, dict] = {
    "museos": {
        "name": "Museos",
        "description": "Museo de Cera + Museo Ripley + Viaje Fantástico",
        "price": 175,
    },
    "acuario_adultos": {
        "name": "Acuario + Museos (Adultos)",
        "description": "Acuario + Museos completo",
        "price": 345,
    },
    "acuario_ninos": {
        "name": "Acuario + Museos (Niños)",
        "description": "Acuario + Museos completo",
        "price": 285,
    },
}

SIN_CODIGO = "SIN_CODIGO"
_BETEL_EN_NOTAS = re.compile(r"Reservacion Betel:\s*(BETEL-[A-Z0-9-]+)", re.IGNORECASE)


def precio_paquete(package_type: str):
    paquete = CATALOGO_PAQUETES.get(package_type)
    if paquete is None:
        raise BadRequestException(f"Tipo de paquete inválido: {package_type}")
    return to_decimal(paquete["price"])


def extraer_codigo_betel(notes: Optional[str]) -> Optional[str]:
    if not notes:
        return None
    match = _BETEL_EN_NOTAS.search(notes)
    return match.group(1).upper() if match else None


def codigo_de(paquete: PaqueteReserva) -> str:
    return paquete.reservation_code or extraer_codigo_betel(paquete.notes) or SIN_CODIGO


def agrupar_por_codigo(paquetes: List[PaqueteReserva]) -> List[dict]:
    """
    Agrupa por código de viaje y responsable, y dentro de cada grupo
    consolida por tipo de paquete. Los grupos más recientes van primero.
    """
    grupos: "OrderedDict[tuple, dict]" = OrderedDict()

    ordenados = sorted(paquetes, key=lambda p: (p.created_at is not None, p.created_at, p.id), reverse=True)
    for p in ordenados:
        clave = (codigo_de(p), p.responsible_name or "Sin nombre")
        grupo = grupos.setdefault(clave, {
            "reservation_code": clave[0],
            "responsible_name": clave[1],
            "items": OrderedDict(),
            "total_amount": to_decimal(0),
            "total_paid": to_decimal(0),
        })
        item = grupo["items"].setdefault(p.package_type, {
            "package_type": p.package_type,
            "num_people": 0,
            "total_amount": to_decimal(0),
            "amount_paid": to_decimal(0),
            "ids": [],
        })
        item["num_people"] += p.num_people
        item["total_amount"] += to_decimal(p.total_amount)
        item["amount_paid"] += to_decimal(p.amount_paid)
        item["ids"].append(p.id)
        grupo["total_amount"] += to_decimal(p.total_amount)
        grupo["total_paid"] += to_decimal(p.amount_paid)

    resultado = []
    for grupo in grupos.values():
        resultado.append({
            "reservation_code": grupo["reservation_code"],
            "responsible_name": grupo["responsible_name"],
            "items": list(grupo["items"].values()),
            "total_amount": grupo["total_amount"],
            "total_paid": grupo["total_paid"],
            "total_pending": grupo["total_amount"] - grupo["total_paid"],
            "payment_status": derive_package_status(grupo["total_paid"], grupo["total_amount"]),
        })
    return resultado


def consolidar(db: Session, paquetes: List[PaqueteReserva]) -> PaqueteReserva:
    """
    Fusiona registros duplicados del mismo tipo en el primero (el de menor id).
    Los pagos de los demás se trasladan al registro que se conserva. No hace commit.
    """
    if len(paquetes) < 2:
        raise BadRequestException("Solo hay 1 registro, no es necesario consolidar")

    tipos = {p.package_type for p in paquetes}
    if len(tipos) > 1:
        raise BadRequestException("Solo se pueden consolidar registros del mismo tipo de paquete")

    paquetes = sorted(paquetes, key=lambda p: p.id)
    principal, resto = paquetes[0], paquetes[1:]

    principal.num_people = sum(p.num_people for p in paquetes)
    principal.total_amount = sum((to_decimal(p.total_amount) for p in paquetes), to_decimal(0))
    principal.amount_paid = sum((to_decimal(p.amount_paid) for p in paquetes), to_decimal(0))
    principal.payment_status = derive_package_status(principal.amount_paid, principal.total_amount)

    notas = [p.notes for p in paquetes if p.notes]
    principal.notes = "\n".join(notas) if notas else None

    for p in resto:
        for pago in list(p.payments):
            pago.package_reservation = principal
        db.delete(p)

    db.flush()
    return principal
