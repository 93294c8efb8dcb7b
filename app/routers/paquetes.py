# 📍 ARCHIVO: app/routers/paquetes.py
# 🎯 PROPÓSITO: Paquetes de atracciones (museos / acuario) que se venden aparte del viaje

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestException, NotFoundException
from app.core.pricing import PAQUETE_PENDIENTE, derive_package_status, to_decimal
from app.core.security import get_current_admin
from app.database import get_db
from app.models.administrador import Administrador
from app.models.paquete import PaqueteReserva
from app.schemas.paquete import (
    ConsolidarRequest,
    PagoPaqueteCreate,
    PaqueteCatalogo,
    PaqueteReservaCreate,
    PaqueteReservaResponse,
    PaqueteReservaUpdate,
    ReservaAgrupada,
)
from app.services.paquetes import CATALOGO_PAQUETES, agrupar_por_codigo, consolidar, extraer_codigo_betel, precio_paquete
from app.services.payments import registrar_pago_paquete

logger = logging.getLogger(__name__)
router = APIRouter()


def _obtener_paquete(db: Session, package_id: int) -> PaqueteReserva:
    paquete = db.query(PaqueteReserva).filter(PaqueteReserva.id == package_id).first()
    if not paquete:
        raise NotFoundException("Reserva de paquete no encontrada")
    return paquete


@router.get("/catalogo", response_model=List[PaqueteCatalogo])
def catalogo():
    return [
        {"package_type": tipo, **datos}
        for tipo, datos in CATALOGO_PAQUETES.items()
    ]


@router.get("/", response_model=List[PaqueteReservaResponse])
def listar_paquetes(
    tipo: Optional[str] = Query(None, description="Filtrar por tipo de paquete"),
    estado: Optional[str] = Query(None, pattern="^(pendiente|parcial|pagado)$"),
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    query = db.query(PaqueteReserva)
    if tipo:
        query = query.filter(PaqueteReserva.package_type == tipo)
    if estado:
        query = query.filter(PaqueteReserva.payment_status == estado)
    return query.order_by(PaqueteReserva.created_at.desc(), PaqueteReserva.id.desc()).all()


@router.get("/agrupados", response_model=List[ReservaAgrupada])
def paquetes_agrupados(db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    """Vista por código de viaje: un renglón por responsable con sus paquetes sumados."""
    return agrupar_por_codigo(db.query(PaqueteReserva).all())


@router.post("/", response_model=PaqueteReservaResponse, status_code=status.HTTP_201_CREATED)
def crear_paquete(
    data: PaqueteReservaCreate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    precio = precio_paquete(data.package_type)
    codigo = (data.reservation_code or "").strip().upper() or extraer_codigo_betel(data.notes)

    paquete = PaqueteReserva(
        package_type=data.package_type,
        responsible_name=data.responsible_name.strip(),
        reservation_code=codigo,
        num_people=data.num_people,
        unit_price=precio,
        total_amount=precio * data.num_people,
        amount_paid=to_decimal(0),
        payment_status=PAQUETE_PENDIENTE,
        notes=data.notes,
    )
    db.add(paquete)
    db.commit()
    db.refresh(paquete)

    logger.info(f"🎟️ Paquete {paquete.package_type} x{paquete.num_people} para {paquete.responsible_name}")
    return paquete


@router.get("/{package_id}", response_model=PaqueteReservaResponse)
def obtener_paquete(package_id: int, db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    return _obtener_paquete(db, package_id)


@router.patch("/{package_id}", response_model=PaqueteReservaResponse)
def actualizar_paquete(
    package_id: int,
    data: PaqueteReservaUpdate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    paquete = _obtener_paquete(db, package_id)
    cambios = data.dict(exclude_unset=True)

    if cambios.get("responsible_name"):
        paquete.responsible_name = cambios["responsible_name"].strip()
    if "reservation_code" in cambios:
        paquete.reservation_code = (cambios["reservation_code"] or "").strip().upper() or None
    if "notes" in cambios:
        paquete.notes = cambios["notes"]

    if cambios.get("num_people") is not None:
        paquete.num_people = cambios["num_people"]
        paquete.total_amount = to_decimal(paquete.unit_price) * paquete.num_people
        paquete.payment_status = derive_package_status(paquete.amount_paid, paquete.total_amount)

    db.commit()
    db.refresh(paquete)
    return paquete


@router.delete("/{package_id}")
def eliminar_paquete(package_id: int, db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    paquete = _obtener_paquete(db, package_id)
    db.delete(paquete)
    db.commit()
    logger.info(f"🗑️ Paquete {package_id} eliminado por {admin.email}")
    return {"detail": "Reserva de paquete eliminada"}


@router.post("/{package_id}/pagos", response_model=PaqueteReservaResponse, status_code=status.HTTP_201_CREATED)
def registrar_pago(
    package_id: int,
    data: PagoPaqueteCreate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    paquete = _obtener_paquete(db, package_id)

    try:
        registrar_pago_paquete(db, paquete, data)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"❌ Error al registrar el pago del paquete {package_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al registrar el pago",
        )

    db.refresh(paquete)
    return paquete


@router.post("/consolidar", response_model=PaqueteReservaResponse)
def consolidar_paquetes(
    data: ConsolidarRequest,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    ids = list(dict.fromkeys(data.ids))
    paquetes = db.query(PaqueteReserva).filter(PaqueteReserva.id.in_(ids)).all()
    if len(paquetes) != len(ids):
        encontrados = {p.id for p in paquetes}
        raise NotFoundException(f"Paquetes no encontrados: {[i for i in ids if i not in encontrados]}")

    codigos = {p.reservation_code or extraer_codigo_betel(p.notes) for p in paquetes}
    if len(codigos) > 1:
        raise BadRequestException("Los registros pertenecen a distintas reservaciones")

    try:
        principal = consolidar(db, paquetes)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"❌ Error al consolidar los paquetes {ids}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al consolidar los registros",
        )

    db.refresh(principal)
    logger.info(f"🧩 {len(ids)} registros consolidados en el paquete {principal.id}")
    return principal
