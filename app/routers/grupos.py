# 📍 ARCHIVO: app/routers/grupos.py
# 🎯 PROPÓSITO: Subgrupos del recorrido (Betel) y consulta pública "mi grupo"

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import BadRequestException, ConflictException, NotFoundException
from app.core.pricing import ANTICIPO_PAGADO, PAGADO_COMPLETO
from app.core.security import get_current_admin
from app.database import get_db
from app.models.administrador import Administrador
from app.models.grupo import GrupoTour, MiembroGrupo
from app.models.pasajero import Pasajero
from app.models.reservacion import Reservacion
from app.schemas.grupo import (
    AsignarMiembros,
    GrupoCreate,
    GrupoResponse,
    GrupoUpdate,
    MiGrupoPasajero,
    PasajeroElegible,
)
from app.services.reservaciones import buscar_por_codigo

logger = logging.getLogger(__name__)
router = APIRouter()

# Solo viajan en grupo quienes ya dieron al menos el anticipo
ESTADOS_ELEGIBLES = (ANTICIPO_PAGADO, PAGADO_COMPLETO)


def _grupo_dict(grupo: GrupoTour) -> dict:
    return {
        "id": grupo.id,
        "group_name": grupo.group_name,
        "tour_datetime": grupo.tour_datetime,
        "max_members": grupo.max_members,
        "bethel_code": grupo.bethel_code,
        "captain_passenger_id": grupo.captain_passenger_id,
        "members_count": len(grupo.members),
        "members": [
            {
                "id": m.id,
                "passenger_id": m.passenger_id,
                "reservation_id": m.reservation_id,
                "first_name": m.passenger.first_name,
                "last_name": m.passenger.last_name,
                "reservation_code": m.reservation.reservation_code,
            }
            for m in grupo.members
        ],
    }


def _obtener_grupo(db: Session, group_id: int) -> GrupoTour:
    grupo = db.query(GrupoTour).options(
        joinedload(GrupoTour.members).joinedload(MiembroGrupo.passenger),
        joinedload(GrupoTour.members).joinedload(MiembroGrupo.reservation),
    ).filter(GrupoTour.id == group_id).first()
    if not grupo:
        raise NotFoundException("Grupo no encontrado")
    return grupo


@router.get("/", response_model=List[GrupoResponse])
def listar_grupos(db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    grupos = db.query(GrupoTour).options(
        joinedload(GrupoTour.members).joinedload(MiembroGrupo.passenger),
        joinedload(GrupoTour.members).joinedload(MiembroGrupo.reservation),
    ).order_by(GrupoTour.tour_datetime, GrupoTour.id).all()
    return [_grupo_dict(g) for g in grupos]


@router.post("/", response_model=GrupoResponse, status_code=status.HTTP_201_CREATED)
def crear_grupo(data: GrupoCreate, db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    grupo = GrupoTour(**data.dict())
    grupo.group_name = grupo.group_name.strip()
    db.add(grupo)
    db.commit()
    logger.info(f"👥 Grupo '{grupo.group_name}' creado")
    return _grupo_dict(_obtener_grupo(db, grupo.id))


@router.get("/elegibles", response_model=List[PasajeroElegible])
def pasajeros_elegibles(db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    """Pasajeros con anticipo o pago completo que aún no tienen grupo."""
    pasajeros = db.query(Pasajero).join(Reservacion).options(
        joinedload(Pasajero.reservation)
    ).filter(
        Reservacion.status.in_(ESTADOS_ELEGIBLES),
        ~Pasajero.id.in_(select(MiembroGrupo.passenger_id)),
    ).order_by(Pasajero.id).all()

    return [
        {
            "id": p.id,
            "first_name": p.first_name,
            "last_name": p.last_name,
            "congregation": p.congregation,
            "reservation_id": p.reservation_id,
            "reservation_code": p.reservation.reservation_code,
            "responsible_phone": p.reservation.responsible_phone,
        }
        for p in pasajeros
    ]


@router.get("/mi-grupo", response_model=List[MiGrupoPasajero])
def mi_grupo(codigo: str = Query(..., min_length=3), db: Session = Depends(get_db)):
    """Consulta pública: a qué grupo pertenece cada pasajero de la reservación."""
    reservacion = buscar_por_codigo(db, codigo)
    if not reservacion:
        raise NotFoundException("No se encontró una reservación con ese código")

    pasajeros = db.query(Pasajero).options(
        joinedload(Pasajero.group_membership)
    ).filter(Pasajero.reservation_id == reservacion.id).order_by(Pasajero.id).all()
    if not pasajeros:
        raise NotFoundException("No se encontraron pasajeros para esta reservación")

    resultado = []
    for p in pasajeros:
        info = None
        if p.group_membership:
            grupo = _obtener_grupo(db, p.group_membership.group_id)
            info = {
                "group_name": grupo.group_name,
                "tour_datetime": grupo.tour_datetime,
                "members": [
                    {"first_name": m.passenger.first_name, "last_name": m.passenger.last_name}
                    for m in grupo.members
                ],
            }
        resultado.append({
            "first_name": p.first_name,
            "last_name": p.last_name,
            "reservation_code": reservacion.reservation_code,
            "group": info,
        })
    return resultado


@router.get("/{group_id}", response_model=GrupoResponse)
def obtener_grupo(group_id: int, db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    return _grupo_dict(_obtener_grupo(db, group_id))


@router.patch("/{group_id}", response_model=GrupoResponse)
def actualizar_grupo(
    group_id: int,
    data: GrupoUpdate,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    grupo = _obtener_grupo(db, group_id)
    cambios = data.dict(exclude_unset=True)

    if "captain_passenger_id" in cambios and cambios["captain_passenger_id"] is not None:
        es_miembro = any(m.passenger_id == cambios["captain_passenger_id"] for m in grupo.members)
        if not es_miembro:
            raise BadRequestException("El capitán debe ser miembro del grupo")

    if cambios.get("max_members") is not None and cambios["max_members"] < len(grupo.members):
        raise BadRequestException(f"El grupo ya tiene {len(grupo.members)} miembros")

    if "group_name" in cambios and cambios["group_name"] is not None:
        cambios["group_name"] = cambios["group_name"].strip()

    for campo, valor in cambios.items():
        setattr(grupo, campo, valor)

    db.commit()
    return _grupo_dict(_obtener_grupo(db, group_id))


@router.delete("/{group_id}")
def eliminar_grupo(group_id: int, db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    grupo = _obtener_grupo(db, group_id)
    db.delete(grupo)
    db.commit()
    logger.info(f"🗑️ Grupo {group_id} eliminado por {admin.email}")
    return {"detail": "Grupo eliminado"}


@router.post("/{group_id}/miembros", response_model=GrupoResponse)
def asignar_miembros(
    group_id: int,
    data: AsignarMiembros,
    db: Session = Depends(get_db),
    admin: Administrador = Depends(get_current_admin),
):
    grupo = _obtener_grupo(db, group_id)
    ids = list(dict.fromkeys(data.passenger_ids))

    lugares = grupo.max_members - len(grupo.members)
    if len(ids) > lugares:
        raise BadRequestException(f"Solo quedan {lugares} lugares en este grupo")

    pasajeros = db.query(Pasajero).join(Reservacion).filter(Pasajero.id.in_(ids)).all()
    encontrados = {p.id: p for p in pasajeros}
    faltantes = [i for i in ids if i not in encontrados]
    if faltantes:
        raise NotFoundException(f"Pasajeros no encontrados: {faltantes}")

    no_elegibles = [p.id for p in pasajeros if p.reservation.status not in ESTADOS_ELEGIBLES]
    if no_elegibles:
        raise BadRequestException(f"Pasajeros sin anticipo pagado: {no_elegibles}")

    ya_asignados = db.query(MiembroGrupo.passenger_id).filter(MiembroGrupo.passenger_id.in_(ids)).all()
    if ya_asignados:
        raise ConflictException(f"Pasajeros ya asignados a un grupo: {sorted(a[0] for a in ya_asignados)}")

    for passenger_id in ids:
        db.add(MiembroGrupo(
            group_id=grupo.id,
            passenger_id=passenger_id,
            reservation_id=encontrados[passenger_id].reservation_id,
        ))
    db.commit()

    logger.info(f"👥 {len(ids)} pasajeros asignados al grupo '{grupo.group_name}'")
    db.expire_all()
    return _grupo_dict(_obtener_grupo(db, group_id))


@router.delete("/miembros/{member_id}")
def quitar_miembro(member_id: int, db: Session = Depends(get_db), admin: Administrador = Depends(get_current_admin)):
    miembro = db.query(MiembroGrupo).filter(MiembroGrupo.id == member_id).first()
    if not miembro:
        raise NotFoundException("Miembro no encontrado")

    grupo = db.query(GrupoTour).filter(GrupoTour.id == miembro.group_id).first()
    if grupo and grupo.captain_passenger_id == miembro.passenger_id:
        grupo.captain_passenger_id = None

    db.delete(miembro)
    db.commit()
    return {"detail": "Miembro eliminado del grupo"}
