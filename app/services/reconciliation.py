# 📍 ARCHIVO: app/services/reconciliation.py
# 🎯 PROPÓSITO: Mantener los totales de cada reservación consistentes con sus pasajeros y pagos.
#
# Se ejecuta dentro de la misma transacción que la escritura que la dispara
# (alta/baja/edición de pasajeros, registro de pagos). El barrido completo
# reconcile_all solo corrige datos heredados y es idempotente.

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from app.config import settings
from app.core.pricing import calculate_totals, derive_status, is_free_under6, to_decimal
from app.models.pasajero import Pasajero
from app.models.reservacion import Reservacion

logger = logging.getLogger(__name__)

# Campos agregados que la reconciliación puede reescribir
RECONCILED_FIELDS = ("seats_total", "seats_payable", "unit_price", "total_amount", "deposit_required", "status")


@dataclass
class PassengerFix:
    passenger_id: int
    is_free_under6: bool


@dataclass
class ReconciliationPlan:
    reservation_id: int
    reservation_code: str
    passenger_fixes: List[PassengerFix] = field(default_factory=list)
    # campo -> (valor guardado, valor correcto)
    changes: Dict[str, Tuple[object, object]] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.passenger_fixes or self.changes)


@dataclass
class ReconciliationReport:
    reservations_checked: int = 0
    passengers_updated: int = 0
    plans: List[ReconciliationPlan] = field(default_factory=list)

    @property
    def reservations_updated(self) -> int:
        return sum(1 for plan in self.plans if plan.changes)


def _differs(stored, expected) -> bool:
    if isinstance(expected, str):
        return stored != expected
    if stored is None:
        return True
    return to_decimal(stored) != to_decimal(expected)


def plan_reservation(reservation: Reservacion, passengers: List[Pasajero], unit_price=None) -> ReconciliationPlan:
    """
    Calcula, sin tocar la base de datos, qué hay que corregir en una reservación.
    La edad es la única fuente de verdad para saber quién paga.
    """
    price = settings.UNIT_PRICE if unit_price is None else unit_price
    plan = ReconciliationPlan(reservation_id=reservation.id, reservation_code=reservation.reservation_code)

    payable = 0
    for passenger in passengers:
        free = is_free_under6(passenger.age)
        if bool(passenger.is_free_under6) != free:
            plan.passenger_fixes.append(PassengerFix(passenger.id, free))
        if not free:
            payable += 1

    total_amount, deposit_required = calculate_totals(payable, price)
    expected = {
        "seats_total": len(passengers),
        "seats_payable": payable,
        "unit_price": to_decimal(price),
        "total_amount": total_amount,
        "deposit_required": deposit_required,
        "status": derive_status(reservation.status, reservation.amount_paid, total_amount, deposit_required),
    }

    for name in RECONCILED_FIELDS:
        stored = getattr(reservation, name)
        if _differs(stored, expected[name]):
            plan.changes[name] = (stored, expected[name])

    return plan


def apply_plan(reservation: Reservacion, passengers: List[Pasajero], plan: ReconciliationPlan) -> None:
    by_id = {p.id: p for p in passengers}
    for fix in plan.passenger_fixes:
        by_id[fix.passenger_id].is_free_under6 = fix.is_free_under6

    for name, (_, new_value) in plan.changes.items():
        setattr(reservation, name, new_value)


def reconcile_reservation(db: Session, reservation: Reservacion) -> ReconciliationPlan:
    """
    Reconciliar una reservación dentro de la transacción actual.
    No hace commit: quien llama decide cuándo confirmar todo junto.
    """
    db.flush()
    passengers = db.query(Pasajero).filter(
        Pasajero.reservation_id == reservation.id
    ).order_by(Pasajero.id).all()

    plan = plan_reservation(reservation, passengers)
    if plan.has_changes:
        apply_plan(reservation, passengers, plan)
        db.flush()
        logger.info(
            f"🔄 Reservación {reservation.reservation_code} reconciliada: "
            f"{len(plan.passenger_fixes)} pasajeros, campos {sorted(plan.changes)}"
        )
    return plan


def reconcile_all(db: Session) -> ReconciliationReport:
    """
    Barrido completo: todas las reservaciones y todos los pasajeros.
    Confirma una sola vez; si algo falla se revierte todo.
    """
    reservations = db.query(Reservacion).order_by(Reservacion.id).all()
    passengers_by_reservation = defaultdict(list)
    for passenger in db.query(Pasajero).order_by(Pasajero.id).all():
        passengers_by_reservation[passenger.reservation_id].append(passenger)

    report = ReconciliationReport()
    try:
        for reservation in reservations:
            report.reservations_checked += 1
            passengers = passengers_by_reservation.get(reservation.id, [])
            plan = plan_reservation(reservation, passengers)
            if not plan.has_changes:
                continue
            apply_plan(reservation, passengers, plan)
            report.passengers_updated += len(plan.passenger_fixes)
            report.plans.append(plan)

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("❌ Error durante la reconciliación completa, cambios revertidos")
        raise

    logger.info(
        f"✅ Reconciliación completa: {report.reservations_checked} revisadas, "
        f"{report.reservations_updated} corregidas, {report.passengers_updated} pasajeros"
    )
    return report
