#!/usr/bin/env python3
"""
CLI de administración

Uso:
    python -m app.cli crear-admin correo@ejemplo.com --password secreto
    python -m app.cli desactivar-admin correo@ejemplo.com
    python -m app.cli reconciliar
"""

import argparse
import getpass
import sys

from sqlalchemy.orm import Session

from app.core.logging_config import configure_logging
from app.core.security import get_password_hash
from app.database import Base, SessionLocal, engine
from app.models.administrador import Administrador
from app.services.reconciliation import reconcile_all


def crear_admin(db: Session, email: str, password: str) -> Administrador:
    """Alta o reactivación de un administrador; si ya existe se cambia su contraseña."""
    email = email.strip().lower()
    admin = db.query(Administrador).filter(Administrador.email == email).first()
    if admin:
        admin.hashed_password = get_password_hash(password)
        admin.active = True
    else:
        admin = Administrador(email=email, hashed_password=get_password_hash(password), active=True)
        db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def desactivar_admin(db: Session, email: str) -> bool:
    admin = db.query(Administrador).filter(Administrador.email == email.strip().lower()).first()
    if not admin:
        return False
    admin.active = False
    db.commit()
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Administración de Vamos a Betel")
    sub = parser.add_subparsers(dest="comando")

    crear = sub.add_parser("crear-admin", help="Crear o reactivar un administrador")
    crear.add_argument("email")
    crear.add_argument("--password", help="Si se omite se pide por consola")

    desactivar = sub.add_parser("desactivar-admin", help="Quitar el acceso a un administrador")
    desactivar.add_argument("email")

    sub.add_parser("reconciliar", help="Recalcular totales y estados de todas las reservaciones")

    args = parser.parse_args(argv)
    if not args.comando:
        parser.print_help()
        return 1

    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if args.comando == "crear-admin":
            password = args.password or getpass.getpass("Contraseña: ")
            if len(password) < 8:
                print("❌ La contraseña debe tener al menos 8 caracteres")
                return 1
            admin = crear_admin(db, args.email, password)
            print(f"✅ Administrador {admin.email} listo")

        elif args.comando == "desactivar-admin":
            if not desactivar_admin(db, args.email):
                print(f"❌ No existe el administrador {args.email}")
                return 1
            print(f"✅ Administrador {args.email} desactivado")

        elif args.comando == "reconciliar":
            reporte = reconcile_all(db)
            print("\n🔄 Reconciliación:")
            print("=" * 60)
            print(f"  Reservaciones revisadas:    {reporte.reservations_checked}")
            print(f"  Reservaciones actualizadas: {reporte.reservations_updated}")
            print(f"  Pasajeros corregidos:       {reporte.passengers_updated}")
            for plan in reporte.plans:
                for campo, (antes, despues) in plan.changes.items():
                    print(f"    • {plan.reservation_code}: {campo} {antes} → {despues}")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
