from app.cli import crear_admin, desactivar_admin, main
from app.core.security import verify_password
from app.models.administrador import Administrador


def test_crear_admin_normaliza_correo(db):
    admin = crear_admin(db, "  Nuevo@Betel.MX ", "clave-larga-1")
    assert admin.email == "nuevo@betel.mx"
    assert admin.active is True
    assert verify_password("clave-larga-1", admin.hashed_password)


def test_crear_admin_existente_cambia_contrasena(db):
    crear_admin(db, "nuevo@betel.mx", "clave-larga-1")
    desactivar_admin(db, "nuevo@betel.mx")
    admin = crear_admin(db, "nuevo@betel.mx", "clave-larga-2")

    assert db.query(Administrador).count() == 1
    assert admin.active is True
    assert verify_password("clave-larga-2", admin.hashed_password)


def test_desactivar_inexistente(db):
    assert desactivar_admin(db, "nadie@betel.mx") is False


def test_main_sin_comando():
    assert main([]) == 1
