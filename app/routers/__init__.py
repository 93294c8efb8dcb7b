from .auth import router as auth_router
from .reservaciones import router as reservaciones_router
from .modificacion import router as modificacion_router
from .pasajeros import router as pasajeros_router
from .pagos import router as pagos_router
from .grupos import router as grupos_router
from .paquetes import router as paquetes_router
from .entradas import router as entradas_router
from .reportes import router as reportes_router

__all__ = [
    "auth_router", "reservaciones_router", "modificacion_router", "pasajeros_router",
    "pagos_router", "grupos_router", "paquetes_router", "entradas_router", "reportes_router",
]
