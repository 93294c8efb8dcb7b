from .reservacion import Reservacion
from .pasajero import Pasajero
from .pago import Pago
from .grupo import GrupoTour, MiembroGrupo
from .paquete import PaqueteReserva, PagoPaquete
from .orden_entradas import OrdenEntradas
from .administrador import Administrador

__all__ = [
    "Reservacion", "Pasajero", "Pago", "GrupoTour", "MiembroGrupo",
    "PaqueteReserva", "PagoPaquete", "OrdenEntradas", "Administrador"
]
